"""AllPairsBlocker implementation for exhaustive candidate generation.

This blocker generates every unordered pair of distinct accounts, so the
comparator sees all N*(N-1)/2 combinations. It is the reference blocker for
batch duplicate analysis over a few thousand accounts.
"""

from collections.abc import Iterator, Sequence
from typing import Any

from leadres.core.blocker import Blocker
from leadres.core.models import AccountCandidate, AccountSchema, PairKey
from leadres.core.reports import CandidateInspectionReport


class AllPairsBlocker(Blocker):
    """Blocker that yields every unordered pair of distinct accounts.

    Example:
        blocker = AllPairsBlocker()
        candidates = blocker.stream(
            [
                {"id": 1, "companyName": "Acme Corp"},
                {"id": 2, "companyName": "Acme Corporation"},
                {"id": 3, "companyName": "Globex"},
            ]
        )
        # (1, 2), (1, 3), (2, 3)

    Note:
        Pairs follow list position: for i < j, left is data[i] and right is
        data[j]. A PairKey set guards against the same two ids appearing
        twice (duplicate rows in the input), and rows sharing an id are never
        paired.

    Note:
        This blocker has O(N²) complexity and is meant for offline batch runs.
    """

    name = "all_pairs_blocker"

    def stream(self, data: Sequence[AccountSchema | dict[str, Any]]) -> Iterator[AccountCandidate]:
        """Generate all unordered pairs of distinct accounts.

        Args:
            data: Account rows (dicts or AccountSchema) in a fixed order.

        Yields:
            AccountCandidate objects with blocker_name "all_pairs_blocker".
        """
        accounts = [self.to_account(row) for row in data]
        seen: set[PairKey] = set()

        for i, left in enumerate(accounts):
            for right in accounts[i + 1 :]:
                if left.id == right.id:
                    continue
                key = PairKey.of(left.id, right.id)
                if key in seen:
                    continue
                seen.add(key)
                yield AccountCandidate(left=left, right=right, blocker_name=self.name)

    def inspect_candidates(
        self,
        candidates: list[AccountCandidate],
        accounts: Sequence[AccountSchema],
        sample_size: int = 10,
    ) -> CandidateInspectionReport:
        """Explore AllPairs candidates.

        Args:
            candidates: List of generated candidate pairs
            accounts: Original list of accounts
            sample_size: Number of example pairs to include in report

        Returns:
            CandidateInspectionReport with counts, sample pairs and
            scalability recommendations based on dataset size.
        """
        n = len(accounts)
        total_candidates = len(candidates)

        examples = [
            {
                "account_id_a": cand.left.id,
                "account_id_b": cand.right.id,
                "company_name_a": cand.left.company_name,
                "company_name_b": cand.right.company_name,
            }
            for cand in candidates[:sample_size]
        ]

        recommendations: list[str] = []
        if n > 5000:
            recommendations.append(
                f"⚠️ {n} accounts produce {total_candidates:,} pairs. Expect a long batch run; "
                f"schedule it offline."
            )
        else:
            recommendations.append(
                f"✅ Exhaustive comparison is practical (n={n}, {total_candidates:,} pairs)."
            )

        return CandidateInspectionReport(
            total_candidates=total_candidates,
            total_accounts=n,
            examples=examples,
            recommendations=recommendations,
        )
