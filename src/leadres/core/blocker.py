"""
Blocker base class for candidate generation and row validation.

This module provides the abstract base class for all blocking (candidate
generation) implementations in the leadres engine.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from typing import Any

from leadres.core.models import AccountCandidate, AccountSchema
from leadres.core.reports import CandidateInspectionReport


class Blocker(ABC):
    """Abstract base class for candidate generation.

    The Blocker has two responsibilities:

    1. **Validate rows**: turn raw account rows (dicts from a store, or
       AccountSchema objects) into AccountSchema
    2. **Generate candidate pairs**: yield every pair the Module should
       compare, each unordered pair at most once

    The Blocker is NOT responsible for:
    - Comparing accounts (that's the Module's job)
    - Making match decisions
    - Assigning duplicate groups

    Example:
        class SameZipBlocker(Blocker):
            '''Only pairs accounts whose address ends with the same token.'''

            def stream(self, data):
                accounts = [self.to_account(row) for row in data]
                by_zip = defaultdict(list)
                for account in accounts:
                    by_zip[tuple((account.address or "").split()[-1:])].append(account)
                for bucket in by_zip.values():
                    for i, left in enumerate(bucket):
                        for right in bucket[i + 1 :]:
                            yield AccountCandidate(left=left, right=right, blocker_name="same_zip")
    """

    @staticmethod
    def to_account(row: AccountSchema | dict[str, Any]) -> AccountSchema:
        """Validate a raw row into an AccountSchema.

        Args:
            row: Either an AccountSchema (returned unchanged) or a dict using
                snake_case or camelCase field names.

        Returns:
            AccountSchema instance

        Raises:
            pydantic.ValidationError: If the row lacks an id or the companyName
                key. A null companyName is accepted as an empty name.
        """
        if isinstance(row, AccountSchema):
            return row
        return AccountSchema.model_validate(row)

    @abstractmethod
    def stream(self, data: Sequence[AccountSchema | dict[str, Any]]) -> Iterator[AccountCandidate]:
        """Generate candidate pairs from input accounts.

        Args:
            data: Account rows in a fixed, reproducible order. Order decides
                which group wins when matches are assigned first-come.

        Yields:
            AccountCandidate objects. Implementations must never yield a pair
            of accounts sharing the same id, and must yield each unordered
            pair at most once.
        """
        pass  # pragma: no cover

    @abstractmethod
    def inspect_candidates(
        self,
        candidates: list[AccountCandidate],
        accounts: Sequence[AccountSchema],
        sample_size: int = 10,
    ) -> CandidateInspectionReport:
        """Explore candidates without ground truth labels.

        Args:
            candidates: List of candidate pairs generated by the blocker
            accounts: Accounts the pairs were drawn from
            sample_size: Number of examples to include in report (default: 10)

        Returns:
            CandidateInspectionReport with statistics, examples, and
            recommendations.
        """
        pass  # pragma: no cover
