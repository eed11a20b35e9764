"""
Group assignment for duplicate matches.

This module provides the DuplicateClusterer class, which assigns pairwise
MatchRecords to duplicate groups keyed by freshly generated group ids.
"""

import logging
import uuid
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Literal

from networkx.utils import UnionFind

from leadres.core.models import AccountSchema, DuplicateGroup, MatchRecord
from leadres.core.reports import ClusterInspectionReport

logger = logging.getLogger(__name__)

MergeStrategy = Literal["transitive", "first_match"]


def _new_group_id() -> str:
    return str(uuid.uuid4())


class DuplicateClusterer:
    """Assigns matches to duplicate groups.

    Two strategies are supported:

    - ``"transitive"`` (default): groups are the connected components of the
      match graph, computed with a union-find keyed by account id. A match
      that touches two existing groups merges them.
    - ``"first_match"``: a match joins the earliest-created group that
      already contains either of its accounts, otherwise it starts a new
      group. Groups are never merged, so a bridging match leaves two groups.

    Example:
        clusterer = DuplicateClusterer()
        groups = clusterer.cluster(matches)
        # {"3f2b...": [MatchRecord(1, 2), MatchRecord(2, 3)], "9a1c...": [...]}

    Note:
        Group ids are new UUIDs on every call. Group membership depends only
        on the order of the matches, so re-running on unchanged input yields
        the same memberships under different ids.
    """

    def __init__(
        self,
        strategy: MergeStrategy = "transitive",
        id_factory: Callable[[], str] = _new_group_id,
    ):
        """Initialize clusterer.

        Args:
            strategy: "transitive" or "first_match".
            id_factory: Callable producing a new unique group id.

        Raises:
            ValueError: If strategy is not supported.
        """
        if strategy not in ("transitive", "first_match"):
            raise ValueError(f"strategy must be one of: transitive, first_match. Got: {strategy}")
        self.strategy = strategy
        self.id_factory = id_factory

    def cluster(self, matches: Iterable[MatchRecord]) -> dict[str, list[MatchRecord]]:
        """Assign matches to duplicate groups.

        Args:
            matches: MatchRecords in discovery order.

        Returns:
            Mapping of group id to the matches in that group. Groups appear in
            the order their first match was seen; matches keep their order.
        """
        if self.strategy == "transitive":
            groups = self._cluster_transitive(list(matches))
        else:
            groups = self._cluster_first_match(matches)

        logger.debug("Assigned matches to %d duplicate groups (%s)", len(groups), self.strategy)
        return groups

    def _cluster_transitive(self, matches: list[MatchRecord]) -> dict[str, list[MatchRecord]]:
        components = UnionFind()
        for match in matches:
            components.union(match.account_id_a, match.account_id_b)

        by_root: dict[int, list[MatchRecord]] = {}
        for match in matches:
            by_root.setdefault(components[match.account_id_a], []).append(match)

        return {self.id_factory(): group for group in by_root.values()}

    def _cluster_first_match(self, matches: Iterable[MatchRecord]) -> dict[str, list[MatchRecord]]:
        groups: dict[str, list[MatchRecord]] = {}
        creation_order: dict[str, int] = {}
        # account id -> earliest-created group containing it
        account_group: dict[int, str] = {}

        for match in matches:
            existing = [account_group[a] for a in match.account_ids if a in account_group]
            if existing:
                group_id = min(existing, key=creation_order.__getitem__)
            else:
                group_id = self.id_factory()
                creation_order[group_id] = len(creation_order)
                groups[group_id] = []

            groups[group_id].append(match)
            for account_id in match.account_ids:
                current = account_group.get(account_id)
                if current is None or creation_order[group_id] < creation_order[current]:
                    account_group[account_id] = group_id

        return groups

    @staticmethod
    def to_groups(groups: dict[str, list[MatchRecord]]) -> list[DuplicateGroup]:
        """Wrap cluster() output as DuplicateGroup models, in group order."""
        return [DuplicateGroup(group_id=group_id, matches=matches) for group_id, matches in groups.items()]

    @staticmethod
    def group_for_account(groups: dict[str, list[MatchRecord]]) -> dict[int, str]:
        """Resolve the group each matched account belongs to.

        Args:
            groups: Output of cluster()

        Returns:
            Mapping of account id to group id. An account that appears in
            several groups resolves to the first of them in insertion order.
        """
        resolved: dict[int, str] = {}
        for group_id, matches in groups.items():
            for match in matches:
                for account_id in match.account_ids:
                    resolved.setdefault(account_id, group_id)
        return resolved

    def inspect_groups(
        self,
        groups: dict[str, list[MatchRecord]],
        accounts: Sequence[AccountSchema],
        sample_size: int = 10,
    ) -> ClusterInspectionReport:
        """Explore duplicate groups without ground truth labels.

        Args:
            groups: Output of cluster()
            accounts: Accounts used for readable company names
            sample_size: Number of largest groups to include as examples

        Returns:
            ClusterInspectionReport with statistics, examples, and recommendations

        Example:
            >>> report = clusterer.inspect_groups(groups, accounts)
            >>> print(report.to_markdown())
        """
        distribution = {"2": 0, "3": 0, "4-6": 0, "7+": 0}
        if not groups:
            return ClusterInspectionReport(
                total_groups=0,
                total_flagged_accounts=0,
                group_size_distribution=distribution,
                largest_groups=[],
                recommendations=["No duplicate groups found"],
            )

        names = {account.id: account.company_name for account in accounts}
        members = {group.group_id: sorted(group.account_ids) for group in self.to_groups(groups)}

        for account_ids in members.values():
            size = len(account_ids)
            if size == 2:
                distribution["2"] += 1
            elif size == 3:
                distribution["3"] += 1
            elif size <= 6:
                distribution["4-6"] += 1
            else:
                distribution["7+"] += 1

        ranked = sorted(members.items(), key=lambda item: len(item[1]), reverse=True)
        largest_groups: list[dict[str, Any]] = [
            {
                "group_id": group_id,
                "size": len(account_ids),
                "account_ids": account_ids,
                "company_names": [names.get(a, str(a)) for a in account_ids],
            }
            for group_id, account_ids in ranked[:sample_size]
        ]

        flagged = len(self.group_for_account(groups))
        max_size = len(ranked[0][1])

        recommendations: list[str] = []
        if max_size > 10:
            recommendations.append(
                f"⚠️ Very large group detected ({max_size} accounts) - may indicate chained "
                f"address matches. Review the largest groups."
            )
        else:
            recommendations.append(f"✅ Largest group has {max_size} accounts")
        if len(groups) > 100:
            recommendations.append("Large number of groups - consider sampling for review")

        return ClusterInspectionReport(
            total_groups=len(groups),
            total_flagged_accounts=flagged,
            group_size_distribution=distribution,
            largest_groups=largest_groups,
            recommendations=recommendations,
        )
