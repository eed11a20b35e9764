"""
Duplicate analysis unit of work.

DuplicateDetector wires a Blocker, a Module and a DuplicateClusterer to an
AccountStore: it loads every account, compares all candidate pairs, assigns
matches to duplicate groups and writes the results back.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

from leadres.core.blocker import Blocker
from leadres.core.blockers.all_pairs import AllPairsBlocker
from leadres.core.clusterer import DuplicateClusterer, MergeStrategy
from leadres.core.models import ALGORITHM_VERSION, AccountCandidate, AccountSchema, MatchRecord
from leadres.core.module import Module
from leadres.core.modules.account_comparator import AccountComparator
from leadres.core.reports import AnalysisSummary, DeduplicationStats
from leadres.storage.interfaces import AccountStore, AccountStoreError

if TYPE_CHECKING:
    from leadres.settings import Settings

logger = logging.getLogger(__name__)


class DuplicateDetector:
    """Batch duplicate analysis over an account store.

    Example:
        with SQLiteAccountStore("leads.db") as store:
            detector = DuplicateDetector(store)
            groups = detector.find_all_duplicates()
            summary = detector.save_duplicate_analysis(groups)
            print(summary.accounts_flagged)

    Note:
        The run is single-threaded and reads one snapshot of the store.
        Accounts inserted or edited mid-run are not seen. Any AccountStoreError
        aborts the run; there is no retry.

    Note:
        Group ids and match rows are new on every run. Call
        run(clear_previous=True) to replace an earlier analysis instead of
        accumulating rows.
    """

    def __init__(
        self,
        store: AccountStore,
        module: Module | None = None,
        blocker: Blocker | None = None,
        clusterer: DuplicateClusterer | None = None,
        algorithm_version: str = ALGORITHM_VERSION,
        progress_interval: int = 100,
    ):
        """Initialize DuplicateDetector.

        Args:
            store: Opened account store (see leadres.storage).
            module: Pair comparator (default: AccountComparator()).
            blocker: Candidate generator (default: AllPairsBlocker()).
            clusterer: Group assignment (default: transitive DuplicateClusterer()).
            algorithm_version: Version tag written on every match row.
            progress_interval: Log progress every N accounts.

        Raises:
            ValueError: If progress_interval is not positive.
        """
        if progress_interval <= 0:
            raise ValueError("progress_interval must be positive")
        self.store = store
        self.module = module or AccountComparator()
        self.blocker = blocker or AllPairsBlocker()
        self.clusterer = clusterer or DuplicateClusterer()
        self.algorithm_version = algorithm_version
        self.progress_interval = progress_interval

    @classmethod
    def from_settings(cls, settings: Settings, store: AccountStore) -> DuplicateDetector:
        """Build a detector configured from Settings."""
        module = AccountComparator(
            name_threshold=settings.name_match_threshold,
            address_threshold=settings.address_match_threshold,
            name_weight=settings.name_weight,
            address_weight=settings.address_weight,
            contact_fields_qualify=settings.contact_fields_qualify,
        )
        return cls(
            store,
            module=module,
            clusterer=DuplicateClusterer(strategy=settings.merge_strategy),
            algorithm_version=settings.algorithm_version,
            progress_interval=settings.progress_interval,
        )

    def find_all_duplicates(
        self, accounts: Sequence[AccountSchema | dict[str, Any]] | None = None
    ) -> dict[str, list[MatchRecord]]:
        """Compare every pair of accounts and group the matches.

        Args:
            accounts: Accounts to analyze. When omitted they are read from
                the store with load_all_accounts().

        Returns:
            Mapping of new group id to the matches in that group, in
            discovery order.

        Raises:
            AccountStoreError: If the accounts cannot be loaded.
        """
        logger.info("Starting deduplication analysis")
        start = time.time()

        if accounts is None:
            accounts = self._load_accounts()

        logger.info("Analyzing %d accounts for duplicates", len(accounts))

        candidates = self._with_progress(self.blocker.stream(accounts), total=len(accounts))
        groups = self.clusterer.cluster(self.module.forward(candidates))

        logger.info(
            "Found %d duplicate groups (%d matches) in %.2fs",
            len(groups),
            sum(len(matches) for matches in groups.values()),
            time.time() - start,
        )
        return groups

    def save_duplicate_analysis(self, groups: dict[str, list[MatchRecord]]) -> AnalysisSummary:
        """Persist match rows and flag every matched account.

        Args:
            groups: Output of find_all_duplicates()

        Returns:
            AnalysisSummary with the number of rows written and accounts flagged.

        Raises:
            AccountStoreError: If any write fails. Rows written before the
                failure are kept.
        """
        logger.info("Saving duplicate analysis for %d groups", len(groups))
        matches_saved = 0

        try:
            for group in self.clusterer.to_groups(groups):
                for match in group.matches:
                    self.store.write_match(match, group.group_id, self.algorithm_version)
                    matches_saved += 1

            account_groups = self.clusterer.group_for_account(groups)
            logger.info("Flagging %d accounts as possible duplicates", len(account_groups))
            for account_id, group_id in account_groups.items():
                self.store.flag_account_duplicate(account_id, group_id)
        except AccountStoreError:
            logger.error("Deduplication aborted after saving %d match rows", matches_saved)
            raise

        logger.info("Saved %d duplicate analysis records", matches_saved)
        return AnalysisSummary(
            duplicate_groups=len(groups),
            matches_saved=matches_saved,
            accounts_flagged=len(account_groups),
            algorithm_version=self.algorithm_version,
        )

    def run(self, clear_previous: bool = False) -> AnalysisSummary:
        """Run the complete deduplication process.

        Args:
            clear_previous: Replace earlier match rows and flags. They are
                deleted only after the accounts are loaded and compared, so a
                failed load leaves the previous analysis in place.

        Returns:
            AnalysisSummary of the persisted run.
        """
        accounts = self._load_accounts()
        groups = self.find_all_duplicates(accounts)

        if clear_previous:
            self.store.clear_duplicate_analysis()
        summary = self.save_duplicate_analysis(groups)

        logger.info("Deduplication complete")
        return summary.model_copy(update={"total_accounts": len(accounts)})

    def get_deduplication_stats(self) -> DeduplicationStats:
        """Read dashboard statistics back from the store."""
        total = self.store.count_accounts()
        flagged = self.store.count_flagged_accounts()
        groups = len(self.store.get_all_duplicate_groups())

        return DeduplicationStats(
            total_leads=total,
            duplicate_leads=flagged,
            duplicate_groups=groups,
            deduplication_rate=f"{flagged / total * 100:.2f}%" if total > 0 else "0%",
        )

    def _load_accounts(self) -> list[AccountSchema]:
        try:
            return self.store.load_all_accounts()
        except AccountStoreError:
            logger.error("Deduplication aborted: could not load accounts")
            raise

    def _with_progress(self, candidates: Iterator[AccountCandidate], total: int) -> Iterator[AccountCandidate]:
        processed = 0
        current_left: int | None = None
        for candidate in candidates:
            if candidate.left.id != current_left:
                if current_left is not None:
                    processed = self._log_progress(processed, total)
                current_left = candidate.left.id
            yield candidate

        # The last left account and the final account have no later pairs.
        while processed < total:
            processed = self._log_progress(processed, total)

    def _log_progress(self, processed: int, total: int) -> int:
        processed += 1
        if processed % self.progress_interval == 0:
            logger.info("Processed %d/%d accounts", processed, total)
        return processed


def find_all_duplicates(
    accounts: Sequence[AccountSchema | dict[str, Any]],
    module: Module | None = None,
    strategy: MergeStrategy = "transitive",
) -> dict[str, list[MatchRecord]]:
    """Group duplicate accounts without a store.

    Args:
        accounts: Accounts in a fixed order (dicts or AccountSchema).
        module: Pair comparator (default: AccountComparator()).
        strategy: Group merge strategy for DuplicateClusterer.

    Returns:
        Mapping of new group id to the matches in that group.

    Example:
        >>> groups = find_all_duplicates([
        ...     {"id": 1, "companyName": "XYZ Corporation"},
        ...     {"id": 2, "companyName": "XYZ Corp"},
        ... ])
        >>> len(groups)
        1
    """
    blocker = AllPairsBlocker()
    module = module or AccountComparator()
    clusterer = DuplicateClusterer(strategy=strategy)
    return clusterer.cluster(module.forward(blocker.stream(accounts)))
