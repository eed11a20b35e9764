"""In-memory account store."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Any

from leadres.core.models import ALGORITHM_VERSION, AccountSchema, DuplicateAnalysisRow, MatchRecord
from leadres.storage.interfaces import AccountStoreError

logger = logging.getLogger(__name__)


class InMemoryAccountStore:
    """Test double for AccountStore with deterministic behaviour.

    Accounts live in a dict keyed by id; match rows are appended to a list
    and duplicate flags are tracked per account. Nothing is shared between
    instances.

    Example:
        store = InMemoryAccountStore([{"id": 1, "companyName": "Acme"}])
        with store:
            detector = DuplicateDetector(store)
            detector.run()
        store.flags  # {account_id: group_id}
    """

    def __init__(self, accounts: Iterable[AccountSchema | dict[str, Any]] = ()) -> None:
        self._accounts: dict[int, AccountSchema] = {}
        self.rows: list[DuplicateAnalysisRow] = []
        self.flags: dict[int, str] = {}
        self._open = False
        self.insert_accounts(accounts)

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def __enter__(self) -> InMemoryAccountStore:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _require_open(self) -> None:
        if not self._open:
            raise AccountStoreError("Account store is not open")

    def insert_accounts(self, accounts: Iterable[AccountSchema | dict[str, Any]]) -> None:
        for row in accounts:
            account = row if isinstance(row, AccountSchema) else AccountSchema.model_validate(row)
            self._accounts[account.id] = account

    def load_all_accounts(self) -> list[AccountSchema]:
        self._require_open()
        return [self._accounts[key] for key in sorted(self._accounts)]

    def write_match(self, match: MatchRecord, group_id: str, algorithm_version: str = ALGORITHM_VERSION) -> None:
        self._require_open()
        self.rows.append(DuplicateAnalysisRow.from_match(match, group_id, algorithm_version))

    def flag_account_duplicate(self, account_id: int, group_id: str) -> None:
        self._require_open()
        if account_id not in self._accounts:
            raise AccountStoreError(f"Unknown account id: {account_id}")
        self.flags[account_id] = group_id

    def clear_duplicate_analysis(self) -> None:
        self._require_open()
        logger.info("Clearing %d match rows and %d duplicate flags", len(self.rows), len(self.flags))
        self.rows.clear()
        self.flags.clear()

    def get_all_duplicate_groups(self) -> list[tuple[str, int]]:
        self._require_open()
        counts = Counter(row.duplicate_group_id for row in self.rows)
        return sorted(counts.items(), key=lambda item: item[1], reverse=True)

    def get_duplicates_by_group_id(self, group_id: str) -> list[DuplicateAnalysisRow]:
        self._require_open()
        rows = [row for row in self.rows if row.duplicate_group_id == group_id]
        return sorted(rows, key=lambda row: row.overall_similarity_score, reverse=True)

    def get_flagged_accounts(self) -> dict[int, str]:
        self._require_open()
        return dict(sorted(self.flags.items()))

    def count_accounts(self) -> int:
        self._require_open()
        return len(self._accounts)

    def count_flagged_accounts(self) -> int:
        self._require_open()
        return len(self.flags)
