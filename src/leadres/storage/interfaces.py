"""Storage boundary of the duplicate detector."""

from __future__ import annotations

from typing import Protocol

from leadres.core.models import AccountSchema, DuplicateAnalysisRow, MatchRecord


class AccountStoreError(RuntimeError):
    """Raised when the account store cannot be read or written.

    Any such failure aborts the whole analysis run.
    """


class AccountStore(Protocol):
    """Persistence adapter consumed by DuplicateDetector.

    Stores have an explicit lifecycle: open() before use, close() after.
    They are also context managers.
    """

    def open(self) -> None:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> AccountStore:
        ...

    def __exit__(self, *exc_info: object) -> None:
        ...

    def load_all_accounts(self) -> list[AccountSchema]:
        """Return every account in ascending id order."""
        ...

    def write_match(self, match: MatchRecord, group_id: str, algorithm_version: str = ...) -> None:
        """Persist one match row tagged with its group id."""
        ...

    def flag_account_duplicate(self, account_id: int, group_id: str) -> None:
        """Mark an account as a possible duplicate belonging to group_id."""
        ...

    def clear_duplicate_analysis(self) -> None:
        """Delete prior match rows and reset every account's duplicate flag."""
        ...

    def get_all_duplicate_groups(self) -> list[tuple[str, int]]:
        """Return (group id, match count) pairs, largest group first."""
        ...

    def get_duplicates_by_group_id(self, group_id: str) -> list[DuplicateAnalysisRow]:
        """Return the rows of one group by descending overall score."""
        ...

    def count_accounts(self) -> int:
        ...

    def count_flagged_accounts(self) -> int:
        ...
