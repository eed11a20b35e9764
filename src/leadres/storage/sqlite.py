"""SQLite-backed account store.

Schema (column names follow the dashboard's tables):

accounts:
    - id (INTEGER PRIMARY KEY)
    - companyName (TEXT NOT NULL)
    - address, phone, website (TEXT)
    - possibleDuplicate (INTEGER 0/1)
    - duplicateGroupId (TEXT)

duplicate_analysis:
    - id (INTEGER PRIMARY KEY AUTOINCREMENT)
    - duplicateGroupId, accountIdA, accountIdB
    - nameSimilarityScore, addressSimilarityScore, overallSimilarityScore (REAL)
    - matchReason (TEXT), matchedFields (TEXT, comma-joined)
    - analyzedAt (TIMESTAMP), algorithmVersion (TEXT)
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from leadres.core.models import ALGORITHM_VERSION, AccountSchema, DuplicateAnalysisRow, MatchRecord
from leadres.storage.interfaces import AccountStoreError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ACCOUNTS = 10000

_SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY,
    companyName TEXT NOT NULL,
    address TEXT,
    phone TEXT,
    website TEXT,
    possibleDuplicate INTEGER NOT NULL DEFAULT 0,
    duplicateGroupId TEXT
);
CREATE INDEX IF NOT EXISTS duplicate_group_idx ON accounts(duplicateGroupId);

CREATE TABLE IF NOT EXISTS duplicate_analysis (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    duplicateGroupId TEXT NOT NULL,
    accountIdA INTEGER NOT NULL,
    accountIdB INTEGER NOT NULL,
    nameSimilarityScore REAL,
    addressSimilarityScore REAL,
    overallSimilarityScore REAL,
    matchReason TEXT,
    matchedFields TEXT,
    analyzedAt TIMESTAMP NOT NULL,
    algorithmVersion TEXT NOT NULL DEFAULT '1.0'
);
CREATE INDEX IF NOT EXISTS dup_group_idx ON duplicate_analysis(duplicateGroupId);
CREATE INDEX IF NOT EXISTS dup_account_a_idx ON duplicate_analysis(accountIdA);
CREATE INDEX IF NOT EXISTS dup_account_b_idx ON duplicate_analysis(accountIdB);
"""


class SQLiteAccountStore:
    """Account store on a single SQLite connection.

    The connection is created by open() and released by close(); every write
    commits on its own, so a failure mid-run leaves the rows written so far.

    Example:
        with SQLiteAccountStore("leads.db") as store:
            store.insert_accounts(load_accounts_json("accounts.json"))
            DuplicateDetector(store).run(clear_previous=True)

    Note:
        Use ":memory:" as db_path for a throwaway database.
    """

    def __init__(self, db_path: str | Path, max_accounts: int = DEFAULT_MAX_ACCOUNTS) -> None:
        """Initialize SQLiteAccountStore.

        Args:
            db_path: Path to the SQLite database file (created if missing).
            max_accounts: Upper bound on accounts returned by load_all_accounts().

        Raises:
            ValueError: If max_accounts is not positive.
        """
        if max_accounts <= 0:
            raise ValueError("max_accounts must be positive")
        self.db_path = str(db_path)
        self.max_accounts = max_accounts
        self._conn: sqlite3.Connection | None = None

    def open(self) -> None:
        if self._conn is not None:
            return
        try:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            self._conn = None
            raise AccountStoreError(f"Failed to open account store at {self.db_path}: {exc}") from exc
        logger.debug("Opened SQLite account store at %s", self.db_path)

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("Closed SQLite account store at %s", self.db_path)

    def __enter__(self) -> SQLiteAccountStore:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        if self._conn is None:
            raise AccountStoreError("Account store is not open")
        try:
            with self._conn:
                return self._conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise AccountStoreError(f"Account store query failed: {exc}") from exc

    def insert_accounts(self, accounts: Iterable[AccountSchema | dict[str, Any]]) -> int:
        """Insert or replace accounts. Returns the number of rows written."""
        rows = []
        for row in accounts:
            account = row if isinstance(row, AccountSchema) else AccountSchema.model_validate(row)
            rows.append((account.id, account.company_name, account.address, account.phone, account.website))

        if self._conn is None:
            raise AccountStoreError("Account store is not open")
        try:
            with self._conn:
                self._conn.executemany(
                    "INSERT OR REPLACE INTO accounts (id, companyName, address, phone, website) "
                    "VALUES (?, ?, ?, ?, ?)",
                    rows,
                )
        except sqlite3.Error as exc:
            raise AccountStoreError(f"Failed to insert accounts: {exc}") from exc

        logger.info("Inserted %d accounts into %s", len(rows), self.db_path)
        return len(rows)

    def load_all_accounts(self) -> list[AccountSchema]:
        cursor = self._execute(
            "SELECT id, companyName, address, phone, website FROM accounts ORDER BY id LIMIT ?",
            (self.max_accounts,),
        )
        accounts = [
            AccountSchema(
                id=row["id"],
                company_name=row["companyName"],
                address=row["address"],
                phone=row["phone"],
                website=row["website"],
            )
            for row in cursor.fetchall()
        ]
        if len(accounts) == self.max_accounts:
            logger.warning("Account load hit the %d row limit; remaining accounts are not analyzed", self.max_accounts)
        return accounts

    def write_match(self, match: MatchRecord, group_id: str, algorithm_version: str = ALGORITHM_VERSION) -> None:
        row = DuplicateAnalysisRow.from_match(match, group_id, algorithm_version)
        self._execute(
            "INSERT INTO duplicate_analysis (duplicateGroupId, accountIdA, accountIdB, nameSimilarityScore, "
            "addressSimilarityScore, overallSimilarityScore, matchReason, matchedFields, analyzedAt, "
            "algorithmVersion) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                row.duplicate_group_id,
                row.account_id_a,
                row.account_id_b,
                row.name_similarity_score,
                row.address_similarity_score,
                row.overall_similarity_score,
                row.match_reason,
                row.matched_fields,
                row.analyzed_at.isoformat(),
                row.algorithm_version,
            ),
        )

    def flag_account_duplicate(self, account_id: int, group_id: str) -> None:
        cursor = self._execute(
            "UPDATE accounts SET possibleDuplicate = 1, duplicateGroupId = ? WHERE id = ?",
            (group_id, account_id),
        )
        if cursor.rowcount == 0:
            raise AccountStoreError(f"Unknown account id: {account_id}")

    def clear_duplicate_analysis(self) -> None:
        deleted = self._execute("DELETE FROM duplicate_analysis").rowcount
        self._execute("UPDATE accounts SET possibleDuplicate = 0, duplicateGroupId = NULL")
        logger.info("Cleared %d prior duplicate analysis rows", deleted)

    def get_all_duplicate_groups(self) -> list[tuple[str, int]]:
        cursor = self._execute(
            "SELECT duplicateGroupId, COUNT(*) AS n FROM duplicate_analysis "
            "GROUP BY duplicateGroupId ORDER BY n DESC, MIN(id)"
        )
        return [(row["duplicateGroupId"], row["n"]) for row in cursor.fetchall()]

    def get_duplicates_by_group_id(self, group_id: str) -> list[DuplicateAnalysisRow]:
        cursor = self._execute(
            "SELECT * FROM duplicate_analysis WHERE duplicateGroupId = ? ORDER BY overallSimilarityScore DESC, id",
            (group_id,),
        )
        return [
            DuplicateAnalysisRow(
                duplicate_group_id=row["duplicateGroupId"],
                account_id_a=row["accountIdA"],
                account_id_b=row["accountIdB"],
                name_similarity_score=row["nameSimilarityScore"],
                address_similarity_score=row["addressSimilarityScore"],
                overall_similarity_score=row["overallSimilarityScore"],
                match_reason=row["matchReason"] or "",
                matched_fields=row["matchedFields"] or "",
                algorithm_version=row["algorithmVersion"],
                analyzed_at=row["analyzedAt"],
            )
            for row in cursor.fetchall()
        ]

    def get_flagged_accounts(self) -> dict[int, str]:
        """Return account id -> duplicate group id for every flagged account."""
        cursor = self._execute(
            "SELECT id, duplicateGroupId FROM accounts WHERE possibleDuplicate = 1 ORDER BY id"
        )
        return {row["id"]: row["duplicateGroupId"] for row in cursor.fetchall()}

    def count_accounts(self) -> int:
        return self._execute("SELECT COUNT(*) FROM accounts").fetchone()[0]

    def count_flagged_accounts(self) -> int:
        return self._execute("SELECT COUNT(*) FROM accounts WHERE possibleDuplicate = 1").fetchone()[0]
