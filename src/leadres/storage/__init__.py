"""
leadres.storage: Persistence adapters for duplicate analysis.

- AccountStore: Protocol consumed by DuplicateDetector
- InMemoryAccountStore: Deterministic test double
- SQLiteAccountStore: sqlite3-backed store with the dashboard's tables
"""

from leadres.storage.interfaces import AccountStore, AccountStoreError
from leadres.storage.loaders import load_accounts_json
from leadres.storage.memory import InMemoryAccountStore
from leadres.storage.sqlite import SQLiteAccountStore

__all__ = [
    "AccountStore",
    "AccountStoreError",
    "InMemoryAccountStore",
    "SQLiteAccountStore",
    "load_accounts_json",
]
