"""
leadres: Fuzzy duplicate detection for business-lead accounts.

This package finds accounts in a lead store that likely describe the same
business:
- leadres.core: Normalization, similarity scoring, pair comparison and grouping
- leadres.storage: Account store protocol with in-memory and SQLite backends
"""

from leadres.core import AccountSchema, DuplicateDetector, MatchRecord, find_all_duplicates

__all__ = ["AccountSchema", "DuplicateDetector", "MatchRecord", "find_all_duplicates"]

__version__ = "0.1.0"
