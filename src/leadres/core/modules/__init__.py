"""Module implementations for account comparison."""

from leadres.core.modules.account_comparator import AccountComparator

__all__ = ["AccountComparator"]
