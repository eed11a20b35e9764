"""Blocker implementations for candidate pair generation."""

from leadres.core.blockers.all_pairs import AllPairsBlocker

__all__ = ["AllPairsBlocker"]
