"""
leadres.core: Duplicate detection primitives.

This module provides the building blocks of a duplicate analysis run and the
DuplicateDetector that wires them to an account store.
"""

from leadres.core.blocker import Blocker
from leadres.core.blockers import AllPairsBlocker
from leadres.core.clusterer import DuplicateClusterer
from leadres.core.detector import DuplicateDetector, find_all_duplicates
from leadres.core.models import (
    ALGORITHM_VERSION,
    AccountCandidate,
    AccountSchema,
    DuplicateAnalysisRow,
    DuplicateGroup,
    MatchRecord,
    PairKey,
)
from leadres.core.module import Module
from leadres.core.modules import AccountComparator
from leadres.core.normalize import normalize_address, normalize_name, normalize_phone, normalize_website
from leadres.core.reports import (
    AnalysisSummary,
    CandidateInspectionReport,
    ClusterInspectionReport,
    DeduplicationStats,
    ScoreInspectionReport,
)
from leadres.core.similarity import levenshtein_distance, similarity

__all__ = [
    "ALGORITHM_VERSION",
    "AccountCandidate",
    "AccountComparator",
    "AccountSchema",
    "AllPairsBlocker",
    "AnalysisSummary",
    "Blocker",
    "CandidateInspectionReport",
    "ClusterInspectionReport",
    "DeduplicationStats",
    "DuplicateAnalysisRow",
    "DuplicateClusterer",
    "DuplicateDetector",
    "DuplicateGroup",
    "find_all_duplicates",
    "levenshtein_distance",
    "MatchRecord",
    "Module",
    "normalize_address",
    "normalize_name",
    "normalize_phone",
    "normalize_website",
    "PairKey",
    "ScoreInspectionReport",
    "similarity",
]
