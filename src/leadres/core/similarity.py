"""Edit-distance similarity scoring.

Scores are percentages in [0, 100] rounded to two decimals. Inputs are
expected to be normalized already (see leadres.core.normalize); the scorer
only lower-cases and trims.
"""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(left: str, right: str) -> int:
    """Exact Levenshtein distance with unit insert, delete and substitute costs."""
    return Levenshtein.distance(left, right)


def similarity(left: str | None, right: str | None) -> float:
    """Compute the edit-distance similarity of two strings.

    Args:
        left: First string (may be None)
        right: Second string (may be None)

    Returns:
        ``round(((max_len - distance) / max_len) * 100, 2)`` where
        ``max_len`` is the longer of the two lengths. Empty or None input on
        either side scores 0.0; identical strings score 100.0.

    Example:
        >>> similarity("acme", "acme")
        100.0
        >>> similarity("kitten", "sitting")
        57.14
        >>> similarity("", "")
        0.0
    """
    if not left or not right:
        return 0.0

    s1 = left.lower().strip()
    s2 = right.lower().strip()
    if s1 == s2:
        return 100.0

    max_len = max(len(s1), len(s2))
    if max_len == 0:  # pragma: no cover - unreachable once s1 != s2
        return 100.0

    distance = levenshtein_distance(s1, s2)
    return round(((max_len - distance) / max_len) * 100, 2)
