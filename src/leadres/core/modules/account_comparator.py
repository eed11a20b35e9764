"""AccountComparator implementation for fuzzy duplicate detection.

This module decides whether two business accounts are likely duplicates.
Company names and addresses are normalized, scored with Levenshtein
similarity and checked against fixed thresholds; identical phone numbers and
websites are reported alongside but never change the score.
"""

import logging
from collections import Counter

import numpy as np

from leadres.core.models import (
    FIELD_ADDRESS,
    FIELD_COMPANY_NAME,
    FIELD_PHONE,
    FIELD_WEBSITE,
    AccountSchema,
    MatchRecord,
)
from leadres.core.module import Module
from leadres.core.normalize import (
    normalize_address,
    normalize_name,
    normalize_phone,
    normalize_website,
)
from leadres.core.reports import ScoreInspectionReport
from leadres.core.similarity import similarity

logger = logging.getLogger(__name__)

NAME_MATCH_THRESHOLD = 85.0
ADDRESS_MATCH_THRESHOLD = 80.0
NAME_WEIGHT = 0.6
ADDRESS_WEIGHT = 0.4
MIN_PHONE_DIGITS = 10


class AccountComparator(Module):
    """Threshold-based comparator for business accounts.

    A pair qualifies when the normalized company names are at least
    ``name_threshold`` similar or the normalized addresses are at least
    ``address_threshold`` similar. Identical phone numbers (10+ digits) and
    identical websites are added to the match reasons.

    The overall similarity is ``name * name_weight + address * address_weight``.

    Example:
        comparator = AccountComparator()
        match = comparator.compare(
            AccountSchema(id=1, company_name="XYZ Corporation"),
            AccountSchema(id=2, company_name="XYZ Corp"),
        )
        assert match is not None and match.name_similarity == 100.0

    Note:
        With ``contact_fields_qualify=False`` (the default) a pair that fails
        both the name and the address threshold is rejected before phone and
        website are examined, so an identical phone alone never flags a pair.
        Set it to True to let an identical phone or website qualify a pair on
        its own.
    """

    def __init__(
        self,
        name_threshold: float = NAME_MATCH_THRESHOLD,
        address_threshold: float = ADDRESS_MATCH_THRESHOLD,
        name_weight: float = NAME_WEIGHT,
        address_weight: float = ADDRESS_WEIGHT,
        contact_fields_qualify: bool = False,
    ):
        """Initialize AccountComparator.

        Args:
            name_threshold: Minimum name similarity (0-100) for a name match.
            address_threshold: Minimum address similarity (0-100) for an
                address match.
            name_weight: Weight of the name score in overall_similarity.
            address_weight: Weight of the address score in overall_similarity.
            contact_fields_qualify: Whether an identical phone or website can
                qualify a pair that fails both text thresholds.

        Raises:
            ValueError: If a threshold is outside [0, 100], a weight is
                negative, or the weights do not sum to 1.0.
        """
        for label, value in (("name_threshold", name_threshold), ("address_threshold", address_threshold)):
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{label} must be between 0.0 and 100.0")

        if name_weight < 0.0 or address_weight < 0.0:
            raise ValueError("weights must be non-negative")
        if abs(name_weight + address_weight - 1.0) > 1e-9:
            raise ValueError("name_weight and address_weight must sum to 1.0")

        self.name_threshold = name_threshold
        self.address_threshold = address_threshold
        self.name_weight = name_weight
        self.address_weight = address_weight
        self.contact_fields_qualify = contact_fields_qualify

    def compare(self, left: AccountSchema, right: AccountSchema) -> MatchRecord | None:
        """Compare two accounts and build a MatchRecord if they qualify.

        Args:
            left: First account (becomes account_id_a)
            right: Second account (becomes account_id_b)

        Returns:
            MatchRecord, or None for self-comparisons and pairs below both
            thresholds.
        """
        if left.id == right.id:
            return None

        name_similarity = similarity(normalize_name(left.company_name), normalize_name(right.company_name))
        address_similarity = similarity(normalize_address(left.address), normalize_address(right.address))

        is_name_match = name_similarity >= self.name_threshold
        is_address_match = address_similarity >= self.address_threshold

        if not (is_name_match or is_address_match or self.contact_fields_qualify):
            return None

        matched_fields: list[str] = []
        reasons: list[str] = []

        if is_name_match:
            matched_fields.append(FIELD_COMPANY_NAME)
            reasons.append(f"Company name {name_similarity:.1f}% similar")

        if is_address_match:
            matched_fields.append(FIELD_ADDRESS)
            reasons.append(f"Address {address_similarity:.1f}% similar")

        if _same_phone(left.phone, right.phone):
            matched_fields.append(FIELD_PHONE)
            reasons.append("Identical phone number")

        if _same_website(left.website, right.website):
            matched_fields.append(FIELD_WEBSITE)
            reasons.append("Identical website")

        if not matched_fields:
            return None

        overall_similarity = name_similarity * self.name_weight + address_similarity * self.address_weight

        logger.debug(
            "Match %d-%d: name=%.2f address=%.2f fields=%s",
            left.id,
            right.id,
            name_similarity,
            address_similarity,
            matched_fields,
        )

        return MatchRecord(
            account_id_a=left.id,
            account_id_b=right.id,
            name_similarity=name_similarity,
            address_similarity=address_similarity,
            overall_similarity=overall_similarity,
            match_reason="; ".join(reasons),
            matched_fields=tuple(matched_fields),
        )

    def inspect_scores(self, matches: list[MatchRecord], sample_size: int = 10) -> ScoreInspectionReport:
        """Explore overall similarity scores of a set of matches.

        Args:
            matches: Matches produced by forward() or compare()
            sample_size: Number of high and low examples to include

        Returns:
            ScoreInspectionReport with statistics, examples, and recommendations
        """
        if not matches:
            return ScoreInspectionReport(
                total_matches=0,
                score_distribution={},
                matched_field_counts={},
                high_scoring_examples=[],
                low_scoring_examples=[],
                recommendations=[
                    "No matches to analyze - run AccountComparator.forward() on candidates first",
                ],
            )

        scores = [m.overall_similarity for m in matches]
        score_distribution = {
            "mean": float(np.mean(scores)),
            "median": float(np.median(scores)),
            "std": float(np.std(scores)),
            "p25": float(np.percentile(scores, 25)),
            "p75": float(np.percentile(scores, 75)),
            "p95": float(np.percentile(scores, 95)),
            "min": float(np.min(scores)),
            "max": float(np.max(scores)),
        }

        field_counts = Counter(field for m in matches for field in m.matched_fields)

        def _example(match: MatchRecord) -> dict[str, object]:
            return {
                "account_id_a": match.account_id_a,
                "account_id_b": match.account_id_b,
                "overall_similarity": match.overall_similarity,
                "match_reason": match.match_reason,
            }

        ranked = sorted(matches, key=lambda m: m.overall_similarity, reverse=True)
        high = [_example(m) for m in ranked[:sample_size]]
        low = [_example(m) for m in list(reversed(ranked))[:sample_size]]

        return ScoreInspectionReport(
            total_matches=len(matches),
            score_distribution=score_distribution,
            matched_field_counts=dict(field_counts.most_common()),
            high_scoring_examples=high,
            low_scoring_examples=low,
            recommendations=self._generate_recommendations(matches, field_counts),
        )

    def _generate_recommendations(self, matches: list[MatchRecord], field_counts: Counter[str]) -> list[str]:
        """Generate rule-based recommendations for threshold tuning."""
        recommendations: list[str] = []
        total = len(matches)

        address_only = sum(1 for m in matches if m.matched_fields[:1] == (FIELD_ADDRESS,))
        if address_only / total > 0.5:
            recommendations.append(
                f"⚠️ {address_only}/{total} matches qualified on address alone - shared office "
                f"buildings may be flagged. Consider raising address_threshold above {self.address_threshold:.0f}"
            )

        corroborated = field_counts.get(FIELD_PHONE, 0) + field_counts.get(FIELD_WEBSITE, 0)
        if corroborated == 0:
            recommendations.append("No matches are corroborated by phone or website - review a sample manually")
        else:
            recommendations.append(f"✅ {corroborated} phone/website corroborations across {total} matches")

        return recommendations


def _same_phone(left: str | None, right: str | None) -> bool:
    if not left or not right:
        return False
    digits = normalize_phone(left)
    return digits == normalize_phone(right) and len(digits) >= MIN_PHONE_DIGITS


def _same_website(left: str | None, right: str | None) -> bool:
    if not left or not right:
        return False
    return normalize_website(left) == normalize_website(right)
