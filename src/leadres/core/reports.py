"""Report models for exploring duplicate analysis output.

Inspection reports describe one pipeline stage and need no labelled data:
CandidateInspectionReport for blocker output, ScoreInspectionReport for
comparator scores and ClusterInspectionReport for duplicate groups. Each has
``stats`` (numbers only), ``to_dict()`` and ``to_markdown()``.

Run reports summarize persisted work: AnalysisSummary is what
save_duplicate_analysis() wrote, DeduplicationStats is what the dashboard
reads back from the store.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

# Examples rendered per markdown section
MARKDOWN_EXAMPLES = 5


def _format_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _bullets(mapping: Mapping[str, Any]) -> list[str]:
    return [f"- **{key}**: {_format_value(value)}" for key, value in mapping.items()]


def _examples_section(title: str, examples: list[dict[str, Any]], heading: str = "Example") -> list[str]:
    if not examples:
        return []
    section = [f"\n## {title}"]
    for number, example in enumerate(examples[:MARKDOWN_EXAMPLES], 1):
        section.append(f"\n### {heading} {number}")
        section.extend(_bullets(example))
    return section


def _recommendations_section(recommendations: Iterable[str]) -> list[str]:
    items = [f"- {rec}" for rec in recommendations]
    return ["\n## Recommendations", *items] if items else []


class _InspectionReport(BaseModel):
    """Shared serialization for inspection reports."""

    recommendations: list[str]

    def to_dict(self) -> dict[str, Any]:
        """Generate JSON-serializable dictionary."""
        return self.model_dump()


class CandidateInspectionReport(_InspectionReport):
    """Report for candidate exploration.

    Example:
        report = blocker.inspect_candidates(candidates, accounts, sample_size=10)
        print(report.to_markdown())

    Attributes:
        total_candidates: Number of candidate pairs generated
        total_accounts: Number of accounts the pairs were drawn from
        examples: Sample pairs with both company names
        recommendations: Notes about run time at this dataset size
    """

    total_candidates: int
    total_accounts: int
    examples: list[dict[str, Any]]

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "total_candidates": self.total_candidates,
            "total_accounts": self.total_accounts,
        }

    def to_markdown(self) -> str:
        lines = [
            "# Candidate Inspection Report\n",
            "## Summary",
            f"- **Total Accounts**: {self.total_accounts}",
            f"- **Total Candidates**: {self.total_candidates}",
        ]
        lines += _examples_section("Sample Candidates", self.examples)
        lines += _recommendations_section(self.recommendations)
        return "\n".join(lines)


class ScoreInspectionReport(_InspectionReport):
    """Report for match score exploration.

    Scores are overall similarities on the 0-100 scale.

    Attributes:
        total_matches: Number of match records inspected
        score_distribution: mean, median, std, p25, p75, p95, min and max
        matched_field_counts: How often each field contributed to a match
        high_scoring_examples: Highest overall scores with their reasons
        low_scoring_examples: Lowest overall scores with their reasons
        recommendations: Suggestions for threshold tuning
    """

    total_matches: int
    score_distribution: dict[str, float]
    matched_field_counts: dict[str, int]
    high_scoring_examples: list[dict[str, Any]]
    low_scoring_examples: list[dict[str, Any]]

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "total_matches": self.total_matches,
            "score_distribution": self.score_distribution,
            "matched_field_counts": self.matched_field_counts,
        }

    def to_markdown(self) -> str:
        lines = ["# Score Inspection Report\n", "## Summary", f"- **Total Matches**: {self.total_matches}"]

        if self.score_distribution:
            lines.append("\n## Score Distribution")
            for key in ("mean", "median", "std", "p25", "p75", "p95"):
                lines.append(f"- **{key}**: {self.score_distribution.get(key, 0.0):.1f}")

        if self.matched_field_counts:
            lines.append("\n## Matched Fields")
            lines.extend(f"- {field}: {count}" for field, count in self.matched_field_counts.items())

        lines += _examples_section("High Scoring Examples", self.high_scoring_examples)
        lines += _examples_section("Low Scoring Examples", self.low_scoring_examples)
        lines += _recommendations_section(self.recommendations)
        return "\n".join(lines)


class ClusterInspectionReport(_InspectionReport):
    """Report for duplicate group exploration.

    Example:
        report = clusterer.inspect_groups(groups, accounts, sample_size=10)
        print(report.to_markdown())

    Attributes:
        total_groups: Number of duplicate groups formed
        total_flagged_accounts: Accounts that belong to any group
        group_size_distribution: Histogram of group sizes (in accounts)
        largest_groups: Largest groups with their company names
        recommendations: Warnings about chained or oversized groups
    """

    total_groups: int
    total_flagged_accounts: int
    group_size_distribution: dict[str, int]
    largest_groups: list[dict[str, Any]]

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "total_groups": self.total_groups,
            "total_flagged_accounts": self.total_flagged_accounts,
            "group_size_distribution": self.group_size_distribution,
        }

    def to_markdown(self) -> str:
        lines = [
            "# Duplicate Group Inspection Report\n",
            "## Summary",
            f"- **Total Groups**: {self.total_groups}",
            f"- **Flagged Accounts**: {self.total_flagged_accounts}",
        ]

        if self.group_size_distribution:
            lines.append("\n## Group Size Distribution")
            lines.extend(
                f"- {size_label} accounts: {count} groups"
                for size_label, count in self.group_size_distribution.items()
            )

        lines += _examples_section("Largest Groups", self.largest_groups, heading="Group")
        lines += _recommendations_section(self.recommendations)
        return "\n".join(lines)


class AnalysisSummary(BaseModel):
    """What one persisted analysis run produced.

    Attributes:
        total_accounts: Accounts compared (None when only saving)
        duplicate_groups: Number of groups written
        matches_saved: Number of match rows written
        accounts_flagged: Number of accounts marked as possible duplicates
        algorithm_version: Version tag stored on every row
    """

    total_accounts: int | None = None
    duplicate_groups: int = Field(default=0, ge=0)
    matches_saved: int = Field(default=0, ge=0)
    accounts_flagged: int = Field(default=0, ge=0)
    algorithm_version: str


class DeduplicationStats(BaseModel):
    """Dashboard figures read back from the account store.

    ``deduplication_rate`` is duplicate_leads / total_leads formatted as
    "12.50%", or "0%" for an empty store.
    """

    total_leads: int
    duplicate_leads: int
    duplicate_groups: int
    deduplication_rate: str
