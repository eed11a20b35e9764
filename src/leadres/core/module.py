"""
Module base class for account comparison logic.

This module provides the abstract base class for all pairwise comparison
implementations in the leadres engine.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from leadres.core.models import AccountCandidate, AccountSchema, MatchRecord
from leadres.core.reports import ScoreInspectionReport


class Module(ABC):
    """Abstract base class for account comparison logic.

    The Module is the "brain" of the pipeline. It receives candidate pairs
    from a Blocker and yields a MatchRecord for every pair it considers a
    likely duplicate.

    Design principles:
    - Operates on validated AccountCandidate pairs (row validation is the
      Blocker's job)
    - Never raises on messy data: missing fields contribute nothing
    - Absence of a match is expressed by not yielding, never by an error
    - Streaming: forward() is a generator so pairs are never materialized

    Example:
        class ExactNameModule(Module):
            '''Flags accounts whose company names are identical.'''

            def compare(self, left, right):
                if left.id == right.id or left.company_name != right.company_name:
                    return None
                return MatchRecord(
                    account_id_a=left.id,
                    account_id_b=right.id,
                    name_similarity=100.0,
                    address_similarity=0.0,
                    overall_similarity=60.0,
                    match_reason="Company name 100.0% similar",
                    matched_fields=("companyName",),
                )
    """

    @abstractmethod
    def compare(self, left: AccountSchema, right: AccountSchema) -> MatchRecord | None:
        """Compare two accounts.

        Args:
            left: First account (becomes account_id_a)
            right: Second account (becomes account_id_b)

        Returns:
            A MatchRecord when the pair is a likely duplicate, otherwise None.
            Comparing an account with itself always returns None.
        """
        pass  # pragma: no cover

    def forward(self, candidates: Iterable[AccountCandidate]) -> Iterator[MatchRecord]:
        """Compare candidate pairs and yield matches.

        Args:
            candidates: Stream of account pairs from a Blocker.

        Yields:
            MatchRecord for each pair that compare() accepts, in candidate
            order. Rejected pairs are dropped silently.
        """
        for candidate in candidates:
            match = self.compare(candidate.left, candidate.right)
            if match is not None:
                yield match

    @abstractmethod
    def inspect_scores(self, matches: list[MatchRecord], sample_size: int = 10) -> ScoreInspectionReport:
        """Explore match scores without ground truth labels.

        Args:
            matches: List of MatchRecord objects to analyze
            sample_size: Number of examples to include (default: 10)

        Returns:
            ScoreInspectionReport with statistics, examples, and recommendations
        """
        pass  # pragma: no cover
