"""
Data contracts for the leadres duplicate detection engine.

This module defines the core Pydantic models that serve as type-safe
interfaces between all components:

- AccountSchema: A business lead record (company identity + contact channels)
- PairKey: Unordered pair of account ids, normalized to (low, high)
- AccountCandidate: Pair of accounts passed to Modules for comparison
- MatchRecord: Result of one comparison that crossed a similarity threshold
- DuplicateGroup: Cluster of accounts believed to be the same business
- DuplicateAnalysisRow: Persisted shape of one match
"""

from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bump whenever normalization, thresholds or weights change.
ALGORITHM_VERSION = "1.0"

# Field names reported in MatchRecord.matched_fields
FIELD_COMPANY_NAME = "companyName"
FIELD_ADDRESS = "address"
FIELD_PHONE = "phone"
FIELD_WEBSITE = "website"


class AccountSchema(BaseModel):
    """
    Domain model for a business account (lead).

    Only the fields the duplicate detector reads are modelled. Free-text
    fields are kept verbatim; normalization happens in the comparator.
    A null company name is stored as an empty string and scores 0 against
    any other name, so the pair can still match on address.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    company_name: str = Field(alias="companyName")
    address: str | None = None
    phone: str | None = None
    website: str | None = None

    @field_validator("company_name", mode="before")
    @classmethod
    def null_name_is_empty(cls, value: object) -> object:
        return "" if value is None else value


class PairKey(NamedTuple):
    """Unordered pair of account ids stored as (low, high).

    Always build through PairKey.of() so that (a, b) and (b, a) produce the
    same key.
    """

    low: int
    high: int

    @classmethod
    def of(cls, a: int, b: int) -> "PairKey":
        return cls(a, b) if a <= b else cls(b, a)


class AccountCandidate(BaseModel):
    """
    Container for a pair of accounts to compare.

    This is the standardized input to all Module.forward() implementations.
    The Blocker validates raw rows into AccountSchema and generates pairs.

    Attributes:
        left: The left account in the pair (earlier in input order)
        right: The right account in the pair
        blocker_name: Name of the blocker that generated this pair
    """

    left: AccountSchema
    right: AccountSchema
    blocker_name: str

    @property
    def pair_key(self) -> PairKey:
        return PairKey.of(self.left.id, self.right.id)


class MatchRecord(BaseModel):
    """
    Outcome of a pairwise comparison that crossed a threshold.

    Created once per qualifying pair during a clustering run and never
    modified afterwards. A later run supersedes it with new records.

    Attributes:
        account_id_a: Identifier of the left account of the comparison
        account_id_b: Identifier of the right account of the comparison
        name_similarity: Company name similarity in range [0, 100]
        address_similarity: Address similarity in range [0, 100]
        overall_similarity: Weighted combination in range [0, 100]
        match_reason: Human-readable reasons joined with "; "
        matched_fields: Fields that contributed, in the order they were checked
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    account_id_a: int = Field(alias="accountIdA")
    account_id_b: int = Field(alias="accountIdB")
    name_similarity: float = Field(..., ge=0.0, le=100.0, alias="nameSimilarity")
    address_similarity: float = Field(..., ge=0.0, le=100.0, alias="addressSimilarity")
    overall_similarity: float = Field(..., ge=0.0, le=100.0, alias="overallSimilarity")
    match_reason: str = Field(alias="matchReason")
    matched_fields: tuple[str, ...] = Field(alias="matchedFields")

    @property
    def pair_key(self) -> PairKey:
        return PairKey.of(self.account_id_a, self.account_id_b)

    @property
    def account_ids(self) -> tuple[int, int]:
        return (self.account_id_a, self.account_id_b)

    def involves(self, account_id: int) -> bool:
        return account_id in (self.account_id_a, self.account_id_b)


class DuplicateGroup(BaseModel):
    """A cluster of matches discovered in one run.

    Membership is implicit: every account referenced by any of the matches.
    """

    group_id: str
    matches: list[MatchRecord]

    @property
    def account_ids(self) -> set[int]:
        return {account_id for match in self.matches for account_id in match.account_ids}


class DuplicateAnalysisRow(BaseModel):
    """
    Persisted shape of one match, tagged with its resolved group.

    Scores are kept as floats with two decimals; matched_fields is stored
    comma-joined to match the dashboard's column layout.
    """

    duplicate_group_id: str
    account_id_a: int
    account_id_b: int
    name_similarity_score: float
    address_similarity_score: float
    overall_similarity_score: float
    match_reason: str
    matched_fields: str
    algorithm_version: str = ALGORITHM_VERSION
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_match(
        cls,
        match: MatchRecord,
        group_id: str,
        algorithm_version: str = ALGORITHM_VERSION,
    ) -> "DuplicateAnalysisRow":
        return cls(
            duplicate_group_id=group_id,
            account_id_a=match.account_id_a,
            account_id_b=match.account_id_b,
            name_similarity_score=round(match.name_similarity, 2),
            address_similarity_score=round(match.address_similarity, 2),
            overall_similarity_score=round(match.overall_similarity, 2),
            match_reason=match.match_reason,
            matched_fields=",".join(match.matched_fields),
            algorithm_version=algorithm_version,
        )
