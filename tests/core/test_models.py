"""Tests for the data contracts in leadres.core.models."""

from datetime import timezone

import pytest
from pydantic import ValidationError

from leadres.core.models import (
    ALGORITHM_VERSION,
    AccountCandidate,
    AccountSchema,
    DuplicateAnalysisRow,
    DuplicateGroup,
    MatchRecord,
    PairKey,
)


def make_match(a: int, b: int, **overrides) -> MatchRecord:
    data = {
        "account_id_a": a,
        "account_id_b": b,
        "name_similarity": 92.5,
        "address_similarity": 81.25,
        "overall_similarity": 88.0,
        "match_reason": "Company name 92.5% similar; Address 81.2% similar",
        "matched_fields": ("companyName", "address"),
    }
    data.update(overrides)
    return MatchRecord(**data)


class TestAccountSchema:
    """Validation of account rows."""

    def test_accepts_camel_case_fields(self):
        """Rows from the dashboard use companyName."""
        account = AccountSchema.model_validate({"id": 7, "companyName": "Acme Corp"})
        assert account.id == 7
        assert account.company_name == "Acme Corp"
        assert account.address is None
        assert account.phone is None
        assert account.website is None

    def test_accepts_snake_case_fields(self):
        """Field names work as well as aliases."""
        account = AccountSchema(id=1, company_name="Acme", address="1 Main St", phone="555", website="acme.com")
        assert account.company_name == "Acme"
        assert account.website == "acme.com"

    def test_company_name_is_required(self):
        """A row without a company name is rejected."""
        with pytest.raises(ValidationError):
            AccountSchema.model_validate({"id": 1, "address": "1 Main St"})

    def test_null_company_name_becomes_empty(self):
        """A null companyName is accepted as an empty name."""
        account = AccountSchema.model_validate({"id": 1, "companyName": None, "address": "1 Main St"})
        assert account.company_name == ""

    def test_accounts_are_immutable(self):
        """Accounts cannot be modified after validation."""
        account = AccountSchema(id=1, company_name="Acme")
        with pytest.raises(ValidationError):
            account.company_name = "Other"


class TestPairKey:
    """Unordered pair keys."""

    def test_of_orders_ids(self):
        """(a, b) and (b, a) build the same key."""
        assert PairKey.of(5, 2) == PairKey.of(2, 5) == (2, 5)
        assert PairKey.of(5, 2).low == 2
        assert PairKey.of(5, 2).high == 5

    def test_candidate_pair_key(self):
        """AccountCandidate exposes the key of its two accounts."""
        candidate = AccountCandidate(
            left=AccountSchema(id=9, company_name="B"),
            right=AccountSchema(id=3, company_name="A"),
            blocker_name="test",
        )
        assert candidate.pair_key == PairKey(3, 9)


class TestMatchRecord:
    """Match records produced by comparators."""

    def test_scores_must_be_in_range(self):
        """Scores outside [0, 100] are rejected."""
        with pytest.raises(ValidationError):
            make_match(1, 2, overall_similarity=100.5)
        with pytest.raises(ValidationError):
            make_match(1, 2, name_similarity=-1.0)

    def test_accepts_aliases(self):
        """Records can be validated from camelCase payloads."""
        match = MatchRecord.model_validate(
            {
                "accountIdA": 1,
                "accountIdB": 2,
                "nameSimilarity": 100.0,
                "addressSimilarity": 0.0,
                "overallSimilarity": 60.0,
                "matchReason": "Company name 100.0% similar",
                "matchedFields": ["companyName"],
            }
        )
        assert match.matched_fields == ("companyName",)

    def test_helpers(self):
        """pair_key, account_ids and involves describe the pair."""
        match = make_match(4, 2)
        assert match.pair_key == PairKey(2, 4)
        assert match.account_ids == (4, 2)
        assert match.involves(2)
        assert not match.involves(3)


class TestDuplicateGroup:
    """Group membership is derived from matches."""

    def test_account_ids_union_of_matches(self):
        group = DuplicateGroup(group_id="g1", matches=[make_match(1, 2), make_match(2, 5)])
        assert group.account_ids == {1, 2, 5}


class TestDuplicateAnalysisRow:
    """Persisted row shape."""

    def test_from_match_copies_scores_and_joins_fields(self):
        """matched_fields is stored comma-joined and scores rounded to 2 places."""
        match = make_match(1, 2, name_similarity=92.4567, overall_similarity=88.0012)
        row = DuplicateAnalysisRow.from_match(match, "group-1")

        assert row.duplicate_group_id == "group-1"
        assert row.account_id_a == 1
        assert row.account_id_b == 2
        assert row.name_similarity_score == 92.46
        assert row.address_similarity_score == 81.25
        assert row.overall_similarity_score == 88.0
        assert row.matched_fields == "companyName,address"
        assert row.match_reason == match.match_reason

    def test_version_and_timestamp(self):
        """Rows carry the algorithm version and a UTC timestamp."""
        row = DuplicateAnalysisRow.from_match(make_match(1, 2), "g")
        assert row.algorithm_version == ALGORITHM_VERSION == "1.0"
        assert row.analyzed_at.tzinfo == timezone.utc

        custom = DuplicateAnalysisRow.from_match(make_match(1, 2), "g", algorithm_version="2.0")
        assert custom.algorithm_version == "2.0"
