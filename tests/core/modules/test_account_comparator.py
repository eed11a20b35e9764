"""
Tests for AccountComparator.

Covers:
1. Parameter validation
2. Name and address thresholds, including exact boundaries
3. Phone and website corroboration
4. Reason strings and matched field order
5. Overall score weighting
6. forward() streaming and inspect_scores()
"""

from unittest.mock import patch

import pytest

from leadres.core.blockers import AllPairsBlocker
from leadres.core.models import AccountSchema
from leadres.core.modules.account_comparator import AccountComparator
from tests.fixtures.accounts import ACCOUNT_RECORDS

SIMILARITY = "leadres.core.modules.account_comparator.similarity"


def account(account_id: int, name: str, **fields) -> AccountSchema:
    return AccountSchema(id=account_id, company_name=name, **fields)


@pytest.fixture
def records():
    return {row["id"]: AccountSchema.model_validate(row) for row in ACCOUNT_RECORDS}


class TestAccountComparatorInitialization:
    """Constructor validation."""

    def test_defaults(self):
        comparator = AccountComparator()
        assert comparator.name_threshold == 85.0
        assert comparator.address_threshold == 80.0
        assert comparator.name_weight == 0.6
        assert comparator.address_weight == 0.4
        assert comparator.contact_fields_qualify is False

    @pytest.mark.parametrize("threshold", [-0.1, 100.1])
    def test_thresholds_must_be_percentages(self, threshold):
        with pytest.raises(ValueError, match="name_threshold"):
            AccountComparator(name_threshold=threshold)
        with pytest.raises(ValueError, match="address_threshold"):
            AccountComparator(address_threshold=threshold)

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum to 1.0"):
            AccountComparator(name_weight=0.5, address_weight=0.4)

    def test_weights_must_be_non_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            AccountComparator(name_weight=-0.2, address_weight=1.2)


class TestAccountComparatorCompare:
    """Pairwise comparison rules."""

    def test_all_fields_match(self, records):
        """Suffix, abbreviation, phone format and URL scheme differences are ignored."""
        match = AccountComparator().compare(records[1], records[2])

        assert match is not None
        assert match.account_id_a == 1
        assert match.account_id_b == 2
        assert match.name_similarity == 100.0
        assert match.address_similarity == 100.0
        assert match.overall_similarity == 100.0
        assert match.matched_fields == ("companyName", "address", "phone", "website")
        assert match.match_reason == (
            "Company name 100.0% similar; Address 100.0% similar; Identical phone number; Identical website"
        )

    def test_name_only_match(self, records):
        """XYZ Corporation and XYZ Corp match on name alone."""
        match = AccountComparator().compare(records[3], records[4])

        assert match is not None
        assert match.name_similarity == 100.0
        assert match.address_similarity < 80.0
        assert match.matched_fields == ("companyName",)
        assert match.match_reason == "Company name 100.0% similar"
        assert match.overall_similarity == pytest.approx(60.0 + 0.4 * match.address_similarity)

    def test_unrelated_accounts_do_not_match(self, records):
        """Names and addresses far apart produce no match."""
        assert AccountComparator().compare(records[1], records[5]) is None
        assert AccountComparator().compare(records[3], records[6]) is None

    def test_self_comparison_returns_none(self, records):
        """An account never matches itself."""
        assert AccountComparator().compare(records[1], records[1]) is None

    def test_address_only_match(self):
        """Different names at the same address qualify on address."""
        left = account(1, "Peach State Plumbing", address="300 Gamma Avenue, Athens, GA")
        right = account(2, "Northside Bakery", address="300 Gamma Ave, Athens, GA")

        match = AccountComparator().compare(left, right)

        assert match is not None
        assert match.matched_fields == ("address",)
        assert match.address_similarity == 100.0
        assert match.match_reason == "Address 100.0% similar"

    def test_comparison_is_symmetric_in_scores(self, records):
        """Swapping the arguments keeps the scores and swaps the ids."""
        forward = AccountComparator().compare(records[3], records[4])
        backward = AccountComparator().compare(records[4], records[3])

        assert forward.name_similarity == backward.name_similarity
        assert forward.address_similarity == backward.address_similarity
        assert forward.overall_similarity == backward.overall_similarity
        assert backward.account_ids == (4, 3)

    def test_missing_addresses_score_zero(self):
        """Accounts without addresses still match on name."""
        match = AccountComparator().compare(account(1, "Acme Widgets Inc"), account(2, "Acme Widgets"))

        assert match is not None
        assert match.address_similarity == 0.0
        assert match.overall_similarity == pytest.approx(60.0)

    def test_null_company_name_matches_on_address(self):
        """A null name scores 0 and the address decides the pair."""
        rows = [
            {"id": 1, "companyName": None, "address": "1 Main Street"},
            {"id": 2, "companyName": "Acme", "address": "1 Main St"},
        ]
        matches = list(AccountComparator().forward(AllPairsBlocker().stream(rows)))

        assert len(matches) == 1
        assert matches[0].name_similarity == 0.0
        assert matches[0].address_similarity == 100.0
        assert matches[0].matched_fields == ("address",)
        assert matches[0].overall_similarity == pytest.approx(40.0)


class TestThresholdBoundaries:
    """Scores exactly on a threshold qualify; scores just below do not."""

    @pytest.mark.parametrize(
        ("scores", "expected_fields"),
        [
            ([85.0, 0.0], ("companyName",)),
            ([84.99, 0.0], None),
            ([0.0, 80.0], ("address",)),
            ([0.0, 79.99], None),
            ([85.0, 80.0], ("companyName", "address")),
        ],
    )
    def test_boundaries(self, scores, expected_fields):
        with patch(SIMILARITY, side_effect=scores):
            match = AccountComparator().compare(account(1, "a"), account(2, "b"))

        if expected_fields is None:
            assert match is None
        else:
            assert match is not None
            assert match.matched_fields == expected_fields

    def test_reason_uses_one_decimal(self):
        """Reason strings format scores with one decimal place."""
        with patch(SIMILARITY, side_effect=[87.56, 82.0]):
            match = AccountComparator().compare(account(1, "a"), account(2, "b"))

        assert match.match_reason == "Company name 87.6% similar; Address 82.0% similar"
        assert match.overall_similarity == pytest.approx(87.56 * 0.6 + 82.0 * 0.4)

    def test_custom_thresholds(self):
        """Thresholds are configurable per comparator."""
        with patch(SIMILARITY, side_effect=[70.0, 0.0]):
            match = AccountComparator(name_threshold=70.0).compare(account(1, "a"), account(2, "b"))
        assert match is not None


class TestContactFields:
    """Phone and website corroboration."""

    def test_identical_phone_alone_does_not_qualify_by_default(self):
        """Phone and website are only checked once name or address passes."""
        left = account(1, "Alpha Roofing", phone="404-555-1234", website="shared.com")
        right = account(2, "Zeta Bakery", phone="(404) 555-1234", website="https://shared.com")

        assert AccountComparator().compare(left, right) is None

    def test_contact_fields_qualify_when_enabled(self):
        """With contact_fields_qualify an identical phone or website flags the pair."""
        left = account(1, "Alpha Roofing", phone="404-555-1234", website="shared.com")
        right = account(2, "Zeta Bakery", phone="(404) 555-1234", website="https://shared.com")

        match = AccountComparator(contact_fields_qualify=True).compare(left, right)

        assert match is not None
        assert match.matched_fields == ("phone", "website")
        assert match.match_reason == "Identical phone number; Identical website"

    def test_contact_fields_qualify_still_needs_a_matching_field(self):
        """Nothing in common still means no match."""
        comparator = AccountComparator(contact_fields_qualify=True)
        assert comparator.compare(account(1, "Alpha Roofing"), account(2, "Zeta Bakery")) is None

    def test_short_phone_numbers_are_ignored(self):
        """Phones with fewer than 10 digits never count as identical."""
        left = account(1, "Acme Widgets", phone="555-1234")
        right = account(2, "Acme Widgets", phone="5551234")

        match = AccountComparator().compare(left, right)

        assert match.matched_fields == ("companyName",)

    def test_different_phone_and_website_not_reported(self):
        left = account(1, "Acme Widgets", phone="404-555-1234", website="acme.com")
        right = account(2, "Acme Widgets", phone="404-555-9999", website="acme.net")

        match = AccountComparator().compare(left, right)

        assert match.matched_fields == ("companyName",)

    def test_www_is_ignored_only_after_scheme(self):
        """https://www.x.com equals x.com; bare www.x.com does not."""
        left = account(1, "Acme Widgets", website="https://www.acme.com")
        same = account(2, "Acme Widgets", website="acme.com")
        bare = account(3, "Acme Widgets", website="www.acme.com")

        assert "website" in AccountComparator().compare(left, same).matched_fields
        assert "website" not in AccountComparator().compare(same, bare).matched_fields


class TestForwardAndInspect:
    """Streaming comparison and score inspection."""

    def test_forward_yields_matches_in_candidate_order(self):
        candidates = AllPairsBlocker().stream(ACCOUNT_RECORDS)
        matches = list(AccountComparator().forward(candidates))

        assert [m.account_ids for m in matches] == [(1, 2), (3, 4)]

    def test_forward_is_lazy(self):
        """forward() returns a generator."""
        result = AccountComparator().forward(iter([]))
        assert hasattr(result, "__next__")

    def test_inspect_scores_empty(self):
        report = AccountComparator().inspect_scores([])

        assert report.total_matches == 0
        assert report.score_distribution == {}
        assert "No matches" in report.recommendations[0]

    def test_inspect_scores(self):
        comparator = AccountComparator()
        matches = list(comparator.forward(AllPairsBlocker().stream(ACCOUNT_RECORDS)))

        report = comparator.inspect_scores(matches, sample_size=1)

        assert report.total_matches == 2
        assert report.score_distribution["max"] == 100.0
        assert report.matched_field_counts["companyName"] == 2
        assert report.matched_field_counts["phone"] == 1
        assert report.high_scoring_examples[0]["account_id_a"] == 1
        assert report.low_scoring_examples[0]["account_id_a"] == 3
        assert any("✅" in rec for rec in report.recommendations)
        assert "# Score Inspection Report" in report.to_markdown()
        assert set(report.stats) == {"total_matches", "score_distribution", "matched_field_counts"}

    def test_inspect_scores_warns_on_address_only_matches(self):
        left = account(1, "Peach State Plumbing", address="300 Gamma Avenue, Athens, GA")
        right = account(2, "Northside Bakery", address="300 Gamma Ave, Athens, GA")
        comparator = AccountComparator()

        report = comparator.inspect_scores([comparator.compare(left, right)])

        assert any("address alone" in rec for rec in report.recommendations)
        assert any("review a sample manually" in rec for rec in report.recommendations)
