from decimal import Decimal

import pytest

from marketplace.catalog.domain.criteria import (
    ORDERINGS,
    ListingCriteria,
    SortKey,
    canonical_filters,
    parse_pagination,
    parse_price,
    resolve_sort,
)
from marketplace.catalog.domain.errors import InvalidFilterError
from marketplace.catalog.domain.records import ListingCondition, ListingStatus
from marketplace.tests.factories import make_record


@pytest.mark.unit
class TestParsePrice:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("12.50", Decimal("12.50")),
            (" 7 ", Decimal("7")),
            (5, Decimal("5")),
            (2.5, Decimal("2.5")),
            (Decimal("3.10"), Decimal("3.10")),
        ],
    )
    def test_accepts_numbers(self, value, expected):
        assert parse_price("min_price", value) == expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_means_no_bound(self, value):
        assert parse_price("min_price", value) is None

    @pytest.mark.parametrize("value", ["abc", "12,50", "NaN", "Infinity", True, [10], {"a": 1}])
    def test_rejects_malformed_values(self, value):
        with pytest.raises(InvalidFilterError) as exc_info:
            parse_price("min_price", value)

        assert exc_info.value.field == "min_price"
        assert exc_info.value.value == value


@pytest.mark.unit
class TestParsePagination:
    def test_defaults(self):
        assert parse_pagination(None) == (20, 0)
        assert parse_pagination({}, default_limit=5) == (5, 0)

    def test_negative_values_clamp_to_zero(self):
        assert parse_pagination({"limit": -3, "offset": -10}) == (0, 0)

    def test_numeric_strings(self):
        assert parse_pagination({"limit": "15", "offset": " 30 "}) == (15, 30)

    @pytest.mark.parametrize("value", ["ten", "1.5", 1.5, True, [1]])
    def test_rejects_non_integers(self, value):
        with pytest.raises(InvalidFilterError):
            parse_pagination({"limit": value})

    def test_invalid_offset_names_field(self):
        with pytest.raises(InvalidFilterError) as exc_info:
            parse_pagination({"offset": "x"})
        assert exc_info.value.field == "offset"


@pytest.mark.unit
class TestSortResolution:
    @pytest.mark.parametrize("sort", [None, "", "cheapest", 42])
    def test_unknown_falls_back_to_newest(self, sort):
        assert resolve_sort(sort) == SortKey.NEWEST

    def test_case_insensitive(self):
        assert resolve_sort(" PRICE_HIGH ") == SortKey.PRICE_HIGH

    def test_every_ordering_ends_with_id(self):
        for ordering in ORDERINGS.values():
            assert ordering[-1].field == "id"
            assert ordering[-1].descending is False


@pytest.mark.unit
class TestListingCriteria:
    def test_aliases_are_canonicalised(self):
        assert canonical_filters({"minPrice": 1, "sellerId": "a", "searchText": "x"}) == {
            "min_price": 1,
            "seller": "a",
            "search": "x",
        }

    def test_canonical_key_wins_over_alias(self):
        assert canonical_filters({"min_price": 5, "minPrice": 1}) == {"min_price": 5}

    def test_unknown_keys_ignored(self):
        criteria = ListingCriteria.from_filters({"colour": "red", "page": 3})
        assert criteria == ListingCriteria()

    def test_blank_values_mean_no_filter(self):
        criteria = ListingCriteria.from_filters({"category": "", "search": "  ", "seller": None})
        assert criteria.category is None
        assert criteria.search is None
        assert criteria.seller is None

    def test_one_bad_filter_aborts_whole_query(self):
        with pytest.raises(InvalidFilterError):
            ListingCriteria.from_filters({"category": "tops", "max_price": "lots"})

    def test_status_facet_cannot_widen_visibility(self):
        criteria = ListingCriteria.from_filters(
            {"status": "deleted"}, visible_statuses=frozenset({ListingStatus.ACTIVE})
        )
        assert criteria.statuses == frozenset()

    def test_status_facet_in_admin_context(self):
        criteria = ListingCriteria.from_filters({"status": "reserved"}, visible_statuses=None)
        assert criteria.statuses == frozenset({ListingStatus.PENDING})

    def test_condition_normalised(self):
        criteria = ListingCriteria.from_filters({"condition": "Like New"})
        assert criteria.condition == ListingCondition.LIKE_NEW

    def test_matches_every_predicate(self):
        record = make_record(
            1,
            category="tops",
            category_name="Tops",
            condition=ListingCondition.FAIR,
            price=25,
            seller_id="42",
            brand="Levi's",
        )
        criteria = ListingCriteria.from_filters(
            {
                "category": "Tops",
                "condition": "fair",
                "min_price": 25,
                "max_price": "25.00",
                "seller": 42,
                "search": "LEVI",
            },
            visible_statuses=frozenset({ListingStatus.ACTIVE}),
        )
        assert criteria.matches(record)

    @pytest.mark.parametrize(
        "filters",
        [
            {"category": "dresses"},
            {"condition": "new"},
            {"min_price": "25.01"},
            {"max_price": "24.99"},
            {"seller": "43"},
            {"search": "gucci"},
            {"condition": "mint"},
        ],
    )
    def test_excludes_on_any_failed_predicate(self, filters):
        record = make_record(1, category="tops", category_name="Tops", price=25, seller_id="42", brand="Levi's")
        assert not ListingCriteria.from_filters(filters).matches(record)

    def test_search_covers_title_description_and_brand(self):
        record = make_record(1, title="Linen shirt", description="Barely worn", brand="Uniqlo")
        for term in ("linen", "WORN", "qlo"):
            assert ListingCriteria.from_filters({"search": term}).matches(record)
