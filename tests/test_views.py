"""
Tests for `domain/views.py`.

Covers contract rules:
- Distinct countries/series are sorted and duplicate-free.
- Cross-reference returns sorted distinct results and is consistent in both directions.
- History search is case-insensitive over series, country and customer and keeps order.
- Views are pure: same inputs, same outputs, inputs untouched.
"""

from __future__ import annotations

from typing import List

import pytest

from domain.sale import SaleRecord
from domain.views import (
    ViewMode,
    country_distribution,
    cross_reference,
    customer_activity,
    distinct_countries,
    distinct_products,
    search_history,
    selection_options,
)


def _sale(sale_id: str, series: str, country: str, customer: str, ts: int) -> SaleRecord:
    return SaleRecord(id=sale_id, series_name=series, country=country, customer_name=customer, timestamp=ts)


@pytest.fixture
def sales() -> List[SaleRecord]:
    # Most recent first, as the store keeps them.
    return [
        _sale("6", "HB900", "Japan", "Acme", 6),
        _sale("5", "HB851", "Germany", "LLC Tech", 5),
        _sale("4", "HB851", "Japan", "Acme", 4),
        _sale("3", "HB852", "Brazil", "Client A", 3),
        _sale("2", "HB851", "Japan", "LLC Tech", 2),
        _sale("1", "HB853", "Germany", "Unknown", 1),
    ]


class TestDistinct:
    def test_distinct_countries_sorted_unique(self, sales):
        assert distinct_countries(sales) == ["Brazil", "Germany", "Japan"]

    def test_distinct_products_sorted_unique(self, sales):
        assert distinct_products(sales) == ["HB851", "HB852", "HB853", "HB900"]

    def test_empty_sales(self):
        assert distinct_countries([]) == []
        assert distinct_products([]) == []


class TestCrossReference:
    def test_by_country_lists_series_sold_there(self, sales):
        assert cross_reference(sales, ViewMode.BY_COUNTRY, "Japan") == ["HB851", "HB900"]

    def test_by_series_lists_countries_reached(self, sales):
        assert cross_reference(sales, ViewMode.BY_SERIES, "HB851") == ["Germany", "Japan"]

    def test_empty_selection_or_no_match(self, sales):
        assert cross_reference(sales, ViewMode.BY_COUNTRY, "") == []
        assert cross_reference(sales, ViewMode.BY_COUNTRY, "France") == []
        assert cross_reference(sales, ViewMode.BY_SERIES, "NOPE") == []

    def test_history_mode_has_no_cross_reference(self, sales):
        assert cross_reference(sales, ViewMode.HISTORY, "Japan") == []

    def test_matching_is_exact(self, sales):
        assert cross_reference(sales, ViewMode.BY_COUNTRY, "japan") == []

    def test_both_directions_are_consistent(self, sales):
        for country in distinct_countries(sales):
            for series in cross_reference(sales, ViewMode.BY_COUNTRY, country):
                assert country in cross_reference(sales, ViewMode.BY_SERIES, series)

    def test_is_repeatable(self, sales):
        first = cross_reference(sales, ViewMode.BY_SERIES, "HB851")
        second = cross_reference(sales, ViewMode.BY_SERIES, "HB851")
        assert first == second


class TestSearchHistory:
    def test_empty_term_returns_everything_in_order(self, sales):
        assert search_history(sales, "") == sales

    def test_case_insensitive_customer_match(self, sales):
        result = search_history(sales, "llc")
        assert [s.id for s in result] == ["5", "2"]

    def test_matches_series_and_country(self, sales):
        assert [s.id for s in search_history(sales, "hb85")] == ["5", "4", "3", "2", "1"]
        assert [s.id for s in search_history(sales, "GERM")] == ["5", "1"]

    def test_no_match(self, sales):
        assert search_history(sales, "zzz") == []

    def test_does_not_modify_input(self, sales):
        before = list(sales)
        search_history(sales, "japan")
        assert sales == before


class TestSelectionOptions:
    def test_by_country_offers_countries_seen(self, sales):
        assert selection_options(ViewMode.BY_COUNTRY, sales, ["X"]) == ["Brazil", "Germany", "Japan"]

    def test_by_series_offers_product_set(self, sales):
        assert selection_options(ViewMode.BY_SERIES, sales, ["HB851", "HB999"]) == ["HB851", "HB999"]

    def test_history_offers_nothing(self, sales):
        assert selection_options(ViewMode.HISTORY, sales, ["HB851"]) == []


def test_country_distribution(sales):
    assert country_distribution(sales) == {"Japan": 3, "Germany": 2, "Brazil": 1}


def test_customer_activity(sales):
    assert customer_activity(sales) == {"Acme": 2, "LLC Tech": 2, "Client A": 1, "Unknown": 1}
