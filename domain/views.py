"""
Domain: Derived views over the sale collection.

Pure functions computed on demand from the current records. None of them
cache or mutate; calling one twice with the same inputs returns equal output.

Views:
- distinct countries / distinct series seen in sales
- cross-reference (country -> series sold there, series -> countries reached)
- full-text history search
- per-country and per-customer sale counts
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Sequence

from .sale import SaleRecord


class ViewMode(str, Enum):
    BY_COUNTRY = "BY_COUNTRY"
    BY_SERIES = "BY_SERIES"
    HISTORY = "HISTORY"


def distinct_countries(sales: Sequence[SaleRecord]) -> List[str]:
    """Sorted distinct countries appearing in sales."""

    return sorted({sale.country for sale in sales})


def distinct_products(sales: Sequence[SaleRecord]) -> List[str]:
    """Sorted distinct series names appearing in sales."""

    return sorted({sale.series_name for sale in sales})


def cross_reference(sales: Sequence[SaleRecord], mode: ViewMode, selected: str) -> List[str]:
    """
    Resolve the other side of a country/series pairing.

    BY_COUNTRY: series sold to the selected country.
    BY_SERIES: countries the selected series was sold to.

    Returns a sorted, duplicate-free list; empty when nothing is selected,
    nothing matches or the mode is HISTORY.
    """

    if not selected:
        return []
    if mode == ViewMode.BY_COUNTRY:
        return sorted({sale.series_name for sale in sales if sale.country == selected})
    if mode == ViewMode.BY_SERIES:
        return sorted({sale.country for sale in sales if sale.series_name == selected})
    return []


def search_history(sales: Sequence[SaleRecord], term: str) -> List[SaleRecord]:
    """
    Case-insensitive substring search over series, country and customer.

    An empty term matches every record. Matching records keep their
    collection order (most recent first).
    """

    needle = term.lower()
    return [
        sale
        for sale in sales
        if needle in sale.series_name.lower()
        or needle in sale.country.lower()
        or needle in sale.customer_name.lower()
    ]


def selection_options(
    mode: ViewMode,
    sales: Sequence[SaleRecord],
    products: Sequence[str],
) -> List[str]:
    """
    Items offered for selection in the explorer.

    Countries are only those already sold to; series come from the product
    set, so a freshly imported series shows up before its first sale.
    """

    if mode == ViewMode.BY_COUNTRY:
        return distinct_countries(sales)
    if mode == ViewMode.BY_SERIES:
        return list(products)
    return []


def country_distribution(sales: Sequence[SaleRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for sale in sales:
        counts[sale.country] = counts.get(sale.country, 0) + 1
    return counts


def customer_activity(sales: Sequence[SaleRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for sale in sales:
        counts[sale.customer_name] = counts.get(sale.customer_name, 0) + 1
    return counts


__all__ = [
    "ViewMode",
    "distinct_countries",
    "distinct_products",
    "cross_reference",
    "search_history",
    "selection_options",
    "country_distribution",
    "customer_activity",
]
