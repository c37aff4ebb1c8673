"""
Domain: Suggested export markets.

The record form offers these countries in a fixed order. Picking OTHER_COUNTRY
switches the form to free-text country entry.
"""

from __future__ import annotations

from typing import Tuple

COMMON_COUNTRIES: Tuple[str, ...] = (
    "China",
    "Russia",
    "United States",
    "Germany",
    "India",
    "Brazil",
    "United Kingdom",
    "France",
    "Italy",
    "Canada",
    "Australia",
    "Japan",
    "South Korea",
    "Mexico",
    "Indonesia",
    "Turkey",
    "Saudi Arabia",
    "South Africa",
    "Vietnam",
    "Thailand",
)

OTHER_COUNTRY: str = "OTHER"
