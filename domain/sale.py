"""
Domain: Sale events.

A sale record logs one product series being sold into a country for a named
customer. Records are created once and never edited; deletion removes them
entirely.

Contract excerpts relevant here:
- Every record carries a non-empty, never reused id.
- series_name is a soft reference to the product set: it is not enforced after
  creation and deleting a product does not touch the records that mention it.
- Records migrated from older data without a customer carry UNKNOWN_CUSTOMER.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from .time import millis_to_utc

# Customer name backfilled into records stored before customers were tracked.
UNKNOWN_CUSTOMER: str = "Unknown"


def new_sale_id() -> str:
    """Generate a fresh opaque sale identifier."""

    return str(uuid4())


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable record of a series sold to a country.

    timestamp is the creation time in epoch milliseconds (UTC). It is
    informative only; ordering of a collection is owned by the store
    (most recent first).
    """

    id: str
    series_name: str
    country: str
    customer_name: str
    timestamp: int

    @property
    def recorded_at(self) -> datetime:
        """Creation time as a timezone-aware UTC datetime."""
        return millis_to_utc(self.timestamp)

    def describe(self) -> str:
        """Short 'series -> country (customer)' form."""
        return f"{self.series_name} -> {self.country} ({self.customer_name})"
