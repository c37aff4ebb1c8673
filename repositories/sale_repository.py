"""
Sale repository (persistence).

This module provides *only* serialization of the sale collection to and from a
key-value storage. It does not enforce business rules; ordering and id
uniqueness are owned by the record store.

Stored form under SALES_KEY: a JSON array of
    {"id", "seriesName", "country", "customerName", "timestamp"}
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Mapping, Sequence

from domain.migration import backfill_sale_rows
from domain.sale import SaleRecord
from domain.time import MAX_MILLIS, MIN_MILLIS
from repositories.storage import KeyValueStorage

logger = logging.getLogger(__name__)

SALES_KEY: str = "gst_sales"


def _coerce_timestamp(value: Any) -> int:
    """Epoch milliseconds from a stored value; 0 when missing, non-numeric or out of range."""

    try:
        millis = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Stored sale has an invalid timestamp %r, using 0", value)
        return 0

    if not MIN_MILLIS <= millis <= MAX_MILLIS:
        logger.warning("Stored sale timestamp %d is out of range, using 0", millis)
        return 0
    return millis


def _row_to_sale(row: Mapping[str, Any]) -> SaleRecord:
    """Convert a (backfilled) stored row into a SaleRecord, defaulting bad fields."""

    return SaleRecord(
        id=str(row["id"]),
        series_name=str(row.get("seriesName") or ""),
        country=str(row.get("country") or ""),
        customer_name=str(row["customerName"]),
        timestamp=_coerce_timestamp(row.get("timestamp")),
    )


def sale_to_row(sale: SaleRecord) -> dict[str, Any]:
    """Convert a SaleRecord into its stored JSON shape."""

    return {
        "id": sale.id,
        "seriesName": sale.series_name,
        "country": sale.country,
        "customerName": sale.customer_name,
        "timestamp": sale.timestamp,
    }


def parse_sales(text: str | None) -> List[SaleRecord]:
    """
    Deserialize stored sale text, applying the load-time backfill.

    Never raises on bad data: unparseable text or a non-array payload loads as
    an empty collection and entries that are not objects are dropped, each
    with a warning.
    """

    if text is None:
        return []

    try:
        payload = json.loads(text)
    except ValueError as e:
        logger.warning("Stored sales are not valid JSON, loading none: %s", e)
        return []

    if not isinstance(payload, list):
        logger.warning("Stored sales are not a JSON array (got %s), loading none", type(payload).__name__)
        return []

    rows = [item for item in payload if isinstance(item, dict)]
    dropped = len(payload) - len(rows)
    if dropped:
        logger.warning("Dropped %d stored sale entries that were not objects", dropped)

    return [_row_to_sale(row) for row in backfill_sale_rows(rows)]


def load_sales(storage: KeyValueStorage) -> List[SaleRecord]:
    """Load the sale collection (missing key means no sales)."""

    return parse_sales(storage.load(SALES_KEY))


def save_sales(storage: KeyValueStorage, sales: Sequence[SaleRecord]) -> None:
    """Write the full sale collection under SALES_KEY."""

    storage.save(SALES_KEY, json.dumps([sale_to_row(sale) for sale in sales], ensure_ascii=False))


__all__ = [
    "SALES_KEY",
    "sale_to_row",
    "parse_sales",
    "load_sales",
    "save_sales",
]
