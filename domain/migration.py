"""
Domain: Load-time field backfill for stored sale rows.

Older stored data may lack fields that newer records always carry. This module
corrects such rows once per load, before they are turned into SaleRecord
entities.

Contract excerpts implemented here:
- A row without an id (missing or empty) is given a freshly generated id.
- A row without a customerName (missing or empty) is given UNKNOWN_CUSTOMER.
- The backfill never rejects a row and never mutates its input.
- The backfill is idempotent: running it on already corrected rows returns
  equal rows.

There is no schema version; the correction is purely field driven.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from .sale import UNKNOWN_CUSTOMER, new_sale_id


def backfill_sale_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a corrected copy of a single stored sale row."""

    fixed = dict(row)
    if not fixed.get("id"):
        fixed["id"] = new_sale_id()
    if not fixed.get("customerName"):
        fixed["customerName"] = UNKNOWN_CUSTOMER
    return fixed


def backfill_sale_rows(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Return corrected copies of stored sale rows, order preserved."""

    return [backfill_sale_row(row) for row in rows]


__all__ = ["backfill_sale_row", "backfill_sale_rows"]
