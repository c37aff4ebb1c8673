"""
Tests for `domain/sale.py` and `domain/time.py`.

Covers contract rules:
- SaleRecord is immutable (frozen).
- Generated sale ids are non-empty and unique.
- Epoch millisecond timestamps convert to and from UTC datetimes.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from domain.sale import UNKNOWN_CUSTOMER, SaleRecord, new_sale_id
from domain.time import MAX_MILLIS, MIN_MILLIS, format_sale_date, millis_from_utc, millis_to_utc


def _sale(**overrides) -> SaleRecord:
    fields = dict(
        id="sale-1",
        series_name="HB851",
        country="Japan",
        customer_name="Acme",
        timestamp=1_735_689_600_000,
    )
    fields.update(overrides)
    return SaleRecord(**fields)


def test_sale_record_is_immutable() -> None:
    """Verify SaleRecord cannot be mutated after creation (frozen entity)."""

    sale = _sale()

    with pytest.raises(FrozenInstanceError):
        sale.country = "China"  # type: ignore[misc]


def test_new_sale_ids_are_unique_and_non_empty() -> None:
    ids = {new_sale_id() for _ in range(500)}

    assert len(ids) == 500
    assert all(ids)


def test_recorded_at_is_utc_datetime() -> None:
    sale = _sale(timestamp=1_735_689_600_000)

    assert sale.recorded_at == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_describe_uses_short_form() -> None:
    assert _sale().describe() == "HB851 -> Japan (Acme)"


def test_unknown_customer_sentinel() -> None:
    assert UNKNOWN_CUSTOMER == "Unknown"


def test_millis_round_trip_and_utc_requirement() -> None:
    dt = datetime(2025, 3, 4, 5, 6, 7, 123000, tzinfo=timezone.utc)

    assert millis_to_utc(millis_from_utc(dt)) == dt

    with pytest.raises(ValueError):
        millis_from_utc(datetime(2025, 1, 1))

    with pytest.raises(ValueError):
        millis_from_utc(datetime(2025, 1, 1, tzinfo=timezone(timedelta(hours=2))))


def test_format_sale_date() -> None:
    assert format_sale_date(1_736_035_200_000) == "Jan 5, 2025"


def test_millis_outside_datetime_range_rejected() -> None:
    assert millis_to_utc(MAX_MILLIS).year == 9999
    assert millis_to_utc(MIN_MILLIS).year == 1

    with pytest.raises(ValueError):
        millis_to_utc(MAX_MILLIS + 1)
    with pytest.raises(ValueError):
        millis_to_utc(MIN_MILLIS - 1)
