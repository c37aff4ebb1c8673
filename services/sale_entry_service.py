"""
Sale entry workflow.

Holds the pending record-sale form, validates it on submit and hands valid
input to the record store.

Validation order on submit:
1. Resolve the country: trimmed custom text in custom mode, else the selection
2. Series and country must both be present
3. The trimmed customer name must be present
4. The series must be in the product set
Only the customer name is trimmed; series and country are used exactly as
selected or typed.

Every submit leaves a transient notification that clears itself after
NOTIFICATION_TTL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from domain.countries import OTHER_COUNTRY
from domain.sale import SaleRecord
from domain.time import require_utc_timestamp
from services.record_store import RecordStore

NOTIFICATION_TTL = timedelta(seconds=3)

MISSING_SELECTION_MESSAGE = "Please select both a series and a country."
MISSING_CUSTOMER_MESSAGE = "Please enter the customer name/abbreviation."


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    message: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if this notification should no longer be shown."""
        return (now or datetime.now(timezone.utc)) >= self.expires_at


@dataclass(slots=True)
class SaleEntryForm:
    """Pending form fields. Empty strings mean 'nothing chosen yet'."""

    selected_series: str = ""
    selected_country: str = ""
    custom_country: str = ""
    use_custom_country: bool = False
    customer_name: str = ""

    def resolved_country(self) -> str:
        if self.use_custom_country:
            return self.custom_country.strip()
        return self.selected_country


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """
    Outcome of one submit.

    success: True if a sale was recorded
    notification: message shown to the user for this submit
    sale: the recorded sale (None on validation failure)
    """
    success: bool
    notification: Notification
    sale: Optional[SaleRecord] = None


@dataclass(slots=True)
class SaleEntryWorkflow:
    store: RecordStore
    form: SaleEntryForm = field(default_factory=SaleEntryForm)
    notification: Optional[Notification] = None

    def choose_country(self, value: str) -> None:
        """Apply a pick from the country list; OTHER switches to free-text entry."""

        if value == OTHER_COUNTRY:
            self.form.use_custom_country = True
            self.form.selected_country = ""
        else:
            self.form.selected_country = value

    def cancel_custom_country(self) -> None:
        self.form.use_custom_country = False

    def reset(self) -> None:
        self.form = SaleEntryForm()

    def _notify(self, kind: NotificationKind, message: str, now: Optional[datetime]) -> Notification:
        created = now or datetime.now(timezone.utc)
        require_utc_timestamp("now", created)
        self.notification = Notification(
            kind=kind,
            message=message,
            created_at=created,
            expires_at=created + NOTIFICATION_TTL,
        )
        return self.notification

    def _fail(self, message: str, now: Optional[datetime]) -> SubmissionResult:
        return SubmissionResult(
            success=False,
            notification=self._notify(NotificationKind.ERROR, message, now),
        )

    def submit(self, now: Optional[datetime] = None) -> SubmissionResult:
        """
        Validate the form and record the sale.

        Validation failures never reach the store; the form is kept so the
        user can correct it. On success the form is reset.

        Raises:
            PersistenceError: If the store cannot write the new sale.
        """

        series = self.form.selected_series
        country = self.form.resolved_country()

        if not series or not country:
            return self._fail(MISSING_SELECTION_MESSAGE, now)

        customer = self.form.customer_name.strip()
        if not customer:
            return self._fail(MISSING_CUSTOMER_MESSAGE, now)

        if series not in self.store.products:
            return self._fail(f"Unknown product series: {series}. Import it under Manage Products first.", now)

        sale = self.store.add_sale(series, country, customer)
        notification = self._notify(
            NotificationKind.SUCCESS,
            f"Recorded: {series} sold to {country} ({customer})",
            now,
        )
        self.reset()
        return SubmissionResult(success=True, notification=notification, sale=sale)

    def current_notification(self, now: Optional[datetime] = None) -> Optional[Notification]:
        """Return the active notification, clearing it once it has expired."""

        if self.notification is not None and self.notification.is_expired(now):
            self.notification = None
        return self.notification


__all__ = [
    "NOTIFICATION_TTL",
    "MISSING_SELECTION_MESSAGE",
    "MISSING_CUSTOMER_MESSAGE",
    "NotificationKind",
    "Notification",
    "SaleEntryForm",
    "SubmissionResult",
    "SaleEntryWorkflow",
]
