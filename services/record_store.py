"""
Record store for products and sales.

Owns the two in-memory collections and writes each one back to key-value
storage after every mutation:

- products: sorted, duplicate-free series names
- sales: SaleRecord entries, most recent first

Persistence strategy:
- The updated collection is built aside, written to storage, and only then
  committed in memory. A failed write raises PersistenceError and leaves the
  in-memory state exactly as it was, so memory never runs ahead of storage.
- Every write is a full-collection rewrite; there is no batching.

Confirmation of destructive actions (delete one sale, clear products) is the
caller's job; the store executes whatever it is asked to.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from domain.sale import SaleRecord, new_sale_id
from domain.time import now_millis
from repositories.product_repository import load_products, save_products
from repositories.sale_repository import load_sales, save_sales
from repositories.storage import KeyValueStorage, PersistenceError

logger = logging.getLogger(__name__)


def _with_unique_ids(sales: Sequence[SaleRecord]) -> List[SaleRecord]:
    """Re-key later duplicates of an id so every loaded record is addressable."""

    seen: set[str] = set()
    unique: List[SaleRecord] = []
    for sale in sales:
        if sale.id in seen:
            logger.warning("Duplicate stored sale id %s, assigning a new id", sale.id)
            sale = SaleRecord(
                id=new_sale_id(),
                series_name=sale.series_name,
                country=sale.country,
                customer_name=sale.customer_name,
                timestamp=sale.timestamp,
            )
        seen.add(sale.id)
        unique.append(sale)
    return unique


class RecordStore:
    """
    Explicit, injectable owner of the product set and the sale history.

    Example:
        store = RecordStore.open(JsonFileStorage("data/sales_tracker.json"))
        store.import_products(["HB851", "HB852"])
        store.add_sale("HB851", "Japan", "Acme")
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        products: Iterable[str] = (),
        sales: Iterable[SaleRecord] = (),
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._storage = storage
        self._products: Tuple[str, ...] = tuple(products)
        self._sales: Tuple[SaleRecord, ...] = tuple(sales)
        self._clock = clock
        self._lock = threading.RLock()

    @classmethod
    def open(cls, storage: KeyValueStorage, clock: Callable[[], int] = now_millis) -> "RecordStore":
        """Load both collections from storage (with the sale field backfill)."""

        products = load_products(storage)
        sales = _with_unique_ids(load_sales(storage))
        logger.info("Loaded %d products and %d sales", len(products), len(sales))
        return cls(storage, products=products, sales=sales, clock=clock)

    @property
    def products(self) -> Tuple[str, ...]:
        return self._products

    @property
    def sales(self) -> Tuple[SaleRecord, ...]:
        return self._sales

    def get_sale(self, sale_id: str) -> Optional[SaleRecord]:
        for sale in self._sales:
            if sale.id == sale_id:
                return sale
        return None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _commit_sales(self, sales: Tuple[SaleRecord, ...]) -> None:
        try:
            save_sales(self._storage, sales)
        except PersistenceError:
            logger.exception("Failed to persist %d sales; in-memory state unchanged", len(sales))
            raise
        self._sales = sales

    def _commit_products(self, products: Tuple[str, ...]) -> None:
        try:
            save_products(self._storage, products)
        except PersistenceError:
            logger.exception("Failed to persist %d products; in-memory state unchanged", len(products))
            raise
        self._products = products

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_sale(self, series_name: str, country: str, customer_name: str) -> SaleRecord:
        """
        Record a sale and put it at the front of the history.

        Fields are stored exactly as given; callers validate them first
        (see services/sale_entry_service.py).
        """

        with self._lock:
            sale = SaleRecord(
                id=new_sale_id(),
                series_name=series_name,
                country=country,
                customer_name=customer_name,
                timestamp=self._clock(),
            )
            self._commit_sales((sale,) + self._sales)

        logger.info("Recorded sale %s: %s", sale.id, sale.describe())
        return sale

    def delete_sale(self, sale_id: str) -> bool:
        """
        Remove the sale with the given id.

        Returns:
            True if a record was removed. An empty or unknown id is a no-op
            (nothing is written) and returns False.
        """

        if not sale_id:
            return False

        with self._lock:
            remaining = tuple(sale for sale in self._sales if sale.id != sale_id)
            if len(remaining) == len(self._sales):
                return False
            self._commit_sales(remaining)

        logger.info("Deleted sale %s", sale_id)
        return True

    def import_products(self, names: Iterable[str]) -> int:
        """
        Merge series names into the product set.

        The result is deduplicated by exact string equality and sorted
        ascending. Names are not validated here.

        Returns:
            Number of names that were not already in the set.
        """

        with self._lock:
            merged = tuple(sorted(set(self._products).union(names)))
            added = len(merged) - len(set(self._products))
            self._commit_products(merged)

        logger.info("Imported products: %d new, %d total", added, len(merged))
        return added

    def clear_products(self) -> None:
        """Empty the product set. Sale records are left untouched."""

        with self._lock:
            self._commit_products(())

        logger.info("Cleared all products")


__all__ = ["RecordStore"]
