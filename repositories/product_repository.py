"""
Product repository (persistence).

Serializes the product series set as a JSON array of strings under
PRODUCTS_KEY. Sorting and deduplication are owned by the record store.
"""

from __future__ import annotations

import json
import logging
from typing import List, Sequence

from repositories.storage import KeyValueStorage

logger = logging.getLogger(__name__)

PRODUCTS_KEY: str = "gst_products"


def parse_products(text: str | None) -> List[str]:
    """Deserialize stored product text; bad data loads as an empty list."""

    if text is None:
        return []

    try:
        payload = json.loads(text)
    except ValueError as e:
        logger.warning("Stored products are not valid JSON, loading none: %s", e)
        return []

    if not isinstance(payload, list):
        logger.warning("Stored products are not a JSON array (got %s), loading none", type(payload).__name__)
        return []

    return [item if isinstance(item, str) else str(item) for item in payload if item is not None]


def load_products(storage: KeyValueStorage) -> List[str]:
    return parse_products(storage.load(PRODUCTS_KEY))


def save_products(storage: KeyValueStorage, products: Sequence[str]) -> None:
    storage.save(PRODUCTS_KEY, json.dumps(list(products), ensure_ascii=False))


__all__ = ["PRODUCTS_KEY", "parse_products", "load_products", "save_products"]
