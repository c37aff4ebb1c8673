"""
Product import workflow.

Turns a pasted block of series names into a product import. Names may be
separated by newlines, commas, semicolons or pipes, in any mix and any run
length. Deduplication is left to the record store.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from services.record_store import RecordStore

_SEPARATORS = re.compile(r"[\n,;|]+")


@dataclass(frozen=True, slots=True)
class ImportResult:
    parsed: int  # non-empty names found in the text
    added: int  # names new to the product set
    total: int  # product set size after the import


def parse_product_text(text: str) -> List[str]:
    """
    Split free text into trimmed, non-empty series names.

    Example:
        parse_product_text("HB851, HB852;HB853|HB851")
        # Returns ["HB851", "HB852", "HB853", "HB851"]
    """

    return [token.strip() for token in _SEPARATORS.split(text) if token.strip()]


def import_product_text(store: RecordStore, text: str) -> ImportResult:
    """
    Parse text and merge the names into the store's product set.

    Empty or whitespace-only text is a no-op: the store is not called.
    """

    if not text.strip():
        return ImportResult(parsed=0, added=0, total=len(store.products))

    names = parse_product_text(text)
    if not names:
        return ImportResult(parsed=0, added=0, total=len(store.products))

    added = store.import_products(names)
    return ImportResult(parsed=len(names), added=added, total=len(store.products))


__all__ = ["ImportResult", "parse_product_text", "import_product_text"]
