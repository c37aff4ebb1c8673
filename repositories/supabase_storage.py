"""
Supabase key-value storage (persistence).

Stores each collection blob as one row of a two-column table:

    create table kv_store (
        key   text primary key,
        value text not null
    );

This module provides *only* get/set persistence. It knows nothing about sales
or products; serialization lives in the sale and product repositories.
"""

from __future__ import annotations

from typing import Any, Optional

from repositories.storage import PersistenceError


class SupabaseStorage:
    def __init__(self, client: Any, table: str = "kv_store") -> None:
        self._client = client
        self._table = table

    def load(self, key: str) -> Optional[str]:
        """Return the stored text for key, or None if no row exists."""

        try:
            response = (
                self._client.table(self._table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to load {key!r}: {e}") from e

        error = getattr(response, "error", None)
        if error:
            raise PersistenceError(f"Failed to load {key!r}: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        value = rows[0].get("value")
        return str(value) if value is not None else None

    def save(self, key: str, value: str) -> None:
        """Insert or replace the row for key."""

        try:
            response = (
                self._client.table(self._table)
                .upsert({"key": key, "value": value})
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to save {key!r}: {e}") from e

        error = getattr(response, "error", None)
        if error:
            raise PersistenceError(f"Failed to save {key!r}: {error}")


__all__ = ["SupabaseStorage"]
