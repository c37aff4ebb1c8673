"""
Tests for the storage adapters and the sale/product repositories.

Covers contract rules:
- A missing key loads as None (empty collection upstream).
- JSON file storage survives reopening and tolerates corrupt files.
- Supabase storage maps get/set onto a key/value table.
- Repositories never fail on malformed stored data.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from config.settings import Settings
from repositories.product_repository import PRODUCTS_KEY, load_products, parse_products, save_products
from repositories.sale_repository import SALES_KEY, load_sales, parse_sales
from repositories.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    PersistenceError,
    build_storage,
)
from repositories.supabase_storage import SupabaseStorage


class TestInMemoryStorage:
    def test_missing_key_is_none(self):
        assert InMemoryStorage().load("nope") is None

    def test_save_then_load(self):
        storage = InMemoryStorage()
        storage.save("k", "v")
        assert storage.load("k") == "v"

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStorage(), KeyValueStorage)


class TestJsonFileStorage:
    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFileStorage(tmp_path / "missing.json").load(SALES_KEY) is None

    def test_values_survive_reopen(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileStorage(path).save("a", "1")
        JsonFileStorage(path).save("b", "2")

        reopened = JsonFileStorage(path)
        assert reopened.load("a") == "1"
        assert reopened.load("b") == "2"
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}

    def test_no_temp_files_left_behind(self, tmp_path):
        path = tmp_path / "store.json"
        JsonFileStorage(path).save("a", "1")

        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JsonFileStorage(path)

        assert storage.load("a") is None
        storage.save("a", "1")
        assert storage.load("a") == "1"

    def test_write_failure_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        storage = JsonFileStorage(blocker / "store.json")

        with pytest.raises(PersistenceError):
            storage.save("a", "1")


class _FakeQuery:
    def __init__(self, table: "_FakeTable") -> None:
        self._table = table
        self._key = None
        self._upsert = None

    def select(self, *_columns: str) -> "_FakeQuery":
        return self

    def eq(self, column: str, value: Any) -> "_FakeQuery":
        assert column == "key"
        self._key = value
        return self

    def limit(self, _n: int) -> "_FakeQuery":
        return self

    def upsert(self, row: Dict[str, str]) -> "_FakeQuery":
        self._upsert = row
        return self

    def execute(self) -> SimpleNamespace:
        if self._table.error:
            return SimpleNamespace(data=None, error=self._table.error)
        if self._upsert is not None:
            self._table.rows[self._upsert["key"]] = self._upsert["value"]
            return SimpleNamespace(data=[self._upsert], error=None)
        data: List[Dict[str, str]] = []
        if self._key in self._table.rows:
            data = [{"value": self._table.rows[self._key]}]
        return SimpleNamespace(data=data, error=None)


class _FakeTable:
    def __init__(self) -> None:
        self.rows: Dict[str, str] = {}
        self.error = None


class _FakeSupabase:
    def __init__(self) -> None:
        self.tables: Dict[str, _FakeTable] = {}

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self.tables.setdefault(name, _FakeTable()))


class TestSupabaseStorage:
    def test_load_missing_and_save(self):
        client = _FakeSupabase()
        storage = SupabaseStorage(client, table="kv_store")

        assert storage.load(PRODUCTS_KEY) is None
        storage.save(PRODUCTS_KEY, '["A"]')
        assert storage.load(PRODUCTS_KEY) == '["A"]'
        assert client.tables["kv_store"].rows == {PRODUCTS_KEY: '["A"]'}

    def test_response_error_raises_persistence_error(self):
        client = _FakeSupabase()
        storage = SupabaseStorage(client)
        client.table("kv_store")
        client.tables["kv_store"].error = "permission denied"

        with pytest.raises(PersistenceError):
            storage.save("k", "v")
        with pytest.raises(PersistenceError):
            storage.load("k")


class TestBuildStorage:
    def test_memory_backend(self):
        assert isinstance(build_storage(Settings(storage_backend="memory")), InMemoryStorage)

    def test_file_backend(self, tmp_path):
        storage = build_storage(Settings(storage_backend="file", data_file=tmp_path / "s.json"))
        assert isinstance(storage, JsonFileStorage)
        assert storage.path == tmp_path / "s.json"

    def test_supabase_backend_requires_credentials(self):
        with pytest.raises(RuntimeError):
            build_storage(Settings(storage_backend="supabase"))


class TestSaleRepository:
    def test_missing_key_is_empty(self):
        assert load_sales(InMemoryStorage()) == []

    def test_invalid_json_is_empty(self):
        assert parse_sales("[{broken") == []

    def test_non_array_is_empty(self):
        assert parse_sales('{"id": "x"}') == []

    def test_non_object_entries_are_dropped(self):
        sales = parse_sales(json.dumps([1, "x", {"id": "a", "seriesName": "S", "country": "C", "customerName": "K", "timestamp": 5}]))

        assert [s.id for s in sales] == ["a"]

    def test_malformed_fields_are_defaulted(self):
        (sale,) = parse_sales(json.dumps([{"timestamp": "soon"}]))

        assert sale.id
        assert sale.series_name == ""
        assert sale.country == ""
        assert sale.customer_name == "Unknown"
        assert sale.timestamp == 0

    @pytest.mark.parametrize("raw", ["1e400", "-1e400", "NaN", "100000000000000000", "-100000000000000000"])
    def test_unrepresentable_timestamps_are_defaulted(self, raw, caplog):
        text = '[{"id": "a", "seriesName": "S", "country": "C", "customerName": "K", "timestamp": %s}]' % raw

        with caplog.at_level("WARNING"):
            (sale,) = parse_sales(text)

        assert sale.timestamp == 0
        assert sale.recorded_at.year == 1970
        assert "timestamp" in caplog.text


class TestProductRepository:
    def test_round_trip(self):
        storage = InMemoryStorage()
        save_products(storage, ["A", "B"])

        assert load_products(storage) == ["A", "B"]

    def test_malformed_payloads(self):
        assert parse_products(None) == []
        assert parse_products("nope") == []
        assert parse_products('"A"') == []
        assert parse_products('["A", 7, null]') == ["A", "7"]
