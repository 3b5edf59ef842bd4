"""Tests for the Postgres record store, with the asyncpg helpers stubbed out."""

import asyncio
import uuid
from datetime import datetime, timezone

import pytest

from core import db
from core.errors import PersistenceError
from listings.repository import PostgresRecordStore, parse_record_id

RECORD_ID = "6f1c2f3e-7d7b-4a55-9a53-2b8c0f3a9d11"


def stored_row(**overrides) -> dict:
    row = {
        "id": uuid.UUID(RECORD_ID),
        "customer_name": "Admin Entry",
        "phone_number": "N/A",
        "car_name": "Civic",
        "car_model": "2019",
        "price": 12000.0,
        "description": None,
        "images": [],
        "is_admin_entry": True,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


@pytest.fixture
def calls(monkeypatch):
    """Capture (kind, sql, args) for every statement the store sends."""
    captured = []
    state = {"one": stored_row(), "all": [stored_row()], "status": "DELETE 1"}

    async def fetch_one(sql, *args):
        captured.append(("one", sql, args))
        return state["one"]

    async def fetch_all(sql, *args):
        captured.append(("all", sql, args))
        return state["all"]

    async def execute(sql, *args):
        captured.append(("execute", sql, args))
        return state["status"]

    monkeypatch.setattr(db, "fetch_one", fetch_one)
    monkeypatch.setattr(db, "fetch_all", fetch_all)
    monkeypatch.setattr(db, "execute", execute)
    return captured, state


class TestCreate:
    def test_inserts_given_columns_in_order(self, calls):
        captured, _ = calls

        row = asyncio.run(PostgresRecordStore().create({"car_name": "Civic", "price": 10.0}))

        kind, sql, args = captured[0]
        assert kind == "one"
        assert "INSERT INTO cars (car_name, price)" in sql
        assert "VALUES ($1, $2)" in sql
        assert "RETURNING" in sql
        assert args == ("Civic", 10.0)
        assert row["car_name"] == "Civic"

    def test_missing_row_raises_persistence_error(self, calls):
        _, state = calls
        state["one"] = None

        with pytest.raises(PersistenceError):
            asyncio.run(PostgresRecordStore().create({"car_name": "Civic"}))

    @pytest.mark.parametrize("column", ["id", "created_at", "color"])
    def test_rejects_non_writable_columns(self, calls, column):
        captured, _ = calls

        with pytest.raises(ValueError):
            asyncio.run(PostgresRecordStore().create({column: "x"}))

        assert captured == []


class TestFind:
    def test_filters_and_sorts_newest_first(self, calls):
        captured, _ = calls

        rows = asyncio.run(PostgresRecordStore().find({"is_admin_entry": True}))

        kind, sql, args = captured[0]
        assert kind == "all"
        assert "WHERE is_admin_entry = $1" in sql
        assert "ORDER BY created_at DESC" in sql
        assert args == (True,)
        assert len(rows) == 1

    def test_rejects_unknown_filter(self, calls):
        captured, _ = calls

        with pytest.raises(ValueError):
            asyncio.run(PostgresRecordStore().find({"car_name": "Civic"}))

        assert captured == []


class TestUpdate:
    def test_id_is_first_placeholder(self, calls):
        captured, _ = calls

        asyncio.run(PostgresRecordStore().update(RECORD_ID, {"price": 500.0, "car_model": "2020"}))

        kind, sql, args = captured[0]
        assert kind == "one"
        assert "SET price = $2, car_model = $3" in sql
        assert "WHERE id = $1" in sql
        assert args == (uuid.UUID(RECORD_ID), 500.0, "2020")

    def test_empty_update_reads_current_row(self, calls):
        captured, _ = calls

        row = asyncio.run(PostgresRecordStore().update(RECORD_ID, {}))

        _, sql, args = captured[0]
        assert sql.lstrip().startswith("SELECT")
        assert args == (uuid.UUID(RECORD_ID),)
        assert row["id"] == uuid.UUID(RECORD_ID)

    def test_unknown_id_returns_none(self, calls):
        _, state = calls
        state["one"] = None

        assert asyncio.run(PostgresRecordStore().update(RECORD_ID, {"price": 1.0})) is None

    def test_rejects_json_field_names(self, calls):
        with pytest.raises(ValueError):
            asyncio.run(PostgresRecordStore().update(RECORD_ID, {"isAdminEntry": False}))


class TestDelete:
    def test_deleted_row(self, calls):
        captured, _ = calls

        assert asyncio.run(PostgresRecordStore().delete(RECORD_ID)) is True
        _, sql, args = captured[0]
        assert sql == "DELETE FROM cars WHERE id = $1"
        assert args == (uuid.UUID(RECORD_ID),)

    def test_no_row_deleted_returns_false(self, calls):
        _, state = calls
        state["status"] = "DELETE 0"

        assert asyncio.run(PostgresRecordStore().delete(RECORD_ID)) is False


class TestMalformedIds:
    @pytest.mark.parametrize("record_id", ["not-an-id", "", "123"])
    def test_short_circuit_without_querying(self, calls, record_id):
        captured, _ = calls
        store = PostgresRecordStore()

        assert asyncio.run(store.get(record_id)) is None
        assert asyncio.run(store.update(record_id, {"price": 1.0})) is None
        assert asyncio.run(store.delete(record_id)) is False
        assert captured == []

    def test_parse_record_id(self):
        assert parse_record_id(RECORD_ID) == uuid.UUID(RECORD_ID)
        assert parse_record_id(None) is None


class TestAffectedRows:
    @pytest.mark.parametrize(
        "status, expected",
        [("DELETE 1", 1), ("DELETE 0", 0), ("UPDATE 3", 3), ("INSERT 0 2", 2), ("", 0), ("CREATE TABLE", 0)],
    )
    def test_parses_status_tag(self, status, expected):
        assert db.affected_rows(status) == expected
