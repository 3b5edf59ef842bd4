"""
Record persistence (raw SQL) for the `cars` table.

One table holds both inventory entries and customer inquiries, told apart by
`is_admin_entry`. Rows are returned as plain dicts keyed by column name.
"""

from __future__ import annotations

import uuid
from typing import Any

from core import db
from core.errors import PersistenceError

COLUMNS = (
    "id",
    "customer_name",
    "phone_number",
    "car_name",
    "car_model",
    "price",
    "description",
    "images",
    "is_admin_entry",
    "created_at",
)
WRITABLE_COLUMNS = frozenset(COLUMNS) - {"id", "created_at"}
FILTER_COLUMNS = frozenset({"is_admin_entry"})

_SELECT = ", ".join(COLUMNS)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cars (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    customer_name text,
    phone_number text,
    car_name text,
    car_model text,
    price double precision NOT NULL DEFAULT 0,
    description text,
    images text[] NOT NULL DEFAULT '{}',
    is_admin_entry boolean NOT NULL DEFAULT false,
    created_at timestamptz NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS cars_admin_entry_created_at_idx
    ON cars (is_admin_entry, created_at DESC);
"""


def parse_record_id(record_id: str) -> uuid.UUID | None:
    """
    Return the UUID for `record_id`, or None when it is not a valid id.
    """
    try:
        return uuid.UUID(str(record_id))
    except (TypeError, ValueError):
        return None


def _check_columns(names, allowed: frozenset[str]) -> None:
    unknown = set(names) - allowed
    if unknown:
        raise ValueError(f"Unknown columns: {sorted(unknown)}")


class PostgresRecordStore:
    """
    Record store over the shared asyncpg pool.
    """

    async def ensure_schema(self) -> None:
        await db.execute(SCHEMA_SQL)

    async def create(self, fields: dict[str, Any]) -> dict:
        _check_columns(fields, WRITABLE_COLUMNS)
        names = list(fields)
        placeholders = ", ".join(f"${i}" for i in range(1, len(names) + 1))
        row = await db.fetch_one(
            f"""
            INSERT INTO cars ({", ".join(names)})
            VALUES ({placeholders})
            RETURNING {_SELECT}
            """,
            *(fields[name] for name in names),
        )
        if row is None:
            raise PersistenceError("Failed to create record.")
        return row

    async def find(self, filters: dict[str, Any]) -> list[dict]:
        """
        Rows matching all `filters` (column equality), newest first.
        """
        _check_columns(filters, FILTER_COLUMNS)
        names = list(filters)
        where = " AND ".join(f"{name} = ${i}" for i, name in enumerate(names, start=1)) or "true"
        return await db.fetch_all(
            f"""
            SELECT {_SELECT}
            FROM cars
            WHERE {where}
            ORDER BY created_at DESC, id DESC
            """,
            *(filters[name] for name in names),
        )

    async def get(self, record_id: str) -> dict | None:
        key = parse_record_id(record_id)
        if key is None:
            return None
        return await db.fetch_one(
            f"""
            SELECT {_SELECT}
            FROM cars
            WHERE id = $1
            """,
            key,
        )

    async def update(self, record_id: str, fields: dict[str, Any]) -> dict | None:
        key = parse_record_id(record_id)
        if key is None:
            return None
        if not fields:
            return await self.get(record_id)

        _check_columns(fields, WRITABLE_COLUMNS)
        names = list(fields)
        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(names, start=2))
        return await db.fetch_one(
            f"""
            UPDATE cars
            SET {assignments}
            WHERE id = $1
            RETURNING {_SELECT}
            """,
            key,
            *(fields[name] for name in names),
        )

    async def delete(self, record_id: str) -> bool:
        key = parse_record_id(record_id)
        if key is None:
            return False
        status = await db.execute("DELETE FROM cars WHERE id = $1", key)
        return db.affected_rows(status) > 0
