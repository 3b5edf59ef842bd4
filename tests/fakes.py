"""In-memory stand-ins for the record store and the media host."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from core.errors import PersistenceError, UploadError
from listings.repository import FILTER_COLUMNS, WRITABLE_COLUMNS, parse_record_id
from media.cloudinary import UploadedImage


class InMemoryRecordStore:
    """Mirrors PostgresRecordStore on a dict; rows are keyed by column name."""

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self.fail_writes = False
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def create(self, fields: dict[str, Any]) -> dict:
        assert set(fields) <= WRITABLE_COLUMNS
        if self.fail_writes:
            raise PersistenceError("connection refused")
        row = {
            "customer_name": None,
            "phone_number": None,
            "car_name": None,
            "car_model": None,
            "price": 0.0,
            "description": None,
            "images": [],
            "is_admin_entry": False,
            **fields,
            "id": uuid.uuid4(),
            "created_at": self._tick(),
        }
        self.rows[str(row["id"])] = row
        return dict(row)

    async def find(self, filters: dict[str, Any]) -> list[dict]:
        assert set(filters) <= FILTER_COLUMNS
        matches = [
            dict(row)
            for row in self.rows.values()
            if all(row.get(k) == v for k, v in filters.items())
        ]
        return sorted(matches, key=lambda r: r["created_at"], reverse=True)

    async def get(self, record_id: str) -> dict | None:
        key = parse_record_id(record_id)
        row = self.rows.get(str(key)) if key else None
        return dict(row) if row else None

    async def update(self, record_id: str, fields: dict[str, Any]) -> dict | None:
        assert set(fields) <= WRITABLE_COLUMNS
        key = parse_record_id(record_id)
        if key is None or str(key) not in self.rows:
            return None
        if self.fail_writes:
            raise PersistenceError("connection refused")
        self.rows[str(key)].update(fields)
        return dict(self.rows[str(key)])

    async def delete(self, record_id: str) -> bool:
        key = parse_record_id(record_id)
        if key is None:
            return False
        return self.rows.pop(str(key), None) is not None


class FakeMediaClient:
    """Records uploads; `fail_on` names the upload (0-based) that should fail."""

    def __init__(self) -> None:
        self.uploaded: list[dict[str, Any]] = []
        self.destroyed: list[str] = []
        self.fail_on: int | None = None

    async def upload(self, data, *, filename, public_id, folder, content_type=None) -> UploadedImage:
        if self.fail_on is not None and len(self.uploaded) == self.fail_on:
            raise UploadError("Media host upload failed: 500 boom")
        full_id = f"{folder}/{public_id}"
        self.uploaded.append({"public_id": full_id, "filename": filename, "size": len(data)})
        return UploadedImage(public_id=full_id, url=f"https://media.test/{full_id}.jpg")

    async def destroy(self, public_id: str) -> None:
        self.destroyed.append(public_id)
