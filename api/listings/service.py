"""
Listing business logic.

Scope:
- admin inventory add (images uploaded first, then the record is saved)
- public contact inquiries
- the two read views, split on `is_admin_entry`
- admin update/delete by id

The record store and media client are passed in by the caller (see
`listings/dependencies.py` and `media/dependencies.py`).
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

from fastapi import UploadFile

from core.errors import NotFoundError, ValidationError
from media import service as media_service
from media.cloudinary import CloudinaryClient

from . import schemas
from .repository import PostgresRecordStore

DEFAULT_ADMIN_CUSTOMER_NAME = "Admin Entry"
DEFAULT_PHONE_NUMBER = "N/A"

logger = logging.getLogger(__name__)


def coerce_price(value: Any) -> float:
    """
    Numeric price or 0. Non-numeric, non-finite and negative input become 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        price = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() == "true"


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def to_record(row: dict) -> dict:
    """
    Shape a `cars` row as the public record (camelCase keys).
    """
    created_at = row.get("created_at")
    return {
        "id": str(row["id"]),
        "customerName": row.get("customer_name"),
        "phoneNumber": row.get("phone_number"),
        "carName": row.get("car_name"),
        "carModel": row.get("car_model"),
        "price": float(row.get("price") or 0),
        "description": row.get("description"),
        "images": list(row.get("images") or []),
        "isAdminEntry": bool(row.get("is_admin_entry", False)),
        "createdAt": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
    }


async def create_inventory_entry(
    submission: schemas.InventorySubmission,
    files: list[UploadFile] | None,
    *,
    store: PostgresRecordStore,
    media: CloudinaryClient,
) -> dict:
    files = media_service.present_files(files)
    if not files:
        raise ValidationError("No images uploaded")

    images = await media_service.upload_batch(files, client=media)

    fields = {
        "customer_name": _blank_to_none(submission.customerName) or DEFAULT_ADMIN_CUSTOMER_NAME,
        "phone_number": _blank_to_none(submission.phoneNumber) or DEFAULT_PHONE_NUMBER,
        "car_name": submission.carName,
        "car_model": submission.carModel,
        "price": coerce_price(submission.price),
        "description": submission.description,
        "images": [image.url for image in images],
        "is_admin_entry": parse_flag(submission.isAdminEntry),
    }
    try:
        row = await store.create(fields)
    except Exception:
        logger.error("inventory_save_failed images=%s", len(images))
        await media_service.discard(images, client=media)
        raise

    record = to_record(row)
    logger.info(
        "inventory_created id=%s is_admin_entry=%s images=%s",
        record["id"],
        record["isAdminEntry"],
        len(record["images"]),
    )
    return record


async def create_inquiry(payload: schemas.ContactRequest, *, store: PostgresRecordStore) -> dict:
    row = await store.create(
        {
            "customer_name": payload.name,
            "phone_number": payload.phone,
            "description": payload.message,
            "is_admin_entry": False,
        }
    )
    record = to_record(row)
    logger.info("inquiry_created id=%s", record["id"])
    return record


async def list_public_inventory(*, store: PostgresRecordStore) -> list[dict]:
    rows = await store.find({"is_admin_entry": True})
    return [to_record(row) for row in rows]


async def list_inquiries(*, store: PostgresRecordStore) -> list[dict]:
    rows = await store.find({"is_admin_entry": False})
    return [to_record(row) for row in rows]


async def update_record(record_id: str, changes: dict[str, Any], *, store: PostgresRecordStore) -> dict:
    # id, createdAt and isAdminEntry are fixed at creation.
    fields = {
        schemas.UPDATABLE_FIELDS[key]: value
        for key, value in changes.items()
        if key in schemas.UPDATABLE_FIELDS
    }
    if "price" in fields:
        fields["price"] = coerce_price(fields["price"])
    if fields.get("images") is None:
        fields.pop("images", None)

    row = await store.update(record_id, fields)
    if row is None:
        raise NotFoundError("Record not found.")

    logger.info("record_updated id=%s fields=%s", record_id, ",".join(sorted(fields)))
    return to_record(row)


async def delete_record(record_id: str, *, store: PostgresRecordStore) -> None:
    # Images stay on the media host.
    deleted = await store.delete(record_id)
    if not deleted:
        raise NotFoundError("Record not found.")
    logger.info("record_deleted id=%s", record_id)
