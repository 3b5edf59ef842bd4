"""
FastAPI router for inventory and inquiry endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from auth import dependencies as auth_dependencies
from media.cloudinary import CloudinaryClient
from media.dependencies import get_media_client

from . import schemas, service
from .dependencies import get_record_store
from .repository import PostgresRecordStore

router = APIRouter(prefix="/api")


@router.post("/admin/add-inventory", status_code=status.HTTP_201_CREATED)
async def add_inventory(
    images: list[UploadFile] = File(default=[]),
    customer_name: str | None = Form(default=None, alias="customerName"),
    phone_number: str | None = Form(default=None, alias="phoneNumber"),
    car_name: str | None = Form(default=None, alias="carName"),
    car_model: str | None = Form(default=None, alias="carModel"),
    price: str | None = Form(default=None),
    description: str | None = Form(default=None),
    is_admin_entry: str | None = Form(default=None, alias="isAdminEntry"),
    _: dict = Depends(auth_dependencies.require_admin),
    store: PostgresRecordStore = Depends(get_record_store),
    media: CloudinaryClient = Depends(get_media_client),
) -> dict:
    """
    Upload up to 5 images and save a car record pointing at them.
    """
    submission = schemas.InventorySubmission(
        customerName=customer_name,
        phoneNumber=phone_number,
        carName=car_name,
        carModel=car_model,
        price=price,
        description=description,
        isAdminEntry=is_admin_entry,
    )
    car = await service.create_inventory_entry(submission, images, store=store, media=media)
    return {"success": True, "message": "Car added successfully!", "car": car}


@router.post("/contact")
async def contact(
    request: schemas.ContactRequest,
    store: PostgresRecordStore = Depends(get_record_store),
) -> dict:
    inquiry = await service.create_inquiry(request, store=store)
    return {"success": True, "message": "We will get back to you soon!", "inquiry": inquiry}


@router.get("/cars/inventory")
async def public_inventory(
    store: PostgresRecordStore = Depends(get_record_store),
) -> list[dict]:
    return await service.list_public_inventory(store=store)


@router.get("/admin/inquiries")
async def inquiries(
    _: dict = Depends(auth_dependencies.require_admin),
    store: PostgresRecordStore = Depends(get_record_store),
) -> list[dict]:
    return await service.list_inquiries(store=store)


@router.delete("/admin/delete/{record_id}")
async def delete_record(
    record_id: str,
    _: dict = Depends(auth_dependencies.require_admin),
    store: PostgresRecordStore = Depends(get_record_store),
) -> dict:
    await service.delete_record(record_id, store=store)
    return {"success": True, "message": "Deleted successfully"}


@router.put("/admin/update/{record_id}")
async def update_record(
    record_id: str,
    request: schemas.UpdateRecordRequest,
    _: dict = Depends(auth_dependencies.require_admin),
    store: PostgresRecordStore = Depends(get_record_store),
) -> dict:
    car = await service.update_record(record_id, request.changes(), store=store)
    return {"success": True, "car": car}
