"""
Listing API schemas (request models) and record field mapping.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# JSON field name -> `cars` column. Only these fields are ever written by an update.
UPDATABLE_FIELDS = {
    "customerName": "customer_name",
    "phoneNumber": "phone_number",
    "carName": "car_name",
    "carModel": "car_model",
    "price": "price",
    "description": "description",
    "images": "images",
}


class InventorySubmission(BaseModel):
    """
    Form fields of an admin inventory add. Everything arrives as text.
    """

    customerName: str | None = None
    phoneNumber: str | None = None
    carName: str | None = None
    carModel: str | None = None
    price: str | None = None
    description: str | None = None
    isAdminEntry: str | None = None


class ContactRequest(BaseModel):
    # Numeric JSON (e.g. a phone from a number input) is stored as text.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str | None = None
    phone: str | None = None
    message: str | None = None


class UpdateRecordRequest(BaseModel):
    # Unknown keys are dropped, like a strict document schema would.
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    customerName: str | None = None
    phoneNumber: str | None = None
    carName: str | None = None
    carModel: str | None = None
    price: Any = None
    description: str | None = None
    images: list[str] | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
