"""
proforma_backup.schemas

Wire-level record schemas (Pydantic).

Responsibilities:
- Validate incoming proforma/item records (camelCase on the wire, snake_case in Python).
- Define the backup request envelope.
- Name the business-visible fields emitted by projections.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    # Clients send "" for numeric inputs left empty; store them as missing values.
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _WireModel(BaseModel):
    # Unknown attributes are dropped; omitted attributes stay unset so updates only touch
    # what the client sent. Numbers sent for text fields are kept as their string form.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    def fields_to_store(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"id"})


class ProformaRecord(_WireModel):
    id: int
    proforma_number: str | None = None
    customer_name: str | None = None
    plate_number: str | None = None
    vin: str | None = None
    model: str | None = None
    reference_number: str | None = None
    delivery_time: str | None = None
    prepared_by: str | None = None
    date_created: str | None = None
    sub_total: float | None = None
    vat: float | None = None
    total_amount: float | None = None
    last_modified: str | None = None
    user_id: int | None = None
    validity_in_days: int | None = None
    type_of_vehicle: str | None = None

    @field_validator(
        "sub_total", "vat", "total_amount", "user_id", "validity_in_days", mode="before"
    )
    @classmethod
    def blank_numbers_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ItemRecord(_WireModel):
    id: int
    proforma_id: int | None = None
    item_name: str | None = None
    unit: str | None = None
    quantity: float | None = None
    unit_price: float | None = None
    total_price: float | None = None
    last_modified: str | None = None

    @field_validator("proforma_id", "quantity", "unit_price", "total_price", mode="before")
    @classmethod
    def blank_numbers_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class BackupData(BaseModel):
    # Both collections are optional here so their absence maps to InvalidSnapshot (400),
    # not to a generic validation error.
    proformas: list[ProformaRecord] | None = None
    items: list[ItemRecord] | None = None


class BackupRequest(BaseModel):
    data: BackupData | None = None


# Business-visible fields, in emission order. Internal ids and owner are never projected.
PROFORMA_PROJECTION_FIELDS: tuple[str, ...] = (
    "proforma_number",
    "customer_name",
    "plate_number",
    "vin",
    "model",
    "reference_number",
    "delivery_time",
    "prepared_by",
    "date_created",
    "last_modified",
    "sub_total",
    "vat",
    "total_amount",
    "validity_in_days",
    "type_of_vehicle",
)

ITEM_PROJECTION_FIELDS: tuple[str, ...] = (
    "item_name",
    "unit",
    "quantity",
    "unit_price",
    "total_price",
)


# --- Module Notes -----------------------------------------------------------
# `to_camel` maps e.g. `sub_total` -> `subTotal`, `proforma_id` -> `proformaId`, which is
# exactly the field naming the mobile client sends and expects back.
