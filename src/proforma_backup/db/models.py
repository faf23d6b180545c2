"""
proforma_backup.db.models

Persistence schema for backed-up quotation documents.

Responsibilities:
- Define ORM models for the two record kinds:
  - Proforma: quotation document header (customer, vehicle, totals)
  - Item: line item belonging to one proforma
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from proforma_backup.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


# SQLite only auto-assigns keys for a plain INTEGER primary key (the rowid alias).
_InsertionSeq = BigInteger().with_variant(Integer(), "sqlite")


class Proforma(Base):
    __tablename__ = "proformas"

    # Server-assigned insertion sequence; the only notion of storage order.
    seq: Mapped[int] = mapped_column(_InsertionSeq, primary_key=True, autoincrement=True)
    # Ids are assigned by the client; uniqueness is a constraint, never generated here.
    id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False)

    proforma_number: Mapped[str | None] = mapped_column(String(128), nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    plate_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    vin: Mapped[str | None] = mapped_column(String(64), nullable=True)
    model: Mapped[str | None] = mapped_column(String(128), nullable=True)
    reference_number: Mapped[str | None] = mapped_column(String(128), nullable=True)
    delivery_time: Mapped[str | None] = mapped_column(String(128), nullable=True)
    prepared_by: Mapped[str | None] = mapped_column(String(256), nullable=True)

    # Client-supplied timestamps are opaque strings and sort lexically.
    date_created: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_modified: Mapped[str | None] = mapped_column(String(64), nullable=True)

    sub_total: Mapped[float | None] = mapped_column(Float, nullable=True)
    vat: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_amount: Mapped[float | None] = mapped_column(Float, nullable=True)

    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    validity_in_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    type_of_vehicle: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Server bookkeeping only; ordering uses seq.
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_proformas_recency", "date_created", "last_modified"),
        # AUTOINCREMENT keeps seq strictly increasing even after the newest row is deleted.
        {"sqlite_autoincrement": True},
    )


class Item(Base):
    __tablename__ = "items"

    seq: Mapped[int] = mapped_column(_InsertionSeq, primary_key=True, autoincrement=True)
    id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False)

    # Deliberately not a ForeignKey: items may reference proformas sent in an earlier backup.
    proforma_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)

    item_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(64), nullable=True)
    quantity: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_modified: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = ({"sqlite_autoincrement": True},)


# --- Module Notes -----------------------------------------------------------
# Column attribute names match the snake_case field names of `proforma_backup.schemas`,
# so validated payloads can be written with `model_dump()` directly.
