"""
tests.factories

Builders for settings and wire-format records used across the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from proforma_backup.settings import Settings


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'backup.db'}",
        "connect_max_attempts": 2,
        "connect_retry_interval_seconds": 0,
    }
    values.update(overrides)
    return Settings(**values)


def proforma(pid: int, **fields: Any) -> dict[str, Any]:
    record = {
        "id": pid,
        "proformaNumber": f"PF-{pid:04d}",
        "customerName": "Abebe Kebede",
        "plateNumber": "3-A12345",
        "vin": f"VIN{pid:014d}",
        "model": "Hilux",
        "referenceNumber": f"REF-{pid}",
        "deliveryTime": "3 days",
        "preparedBy": "Sara",
        "dateCreated": "2024-01-01",
        "subTotal": 1000.0,
        "vat": 150.0,
        "totalAmount": 1150.0,
        "lastModified": "2024-01-01T10:00:00",
        "userId": 7,
        "validityInDays": 30,
        "typeOfVehicle": "Pickup",
    }
    record.update(fields)
    return record


def item(iid: int, proforma_id: int, **fields: Any) -> dict[str, Any]:
    record = {
        "id": iid,
        "proformaId": proforma_id,
        "itemName": f"Part {iid}",
        "unit": "pcs",
        "quantity": 2.0,
        "unitPrice": 50.0,
        "totalPrice": 100.0,
        "lastModified": "2024-01-01T10:00:00",
    }
    record.update(fields)
    return record
