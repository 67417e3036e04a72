from __future__ import annotations

import uuid
from typing import Any

from marketplace.errors import ValidationError

DEFAULT_PROCESS = "Stampa3D"

MATERIAL_CATALOG: dict[str, list[dict[str, Any]]] = {
    "Stampa3D": [
        {"key": "PLA", "name": "PLA", "unit": "€/cm³", "marketPrice": 0.020, "ratePerMin": 0.10, "process": "Stampa3D"},
        {"key": "ABS", "name": "ABS", "unit": "€/cm³", "marketPrice": 0.025, "ratePerMin": 0.12, "process": "Stampa3D"},
        {"key": "PETG", "name": "PETG", "unit": "€/cm³", "marketPrice": 0.030, "ratePerMin": 0.15, "process": "Stampa3D"},
        {"key": "Nylon", "name": "Nylon (PA12)", "unit": "€/cm³", "marketPrice": 0.050, "ratePerMin": 0.20, "process": "Stampa3D"},
        {"key": "ResinaSLA", "name": "Resina (SLA)", "unit": "€/cm³", "marketPrice": 0.060, "ratePerMin": 0.22, "process": "Stampa3D"},
        {"key": "AlSi10Mg", "name": "Alluminio AlSi10Mg", "unit": "€/cm³", "marketPrice": 0.500, "ratePerMin": 1.20, "process": "Stampa3D"},
    ],
    "CNC": [
        {"key": "Al6061", "name": "Alluminio 6061", "unit": "€/cm³", "marketPrice": 0.003, "ratePerMin": 0.50, "process": "CNC"},
        {"key": "Al7075", "name": "Alluminio 7075", "unit": "€/cm³", "marketPrice": 0.004, "ratePerMin": 0.70, "process": "CNC"},
        {"key": "Steel1018", "name": "Acciaio 1018", "unit": "€/cm³", "marketPrice": 0.006, "ratePerMin": 0.80, "process": "CNC"},
        {"key": "POM", "name": "POM/Delrin", "unit": "€/cm³", "marketPrice": 0.003, "ratePerMin": 0.45, "process": "CNC"},
    ],
    "Laser": [
        {"key": "PMMA", "name": "Acrilico (PMMA)", "unit": "€/cm²", "marketPrice": 0.010, "ratePerMin": 20.00, "process": "Laser"},
        {"key": "Plywood", "name": "Compensato (Plywood)", "unit": "€/cm²", "marketPrice": 0.008, "ratePerMin": 18.00, "process": "Laser"},
        {"key": "MDF", "name": "MDF", "unit": "€/cm²", "marketPrice": 0.006, "ratePerMin": 18.00, "process": "Laser"},
        {"key": "Leather", "name": "Pelle", "unit": "€/cm²", "marketPrice": 0.012, "ratePerMin": 22.00, "process": "Laser"},
    ],
}

CARRIERS: list[dict[str, Any]] = [
    {"id": "brt", "name": "BRT (Bartolini)", "services": ["Standard", "Express"]},
    {"id": "sda", "name": "SDA", "services": ["Standard"]},
    {"id": "gls", "name": "GLS", "services": ["Standard", "24h"]},
    {"id": "poste", "name": "Poste Italiane", "services": ["Crono", "Raccomandata"]},
    {"id": "dhl", "name": "DHL", "services": ["Express Worldwide"]},
    {"id": "ups", "name": "UPS", "services": ["Standard", "Saver"]},
    {"id": "fedex", "name": "FedEx/TNT", "services": ["International Priority"]},
]


def list_materials(*, process: str | None = None, q: str | None = None) -> list[dict[str, Any]]:
    base = MATERIAL_CATALOG.get(process or DEFAULT_PROCESS, [])
    needle = (q or "").strip().lower()
    return [
        dict(m)
        for m in base
        if not needle or needle in m["name"].lower() or needle in m["key"].lower()
    ]


def list_carriers() -> list[dict[str, Any]]:
    return [{**c, "services": list(c["services"])} for c in CARRIERS]


def request_pickup(
    *,
    carrier_id: str | None,
    date: str | None,
    time_from: str | None,
    time_to: str | None,
    address: Any = None,
    contact: Any = None,
    parcels: Any = None,
    notes: str | None = None,
) -> dict[str, Any]:
    # Booking is simulated: nothing is sent to the carrier or persisted.
    if not carrier_id or not date or not time_from or not time_to:
        raise ValidationError(
            "incomplete pickup data (carrierId, date, timeFrom, timeTo are required)",
            code="PICKUP_INCOMPLETE",
        )
    return {
        "pickupId": f"pk_{uuid.uuid4().hex[:8]}",
        "status": "requested",
        "carrierId": carrier_id,
        "date": date,
        "timeFrom": time_from,
        "timeTo": time_to,
        "address": address,
        "contact": contact,
        "parcels": parcels,
        "notes": notes,
    }
