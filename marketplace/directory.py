from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from marketplace.sanitize import as_number


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _is_weight_unit(unit: Any) -> bool:
    return str(unit or "").strip().lower().endswith("/kg")


def display_name(profile: Mapping[str, Any]) -> str:
    full_name = " ".join(str(x) for x in (profile.get("firstName"), profile.get("lastName")) if x)
    return full_name or str(profile.get("company") or "") or str(profile.get("displayName") or "") or str(
        profile["email"]
    )


def price_per_minute(tariffs: list[Mapping[str, Any]]) -> int | float:
    # First entry with a positive rate, not the cheapest one.
    for entry in tariffs:
        rate = as_number(entry.get("ratePerMin"))
        if rate > 0:
            return rate
    return 0


def public_material(entry: Mapping[str, Any]) -> dict[str, Any]:
    item: dict[str, Any] = {"name": str(entry.get("name") or entry.get("key") or "")}
    if _is_weight_unit(entry.get("unit")):
        item["pricePerKg"] = as_number(entry.get("myPrice") or entry.get("marketPrice") or 0)
    return item


def public_supplier(profile: Mapping[str, Any], tariffs: list[Mapping[str, Any]]) -> dict[str, Any]:
    address = profile.get("address") if isinstance(profile.get("address"), Mapping) else {}
    return {
        "email": profile["email"],
        "name": display_name(profile),
        "settings": {
            "machineType": profile.get("machines") or _first(profile.get("processes")) or "3d",
            "bed": profile.get("maxBuild") or profile.get("bed") or None,
            "pricePerMinute": price_per_minute(tariffs),
            "materials": [public_material(m) for m in tariffs],
            "shipping": {"city": profile.get("city") or address.get("city") or ""},
            "processTech": _first(profile.get("technologies")) or _first(profile.get("processes")) or "fdm",
            "machineModel": profile.get("machineModel") or "",
        },
    }


def list_visible_suppliers(
    suppliers: Mapping[str, Any],
    tariffs: Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Public listing: skips profiles without an email or with ``visible`` set to False."""
    out: list[dict[str, Any]] = []
    for profile in suppliers.values():
        if not isinstance(profile, Mapping) or not profile.get("email"):
            continue
        if profile.get("visible") is False:
            continue
        rows = tariffs.get(profile["email"])
        entries = [x for x in rows if isinstance(x, Mapping)] if isinstance(rows, list) else []
        out.append(public_supplier(profile, entries))
    return out
