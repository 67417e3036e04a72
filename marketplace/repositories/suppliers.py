from __future__ import annotations

from typing import Any


class DocumentSuppliersRepository:
    """Supplier profiles keyed by the owner's email."""

    def __init__(self, suppliers: dict[str, Any]) -> None:
        self._suppliers = suppliers

    def put(self, *, email: str, profile: dict[str, Any]) -> dict[str, Any]:
        item = dict(profile)
        self._suppliers[email] = item
        return item

    def get(self, *, email: str) -> dict[str, Any] | None:
        row = self._suppliers.get(email)
        if not isinstance(row, dict):
            return None
        return dict(row)
