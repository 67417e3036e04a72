from __future__ import annotations

from typing import Any


class DocumentTariffsRepository:
    def __init__(self, tariffs: dict[str, Any]) -> None:
        self._tariffs = tariffs

    def replace(self, *, email: str, materials: list[dict[str, Any]]) -> list[dict[str, Any]]:
        items = [dict(x) for x in materials]
        self._tariffs[email] = items
        return [dict(x) for x in items]

    def get(self, *, email: str) -> list[dict[str, Any]]:
        rows = self._tariffs.get(email)
        if not isinstance(rows, list):
            return []
        return [dict(x) for x in rows if isinstance(x, dict)]
