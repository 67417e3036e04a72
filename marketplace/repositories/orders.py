from __future__ import annotations

from typing import Any


class DocumentOrdersRepository:
    def __init__(self, orders: dict[str, Any]) -> None:
        self._orders = orders

    def put(self, *, order: dict[str, Any]) -> dict[str, Any]:
        item = dict(order)
        self._orders[str(item["id"])] = item
        return dict(item)

    def get(self, *, order_id: str) -> dict[str, Any] | None:
        row = self._orders.get(order_id)
        if not isinstance(row, dict):
            return None
        return dict(row)
