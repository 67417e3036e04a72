from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from marketplace.errors import NotFoundError, ValidationError
from marketplace.ids import new_id
from marketplace.repositories import DocumentOrdersRepository
from marketplace.sanitize import as_number

logger = logging.getLogger(__name__)

DEFAULT_BANK_INSTRUCTIONS = "SEPA bank transfer within 3 days"


class OrderStatus(StrEnum):
    CREATED = "created"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    AWAITING_BANK = "awaiting_bank"
    FAILED = "failed"


class StoreOrdersMixin:
    # Transitions are not guarded by the current status: any status may move to
    # any other. Payment callbacks arrive out of order in practice.

    def _transition_order(self, order: dict[str, Any], new_status: OrderStatus) -> dict[str, Any]:
        previous = order.get("status")
        order["status"] = new_status.value
        order["updatedAt"] = self._utcnow_iso()
        logger.info("order_transition order_id=%s from=%s to=%s", order.get("id"), previous, new_status.value)
        return order

    def create_order(self, *, payload: dict[str, Any]) -> dict[str, Any]:
        # An empty items list is accepted; a zero total is not.
        if payload.get("items") is None:
            raise ValidationError("missing field: items", code="ORDER_MISSING_FIELD")
        if not payload.get("total_cents"):
            raise ValidationError("missing field: total_cents", code="ORDER_MISSING_FIELD")
        now = self._utcnow_iso()
        items = payload.get("items")
        order = {
            "id": new_id("ord"),
            "status": OrderStatus.CREATED.value,
            "createdAt": now,
            "updatedAt": now,
            "items": items if isinstance(items, list) else [],
            "subtotal_cents": as_number(payload.get("subtotal_cents")),
            "shipping_cents": as_number(payload.get("shipping_cents")),
            "total_cents": as_number(payload.get("total_cents")),
            "currency": str(payload.get("currency") or "eur"),
            "customer": payload.get("customer") or {},
            "supplier_email": payload.get("supplier_email") or None,
            "payment_method": payload.get("payment_method") or "card",
            "notes": payload.get("notes") or None,
            "payment": {"mode": None, "clientSecret": None},
        }
        with self.documents.transaction() as doc:
            saved = DocumentOrdersRepository(doc["orders"]).put(order=order)
        logger.info("order_created order_id=%s total_cents=%s", saved["id"], saved["total_cents"])
        return saved

    def get_order(self, *, order_id: str) -> dict[str, Any]:
        order = DocumentOrdersRepository(self.documents.read()["orders"]).get(order_id=order_id)
        if order is None:
            raise NotFoundError("order not found", code="ORDER_NOT_FOUND")
        return order

    def attach_payment_intent(self, *, order_id: str, client_secret: str, mode: str) -> dict[str, Any] | None:
        """Record a payment intent on the order; unknown ids are skipped silently."""
        with self.documents.transaction() as doc:
            orders = DocumentOrdersRepository(doc["orders"])
            order = orders.get(order_id=order_id)
            if order is None:
                return None
            order["payment"] = {**(order.get("payment") or {}), "clientSecret": client_secret, "mode": mode}
            return orders.put(order=self._transition_order(order, OrderStatus.AWAITING_PAYMENT))

    def mark_order_paid(self, *, order_id: str, intent_id: str | None = None) -> dict[str, Any]:
        with self.documents.transaction() as doc:
            orders = DocumentOrdersRepository(doc["orders"])
            order = orders.get(order_id=order_id)
            if order is None:
                raise NotFoundError("order not found", code="ORDER_NOT_FOUND")
            self._transition_order(order, OrderStatus.PAID)
            order["payment"] = {
                **(order.get("payment") or {}),
                "intentId": intent_id or None,
                "paidAt": order["updatedAt"],
            }
            return orders.put(order=order)

    def mark_order_awaiting_bank(self, *, order_id: str, instructions: str | None = None) -> dict[str, Any]:
        with self.documents.transaction() as doc:
            orders = DocumentOrdersRepository(doc["orders"])
            order = orders.get(order_id=order_id)
            if order is None:
                raise NotFoundError("order not found", code="ORDER_NOT_FOUND")
            self._transition_order(order, OrderStatus.AWAITING_BANK)
            order["payment"] = {
                **(order.get("payment") or {}),
                "bankInstructions": instructions or DEFAULT_BANK_INSTRUCTIONS,
            }
            return orders.put(order=order)

    def create_payment_intent(
        self,
        *,
        amount_cents: Any,
        currency: str | None = None,
        receipt_email: str | None = None,
        supplier_account_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        order_id: str | None = None,
    ) -> dict[str, Any]:
        amount = as_number(amount_cents)
        if amount <= 0:
            raise ValidationError("amount_cents must be a positive number", code="PAYMENT_AMOUNT_INVALID")
        if amount != int(amount):
            raise ValidationError("amount_cents must be a whole number of cents", code="PAYMENT_AMOUNT_INVALID")
        # Provider first: a failed call must leave the order untouched.
        intent = self.payments.create_intent(
            amount_cents=int(amount),
            currency=currency or "eur",
            receipt_email=receipt_email,
            destination_account=supplier_account_id,
            metadata=metadata,
        )
        if order_id:
            self.attach_payment_intent(order_id=order_id, client_secret=intent.client_secret, mode=intent.mode)
        return {"clientSecret": intent.client_secret, "mode": intent.mode}
