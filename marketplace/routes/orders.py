from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from marketplace.routes._deps import trace_id_from_request
from marketplace.schemas import (
    OrderAwaitingBankRequest,
    OrderCreateRequest,
    OrderPaidRequest,
    PaymentIntentRequest,
    success_envelope,
)
from marketplace.store import store

router = APIRouter(tags=["orders"])


@router.post("/api/create-payment-intent")
def create_payment_intent(payload: PaymentIntentRequest, request: Request):
    data = store.create_payment_intent(
        amount_cents=payload.amount_cents,
        currency=payload.currency,
        receipt_email=payload.receipt_email,
        supplier_account_id=payload.supplier_account_id,
        metadata=payload.metadata,
        order_id=payload.order_id,
    )
    return success_envelope(data, trace_id_from_request(request))


@router.post("/orders")
def create_order(payload: OrderCreateRequest, request: Request):
    order = store.create_order(payload=payload.model_dump())
    return JSONResponse(status_code=201, content=success_envelope(order, trace_id_from_request(request)))


@router.get("/orders/{order_id}")
def get_order(order_id: str, request: Request):
    return success_envelope(store.get_order(order_id=order_id), trace_id_from_request(request))


@router.post("/orders/{order_id}/paid")
def mark_paid(order_id: str, request: Request, payload: OrderPaidRequest | None = None):
    intent_id = payload.payment_intent_id if payload is not None else None
    order = store.mark_order_paid(order_id=order_id, intent_id=intent_id)
    return success_envelope(order, trace_id_from_request(request))


@router.post("/orders/{order_id}/awaiting-bank")
def mark_awaiting_bank(order_id: str, request: Request, payload: OrderAwaitingBankRequest | None = None):
    instructions = payload.instructions if payload is not None else None
    order = store.mark_order_awaiting_bank(order_id=order_id, instructions=instructions)
    return success_envelope(order, trace_id_from_request(request))
