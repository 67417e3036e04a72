from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Required-field checks happen in the store; these models only shape payloads.


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SupplierRegisterRequest(CamelModel):
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = Field(default=None, alias="confirmPassword")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    birth_year: int | str | None = Field(default=None, alias="birthYear")


class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class TariffsReplaceRequest(BaseModel):
    materials: Any = None


class PickupRequest(CamelModel):
    carrier_id: str | None = Field(default=None, alias="carrierId")
    date: str | None = None
    time_from: str | None = Field(default=None, alias="timeFrom")
    time_to: str | None = Field(default=None, alias="timeTo")
    address: Any = None
    contact: Any = None
    parcels: Any = None
    notes: str | None = None


class PaymentIntentRequest(BaseModel):
    amount_cents: Any = None
    currency: str = "eur"
    receipt_email: str | None = None
    supplier_account_id: str | None = None
    metadata: dict[str, Any] | None = None
    order_id: str | None = None


class OrderCreateRequest(BaseModel):
    items: Any = None
    subtotal_cents: Any = None
    shipping_cents: Any = None
    total_cents: Any = None
    currency: str | None = None
    customer: dict[str, Any] | None = None
    supplier_email: str | None = None
    payment_method: str | None = None
    notes: str | None = None


class OrderPaidRequest(BaseModel):
    payment_intent_id: str | None = None


class OrderAwaitingBankRequest(BaseModel):
    instructions: str | None = None


def success_envelope(data: Any, trace_id: str, message: str = "ok") -> dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "message": message,
        "meta": {
            "trace_id": trace_id,
        },
    }


def error_envelope(
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    trace_id: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "retryable": retryable,
        "class": error_class,
    }
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "meta": {
            "trace_id": trace_id,
        },
    }
