from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from marketplace.routes._deps import require_principal, trace_id_from_request
from marketplace.schemas import LoginRequest, SignupRequest, SupplierRegisterRequest, success_envelope
from marketplace.security import AuthPrincipal
from marketplace.store import store

router = APIRouter(tags=["accounts"])


@router.post("/suppliers/register")
def register_supplier(payload: SupplierRegisterRequest, request: Request):
    data = store.register_supplier(
        email=payload.email,
        password=payload.password,
        confirm_password=payload.confirm_password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        birth_year=payload.birth_year,
    )
    return success_envelope(data, trace_id_from_request(request))


@router.post("/auth/signup")
def signup(payload: SignupRequest, request: Request):
    data = store.signup(email=payload.email, password=payload.password, role=payload.role)
    return success_envelope(data, trace_id_from_request(request))


@router.post("/auth/login")
def login(payload: LoginRequest, request: Request):
    data = store.login(email=payload.email, password=payload.password)
    return success_envelope(data, trace_id_from_request(request))


@router.get("/me")
def me(request: Request, principal: AuthPrincipal = Depends(require_principal)):
    data = {
        "user": principal.as_claims(),
        "profile": store.get_supplier_profile(email=principal.email),
    }
    return success_envelope(data, trace_id_from_request(request))
