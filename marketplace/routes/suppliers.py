from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from marketplace.routes._deps import require_principal, trace_id_from_request
from marketplace.schemas import TariffsReplaceRequest, success_envelope
from marketplace.security import AuthPrincipal
from marketplace.store import store

router = APIRouter(tags=["suppliers"])


@router.post("/suppliers/update")
def update_profile(
    request: Request,
    profile: Any = Body(default=None),
    principal: AuthPrincipal = Depends(require_principal),
):
    saved = store.update_supplier_profile(email=principal.email, profile=profile)
    return success_envelope({"supplier": saved}, trace_id_from_request(request))


@router.get("/suppliers/tariffs")
def get_tariffs(request: Request, principal: AuthPrincipal = Depends(require_principal)):
    items = store.get_tariffs(email=principal.email)
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


@router.post("/suppliers/tariffs")
def set_tariffs(
    payload: TariffsReplaceRequest,
    request: Request,
    principal: AuthPrincipal = Depends(require_principal),
):
    items = store.set_tariffs(email=principal.email, materials=payload.materials)
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


@router.get("/public/suppliers")
def list_public_suppliers(request: Request):
    items = store.list_public_suppliers()
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))
