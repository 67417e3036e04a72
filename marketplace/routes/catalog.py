from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from marketplace.catalog import list_carriers, list_materials, request_pickup
from marketplace.routes._deps import require_principal, trace_id_from_request
from marketplace.schemas import PickupRequest, success_envelope

router = APIRouter(tags=["catalog"])


@router.get("/catalog/materials", dependencies=[Depends(require_principal)])
@router.get("/public/catalog/materials")
def get_materials(
    request: Request,
    process: str = Query(default="Stampa3D"),
    q: str = Query(default=""),
):
    items = list_materials(process=process, q=q)
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


@router.get("/shipping/carriers", dependencies=[Depends(require_principal)])
@router.get("/public/shipping/carriers")
def get_carriers(request: Request):
    items = list_carriers()
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


@router.post("/shipping/pickup", dependencies=[Depends(require_principal)])
def book_pickup(payload: PickupRequest, request: Request):
    data = request_pickup(
        carrier_id=payload.carrier_id,
        date=payload.date,
        time_from=payload.time_from,
        time_to=payload.time_to,
        address=payload.address,
        contact=payload.contact,
        parcels=payload.parcels,
        notes=payload.notes,
    )
    return success_envelope(data, trace_id_from_request(request))
