from __future__ import annotations

from fastapi import APIRouter, Request

from trainhub.services.barcode_service import BarcodeService

router = APIRouter(prefix="/api", tags=["barcode"])


def _get_barcode_service(request: Request) -> BarcodeService:
    svc = getattr(getattr(request.app, "state", None), "barcode_service", None)
    if not svc:
        raise RuntimeError("BarcodeService not configured")
    return svc


@router.get("/barcode-lookup")
def barcode_lookup(request: Request, upc: str = ""):
    product = _get_barcode_service(request).lookup(upc)
    return {"ok": True, "product": product.to_dict()}
