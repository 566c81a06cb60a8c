"""
Product lookup against the SearchUPCData API.

    GET {BARCODE_API_URL}/products/{upc}
    Authorization: Bearer <SEARCHUPCDATA_API_KEY>

The upstream ``name`` is what the inventory UI shows, so it becomes our
``description``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from urllib.parse import quote

import requests

from trainhub.core.config import Settings
from trainhub.core.errors import BarcodeLookupError, NotFoundError, ValidationFailure
from trainhub.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BarcodeProduct:
    upc: str
    description: str = ""
    brand: str = ""
    model: str = ""
    category: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class BarcodeService:
    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.base_url = settings.barcode_api_url
        self.api_key = settings.barcode_api_key
        self.timeout = settings.barcode_timeout_seconds
        self.session = session or requests.Session()

    def lookup(self, upc: str) -> BarcodeProduct:
        upc = (upc or "").strip()
        if not upc:
            raise ValidationFailure("UPC is required", field="upc")
        if not self.api_key:
            raise BarcodeLookupError("barcode lookup is not configured", status_code=503)

        url = f"{self.base_url}/products/{quote(upc, safe='')}"
        try:
            resp = self.session.get(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("barcode lookup network error", upc=upc, error=str(exc))
            raise BarcodeLookupError("network error fetching barcode data") from exc

        if resp.status_code == 404:
            raise NotFoundError("barcode not found in database")
        if resp.status_code in (401, 403):
            logger.error("barcode api rejected credentials", status=resp.status_code)
            raise BarcodeLookupError("barcode API authentication failed")
        if resp.status_code != 200:
            logger.warning("barcode api unexpected status", status=resp.status_code, body=resp.text[:500])
            raise BarcodeLookupError(f"barcode API returned an unexpected error (status {resp.status_code})")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise BarcodeLookupError("failed to parse barcode API response") from exc
        if not isinstance(payload, dict):
            raise BarcodeLookupError("failed to parse barcode API response")

        return BarcodeProduct(
            upc=str(payload.get("upc") or upc),
            description=str(payload.get("name") or ""),
            brand=str(payload.get("brand") or ""),
            model=str(payload.get("model") or ""),
            category=str(payload.get("category") or ""),
        )
