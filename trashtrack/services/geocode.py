"""Reverse geocoding via OpenStreetMap Nominatim (best effort)."""
import logging
from typing import Any

import httpx

from trashtrack.config import settings

logger = logging.getLogger(__name__)


def empty_address() -> dict[str, Any]:
    return {"address": None, "city": None, "postal_code": None, "display_name": ""}


async def reverse(lat: float, lng: float) -> dict[str, Any]:
    """Resolve coordinates to address/city/postal code. Returns empty fields on failure."""
    params = {
        "format": "jsonv2",
        "lat": f"{lat:.6f}",
        "lon": f"{lng:.6f}",
        "zoom": 18,
        "addressdetails": 1,
    }
    headers = {"User-Agent": settings.geocoder_user_agent}
    try:
        async with httpx.AsyncClient(timeout=8.0, headers=headers) as client:
            r = await client.get(settings.geocoder_url, params=params)
            r.raise_for_status()
            return _parse_address(r.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Reverse geocode failed for %.5f,%.5f: %s", lat, lng, e)
    return empty_address()


def _parse_address(j: Any) -> dict[str, Any]:
    if not isinstance(j, dict):
        raise ValueError(f"Unexpected geocoder payload: {type(j).__name__}")
    addr = j.get("address") or {}
    if not isinstance(addr, dict):
        raise ValueError("Unexpected geocoder address payload")
    street = " ".join(p for p in (addr.get("house_number"), addr.get("road")) if p)
    area = addr.get("neighbourhood") or addr.get("suburb")
    line = ", ".join(p for p in (street, area) if p) or None
    city = addr.get("city") or addr.get("town") or addr.get("village") or addr.get("state_district")
    return {
        "address": line,
        "city": city,
        "postal_code": addr.get("postcode"),
        "display_name": j.get("display_name", ""),
    }
