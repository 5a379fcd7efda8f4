"""Geocode router: GET /api/geocode/reverse to fill address fields from a pin."""
from fastapi import APIRouter, Query

from trashtrack.services import geocode

router = APIRouter(prefix="/api", tags=["geocode"])


@router.get("/geocode/reverse")
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
):
    result = await geocode.reverse(lat, lng)
    return {"latitude": lat, "longitude": lng, **result}
