"""Keyed proxy endpoints: /api/n2yo/above, /api/n2yo/passes, /api/nasa/earth-image, /api/weather."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, Response

from orbitalview.errors import ValidationError
from orbitalview.upstream import ProviderClient

router = APIRouter(prefix="/api", tags=["proxy"])


def _provider(request: Request) -> ProviderClient:
    return request.app.state.provider


def _coordinates(lat: str | None, lng: str | None) -> tuple[float, float]:
    if not lat or not lng:
        raise ValidationError("Latitude and longitude are required.")
    try:
        lat_f, lng_f = float(lat), float(lng)
    except ValueError:
        raise ValidationError("Latitude and longitude must be numbers.") from None
    if not -90 <= lat_f <= 90 or not -180 <= lng_f <= 180:
        raise ValidationError("Latitude must be within [-90, 90] and longitude within [-180, 180].")
    return lat_f, lng_f


def _satellite_id(sat_id: str) -> int:
    # int() would also take signs, underscores and non-ASCII digits
    if not (sat_id.isascii() and sat_id.isdigit()):
        raise ValidationError("Satellite ID must be an integer NORAD ID.")
    value = int(sat_id)
    if value <= 0:
        raise ValidationError("Satellite ID must be a positive NORAD ID.")
    return value


# ---------------------------------------------------------------------------
# N2YO
# ---------------------------------------------------------------------------

@router.get("/n2yo/above")
async def satellites_above(
    request: Request,
    lat: str | None = Query(default=None, description="Observer latitude"),
    lng: str | None = Query(default=None, description="Observer longitude"),
):
    """Satellites currently within 70° of the observer's zenith."""
    latitude, longitude = _coordinates(lat, lng)
    data = await _provider(request).satellites_above(latitude, longitude)
    return JSONResponse(content=data)


@router.get("/n2yo/passes")
async def satellite_passes(
    request: Request,
    satId: str | None = Query(default=None, description="NORAD catalog number"),
    lat: str | None = Query(default=None, description="Observer latitude"),
    lng: str | None = Query(default=None, description="Observer longitude"),
):
    """Radio passes over the next 7 days peaking at 10° or more."""
    if not satId or not lat or not lng:
        raise ValidationError("Satellite ID, latitude, and longitude are required.")
    sat_id = _satellite_id(satId)
    latitude, longitude = _coordinates(lat, lng)
    data = await _provider(request).satellite_passes(sat_id, latitude, longitude)
    return JSONResponse(content=data)


# ---------------------------------------------------------------------------
# NASA
# ---------------------------------------------------------------------------

@router.get("/nasa/earth-image")
async def earth_image(
    request: Request,
    lat: str | None = Query(default=None),
    lng: str | None = Query(default=None),
):
    """Relay the Landsat tile bytes unchanged, with the upstream content type."""
    latitude, longitude = _coordinates(lat, lng)
    image = await _provider(request).earth_image(latitude, longitude)
    return Response(content=image.content, media_type=image.content_type)


# ---------------------------------------------------------------------------
# OpenWeatherMap
# ---------------------------------------------------------------------------

@router.get("/weather")
async def weather(
    request: Request,
    lat: str | None = Query(default=None),
    lng: str | None = Query(default=None),
):
    latitude, longitude = _coordinates(lat, lng)
    data = await _provider(request).weather(latitude, longitude)
    return JSONResponse(content=data)
