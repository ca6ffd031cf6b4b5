"""Provider client — builds keyed upstream URLs and relays the single GET each endpoint needs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from orbitalview.config import Settings
from orbitalview.errors import UpstreamError

logger = logging.getLogger(__name__)

# N2YO "above" search: observer altitude 0 m, 70° search radius, category 0 (all)
ABOVE_OBSERVER_ALT_M = 0
ABOVE_SEARCH_RADIUS_DEG = 70
ABOVE_CATEGORY_ID = 0

# N2YO radio passes: 7-day window, passes peaking below 10° are dropped
PASSES_DAYS = 7
PASSES_MIN_ELEVATION_DEG = 10

# NASA Earth imagery field of view, degrees
IMAGE_DIM_DEG = 0.2


def _coord(value: float) -> str:
    """Fixed-point degrees; str() would give exponent form for tiny values."""
    return f"{value:.6f}"


@dataclass
class ImagePayload:
    content: bytes
    content_type: str


class ProviderClient:
    """One AsyncClient shared by every gateway route; credentials come from Settings."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._client = httpx.AsyncClient(transport=transport, follow_redirects=True)

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- URL builders ---

    def above_url(self, lat: float, lng: float) -> str:
        s = self.settings
        return (
            f"{s.n2yo_base_url}/satellite/above/{_coord(lat)}/{_coord(lng)}"
            f"/{ABOVE_OBSERVER_ALT_M}/{ABOVE_SEARCH_RADIUS_DEG}/{ABOVE_CATEGORY_ID}/"
            f"?apiKey={s.n2yo_api_key}"
        )

    def passes_url(self, sat_id: int, lat: float, lng: float) -> str:
        s = self.settings
        return (
            f"{s.n2yo_base_url}/satellite/radiopasses/{sat_id}/{_coord(lat)}/{_coord(lng)}"
            f"/0/{PASSES_DAYS}/{PASSES_MIN_ELEVATION_DEG}/"
            f"?apiKey={s.n2yo_api_key}"
        )

    def imagery_request(self, lat: float, lng: float) -> tuple[str, dict[str, Any]]:
        s = self.settings
        return f"{s.nasa_base_url}/planetary/earth/imagery", {
            "lat": _coord(lat),
            "lon": _coord(lng),
            "dim": IMAGE_DIM_DEG,
            "api_key": s.nasa_api_key,
        }

    def weather_request(self, lat: float, lng: float) -> tuple[str, dict[str, Any]]:
        s = self.settings
        return f"{s.openweather_base_url}/data/2.5/weather", {
            "lat": _coord(lat),
            "lon": _coord(lng),
            "units": "metric",
            "appid": s.openweather_api_key,
        }

    # --- Endpoint calls ---

    async def satellites_above(self, lat: float, lng: float) -> Any:
        resp = await self._get("N2YO", "Failed to fetch satellite data.", self.above_url(lat, lng))
        return self._json("N2YO", "Failed to fetch satellite data.", resp)

    async def satellite_passes(self, sat_id: int, lat: float, lng: float) -> Any:
        resp = await self._get("N2YO", "Failed to fetch pass data.", self.passes_url(sat_id, lat, lng))
        return self._json("N2YO", "Failed to fetch pass data.", resp)

    async def earth_image(self, lat: float, lng: float) -> ImagePayload:
        url, params = self.imagery_request(lat, lng)
        resp = await self._get("NASA", "Failed to fetch NASA image.", url, params)
        return ImagePayload(
            content=resp.content,
            content_type=resp.headers.get("content-type", "application/octet-stream"),
        )

    async def weather(self, lat: float, lng: float) -> Any:
        url, params = self.weather_request(lat, lng)
        resp = await self._get("OpenWeatherMap", "Failed to fetch weather data.", url, params)
        return self._json("OpenWeatherMap", "Failed to fetch weather data.", resp)

    # --- Internals ---

    async def _get(self, provider: str, public_message: str, url: str, params: dict | None = None) -> httpx.Response:
        try:
            resp = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            detail = self._redact(f"{type(exc).__name__}: {exc}")
            logger.error("%s request failed: %s", provider, detail)
            raise UpstreamError(provider, public_message, detail) from exc

        if not resp.is_success:
            detail = f"{provider} API Error: {resp.reason_phrase or resp.status_code}"
            logger.error("%s (%s)", detail, self._redact(str(resp.request.url)))
            raise UpstreamError(provider, public_message, detail, status_code=resp.status_code)
        return resp

    def _json(self, provider: str, public_message: str, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("%s returned a non-JSON body: %s", provider, resp.text[:200])
            raise UpstreamError(provider, public_message, "invalid JSON body") from exc

    def _redact(self, text: str) -> str:
        for secret in self.settings.secrets:
            text = text.replace(secret, "***")
        return text
