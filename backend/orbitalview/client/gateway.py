"""HTTP clients used by the map session: the keyed gateway and the public country lookup."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from orbitalview.config import RESTCOUNTRIES_BASE_URL
from orbitalview.errors import ClientRenderError, GatewayError
from orbitalview.models import CountryRecord

logger = logging.getLogger(__name__)


def _json_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise ClientRenderError(f"Expected JSON from {resp.request.url.path}, got {resp.text[:80]!r}") from exc


class GatewayClient:
    """Talks to the Orbital View gateway; never sees a provider key."""

    def __init__(self, base_url: str = "http://localhost:3000", transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def satellites_above(self, lat: float, lng: float) -> dict:
        return _json_body(await self._get("/api/n2yo/above", {"lat": lat, "lng": lng}))

    async def satellite_passes(self, sat_id: int | str, lat: float, lng: float) -> dict:
        return _json_body(await self._get("/api/n2yo/passes", {"satId": sat_id, "lat": lat, "lng": lng}))

    async def earth_image(self, lat: float, lng: float) -> tuple[bytes, str]:
        resp = await self._get("/api/nasa/earth-image", {"lat": lat, "lng": lng})
        return resp.content, resp.headers.get("content-type", "application/octet-stream")

    async def weather(self, lat: float, lng: float) -> dict:
        return _json_body(await self._get("/api/weather", {"lat": lat, "lng": lng}))

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        try:
            resp = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Gateway unreachable: {exc}") from exc
        if not resp.is_success:
            raise GatewayError(f"API Error: {resp.status_code}", status_code=resp.status_code)
        return resp


class CountryLookup:
    """REST Countries name search. Public and unauthenticated, so it skips the gateway."""

    def __init__(self, base_url: str = RESTCOUNTRIES_BASE_URL, transport: httpx.AsyncBaseTransport | None = None):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def first_match(self, name: str) -> CountryRecord:
        url = f"{self._base_url}/name/{quote(name, safe='')}"
        try:
            resp = await self._client.get(url, params={"fullText": "false"})
        except httpx.HTTPError as exc:
            raise GatewayError(f"Country lookup unreachable: {exc}") from exc
        if resp.status_code == 404:
            raise ClientRenderError(f"No country matches {name!r}")
        if not resp.is_success:
            raise GatewayError(f"Country lookup error: {resp.status_code}", status_code=resp.status_code)

        countries = _json_body(resp)
        if not isinstance(countries, list) or not countries:
            raise ClientRenderError(f"No country matches {name!r}")
        return CountryRecord.from_restcountries(countries[0])
