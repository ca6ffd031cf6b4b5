"""Map session view-model — current location, layers and panels, one action per user event.

Every action reads the current location, makes one network call and overwrites
its render target. Actions that share a render target take a ticket from a
per-target counter when they start and commit it when they render; a response
whose ticket is older than the last committed render of its target is dropped.
A failure that only raises a notice commits nothing, so it never hides an
older result still in flight.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import math
from datetime import datetime, timezone

from orbitalview.client.blobs import ObjectUrlRegistry
from orbitalview.client.gateway import CountryLookup, GatewayClient
from orbitalview.client.geolocation import (
    GEOLOCATION_MESSAGES,
    LOCATE_TIMEOUT_S,
    UNSUPPORTED_MESSAGE,
    GeolocationError,
    GeolocationErrorCode,
    PositionProvider,
)
from orbitalview.client.view import (
    ImagePanel,
    ImageState,
    Layer,
    LatLng,
    Marker,
    Notice,
    NoticeLevel,
    Polyline,
    Popup,
    SatelliteListPanel,
    Viewport,
    WeatherPanel,
)
from orbitalview.errors import ClientRenderError, GatewayError
from orbitalview.models import (
    CountryRecord,
    Location,
    PassPrediction,
    SatelliteSummary,
    WeatherSnapshot,
    is_valid_coordinate,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = Location(latitude=26.1626, longitude=32.7094)  # Egypt

DEFAULT_ZOOM = 5
LOCATE_ZOOM = 10
MANUAL_ZOOM = 8
TRACK_ZOOM = 8

COUNTRY_BOX_DEG = 3.0
ARC_STEPS = 20

# Render targets shared between actions
LOCATION = "location"
MARKERS = "markers"
SATELLITES = "satellites"
IMAGE = "image"
WEATHER = "weather"


def visibility_label(max_elevation_degrees: float) -> str:
    if max_elevation_degrees > 30:
        return "excellent"
    if max_elevation_degrees > 15:
        return "good"
    return "fair"


def synthetic_pass_arc(lat: float, lng: float, steps: int = ARC_STEPS) -> list[LatLng]:
    """Decorative curve around the observer. Not a ground track; nothing orbital about it."""
    points = []
    for i in range(steps + 1):
        t = i / steps
        points.append((lat + math.sin(t * math.pi) * 0.5, lng + math.cos(t * math.pi * 2) * 0.8))
    return points


def _format_utc(epoch_seconds: int, fmt: str = "%Y-%m-%d %H:%M:%S UTC") -> str:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime(fmt)


def _format_area(area_km2: float) -> str:
    if float(area_km2).is_integer():
        return f"{area_km2:,.0f} km²"
    return f"{area_km2:,.2f} km²"


class MapSession:
    def __init__(
        self,
        gateway: GatewayClient,
        countries: CountryLookup,
        position_provider: PositionProvider | None = None,
        blobs: ObjectUrlRegistry | None = None,
        location: Location | None = None,
        locate_timeout: float = LOCATE_TIMEOUT_S,
    ):
        self.gateway = gateway
        self.countries = countries
        self.position_provider = position_provider
        self.blobs = blobs or ObjectUrlRegistry()
        self.locate_timeout = locate_timeout

        self.location = location or DEFAULT_LOCATION
        self.viewport = Viewport(center=self._latlng(), zoom=DEFAULT_ZOOM)
        self.markers = Layer("markers")
        self.overlay = Layer("overlay")
        self.satellite_panel: SatelliteListPanel | None = None
        self.weather_panel = WeatherPanel()
        self.image_panel = ImagePanel()
        self.status = ""
        self.notices: list[Notice] = []

        self._notice_ids = itertools.count(1)
        self._issued: dict[str, int] = {}
        self._committed: dict[str, int] = {}

    async def aclose(self) -> None:
        """Close both HTTP clients."""
        await self.gateway.aclose()
        await self.countries.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _latlng(self) -> LatLng:
        return self.location.latitude, self.location.longitude

    def _issue(self, target: str) -> int:
        self._issued[target] = self._issued.get(target, 0) + 1
        return self._issued[target]

    def _commit(self, target: str, ticket: int) -> bool:
        """Claim ``target`` for a render; False when a newer render already landed."""
        if ticket < self._committed.get(target, 0):
            logger.debug("Dropping stale %s response (ticket %d)", target, ticket)
            return False
        self._committed[target] = ticket
        return True

    def _render_now(self, target: str) -> None:
        self._commit(target, self._issue(target))

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> Notice:
        notice = Notice(id=next(self._notice_ids), message=message, level=level)
        self.notices.append(notice)
        return notice

    def dismiss_notice(self, notice_id: int) -> bool:
        before = len(self.notices)
        self.notices = [n for n in self.notices if n.id != notice_id]
        return len(self.notices) != before

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load the default coordinates and fetch their weather."""
        self.status = "Default coordinates loaded (Egypt)"
        await self.refresh_weather()

    async def locate(self) -> bool:
        if self.position_provider is None:
            self.notify(UNSUPPORTED_MESSAGE, NoticeLevel.ERROR)
            return False

        ticket = self._issue(LOCATION)
        try:
            fix = await asyncio.wait_for(self.position_provider.current_position(), self.locate_timeout)
        except asyncio.TimeoutError:
            self.notify(GEOLOCATION_MESSAGES[GeolocationErrorCode.TIMEOUT], NoticeLevel.ERROR)
            return False
        except GeolocationError as exc:
            self.notify(str(exc), NoticeLevel.ERROR)
            return False

        if not self._commit(LOCATION, ticket):
            return False

        self.location = fix
        lat, lng = self._latlng()
        self.status = f"GPS Lock Acquired: {lat:.6f}, {lng:.6f}"
        self.viewport = Viewport(center=(lat, lng), zoom=LOCATE_ZOOM)
        self._render_now(MARKERS)
        self.markers.clear()
        self.markers.add(Marker(
            position=(lat, lng),
            kind="location-pulse",
            popup=Popup(
                title="Ground Station",
                rows=[("Coordinates", f"{lat:.6f}, {lng:.6f}"), ("Status", "Active")],
            ),
        ))
        await self.refresh_weather()
        return True

    async def set_location(self, lat: float | str, lng: float | str) -> bool:
        """Manual coordinate entry; out-of-range or non-numeric input is ignored."""
        if not is_valid_coordinate(lat, lng):
            return False
        self._render_now(LOCATION)
        self.location = Location(latitude=float(lat), longitude=float(lng))
        self.viewport = Viewport(center=self._latlng(), zoom=MANUAL_ZOOM)
        await self.refresh_weather()
        return True

    # ------------------------------------------------------------------
    # Satellites
    # ------------------------------------------------------------------

    async def scan_overhead(self) -> SatelliteListPanel | None:
        lat, lng = self._latlng()
        ticket = self._issue(SATELLITES)
        try:
            data = await self.gateway.satellites_above(lat, lng)
            if not isinstance(data, dict):
                raise ClientRenderError("satellites-above payload is not an object")
            entries = [SatelliteSummary.from_n2yo(e) for e in data.get("above") or []]
        except (GatewayError, ClientRenderError) as exc:
            logger.warning("Satellite scan failed: %s", exc)
            self.notify("Unable to retrieve satellite data. Check your connection.", NoticeLevel.ERROR)
            return None

        if not self._commit(SATELLITES, ticket):
            return None

        self.satellite_panel = SatelliteListPanel(entries=entries)
        if entries:
            self.status = f"Found {len(entries)} satellites overhead"
        return self.satellite_panel

    async def select_satellite(self, index: int) -> PassPrediction | None:
        panel = self.satellite_panel
        if panel is None or not 0 <= index < len(panel.entries):
            self.notify("No satellite at that position in the list", NoticeLevel.WARNING)
            return None
        entry = panel.entries[index]
        return await self.track_pass(entry.id, entry.name)

    async def track_pass(self, sat_id: int | str | None, name: str | None = None) -> PassPrediction | None:
        if sat_id is None or str(sat_id).strip() == "":
            self.notify("Please enter a NORAD ID (e.g., 25544 for ISS)", NoticeLevel.WARNING)
            return None
        sat_id = str(sat_id).strip()
        name = name or f"Satellite {sat_id}"
        lat, lng = self._latlng()

        ticket = self._issue(MARKERS)
        try:
            data = await self.gateway.satellite_passes(sat_id, lat, lng)
        except (GatewayError, ClientRenderError) as exc:
            logger.warning("Pass prediction error for %s: %s", sat_id, exc)
            self.notify("Unable to predict satellite passes", NoticeLevel.ERROR)
            return None

        passes = data.get("passes") if isinstance(data, dict) else None
        if not passes:
            self.notify(f"No upcoming passes found for {name}", NoticeLevel.INFO)
            return None
        try:
            if not isinstance(passes, list):
                raise ClientRenderError(f"passes is a {type(passes).__name__}, not a list")
            next_pass = PassPrediction.from_n2yo(passes[0])
        except ClientRenderError as exc:
            logger.warning("Pass prediction error for %s: %s", sat_id, exc)
            self.notify("Unable to predict satellite passes", NoticeLevel.ERROR)
            return None

        # Build everything before touching the layer so a bad pass leaves it intact
        label = visibility_label(next_pass.max_elevation_degrees)
        ground = Marker(
            position=(lat, lng),
            kind="ground-station",
            label="🏢",
            popup=Popup(
                title=name,
                rows=[
                    ("Next Pass", _format_utc(next_pass.start_time)),
                    ("Duration", f"{next_pass.duration_seconds} seconds"),
                    ("Max Elevation", f"{next_pass.max_elevation_degrees:g}°"),
                ],
                status=f"{label.capitalize()} visibility",
            ),
        )
        arc = synthetic_pass_arc(lat, lng)
        status = f"Tracking {name} - Next pass: {_format_utc(next_pass.start_time, '%Y-%m-%d')}"

        if not self._commit(MARKERS, ticket):
            return None

        self.markers.clear()
        self.markers.add(ground)
        self.markers.add(Polyline(points=arc))
        self.markers.add(Marker(position=arc[0], kind="pass-start", label="START"))
        self.markers.add(Marker(position=arc[-1], kind="pass-end", label="END"))

        self.viewport = Viewport(center=(lat, lng), zoom=TRACK_ZOOM)
        self.status = status
        return next_pass

    # ------------------------------------------------------------------
    # Imagery & weather
    # ------------------------------------------------------------------

    async def fetch_earth_image(self) -> str | None:
        lat, lng = self._latlng()
        ticket = self._issue(IMAGE)
        self.image_panel.state = ImageState.LOADING
        self.image_panel.info = "Requesting image from NASA Earth Imagery API..."
        try:
            content, content_type = await self.gateway.earth_image(lat, lng)
        except GatewayError as exc:
            logger.warning("Earth imagery error: %s", exc)
            if self._commit(IMAGE, ticket):
                self.image_panel.state = ImageState.ERROR
                self.image_panel.info = "Unable to retrieve satellite imagery. Try different coordinates."
            return None

        if not self._commit(IMAGE, ticket):
            return None

        previous = self.image_panel.object_url
        object_url = self.blobs.create(content, content_type)
        self.blobs.revoke(previous)
        self.image_panel.object_url = object_url
        self.image_panel.state = ImageState.SUCCESS
        self.image_panel.info = f"Latest satellite image captured for coordinates: {lat:.6f}, {lng:.6f}"
        return object_url

    async def refresh_weather(self) -> WeatherSnapshot | None:
        lat, lng = self._latlng()
        ticket = self._issue(WEATHER)
        try:
            data = await self.gateway.weather(lat, lng)
            snapshot = WeatherSnapshot.from_openweather(data)
        except (GatewayError, ClientRenderError) as exc:
            logger.warning("Weather data error: %s", exc)
            if self._commit(WEATHER, ticket):
                self.weather_panel = WeatherPanel()
            return None

        if self._commit(WEATHER, ticket):
            self.weather_panel = WeatherPanel(snapshot=snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Country search
    # ------------------------------------------------------------------

    async def search_country(self, name: str | None) -> CountryRecord | None:
        name = (name or "").strip()
        if not name:
            self.notify("Please enter a country name", NoticeLevel.WARNING)
            return None

        ticket = self._issue(MARKERS)
        location_ticket = self._issue(LOCATION)
        try:
            country = await self.countries.first_match(name)
            latlng = country.display_latlng
            if latlng is None or not is_valid_coordinate(*latlng):
                raise ClientRenderError(f"Coordinates not available for {country.common_name}")
        except (GatewayError, ClientRenderError) as exc:
            logger.warning("Country search error: %s", exc)
            self.notify("Country not found. Please check spelling.", NoticeLevel.ERROR)
            return None

        if not self._commit(MARKERS, ticket):
            return None

        lat, lng = latlng
        south_west = (lat - COUNTRY_BOX_DEG, lng - COUNTRY_BOX_DEG)
        north_east = (lat + COUNTRY_BOX_DEG, lng + COUNTRY_BOX_DEG)
        if self._commit(LOCATION, location_ticket):
            self.location = Location(latitude=lat, longitude=lng)
        self.viewport = Viewport(center=latlng, bounds=(south_west, north_east))

        self.overlay.clear()
        self.overlay.add(Polyline(
            points=[south_west, (south_west[0], north_east[1]), north_east, (north_east[0], south_west[1]), south_west],
            dashed=False,
        ))

        population = f"{country.population:,}" if country.population else "Unknown"
        area = _format_area(country.area_km2) if country.area_km2 else "Unknown"
        self.markers.clear()
        self.markers.add(Marker(
            position=latlng,
            kind="country",
            label=country.flag_glyph or "🏛️",
            popup=Popup(
                title=f"{country.common_name} {country.flag_glyph}".strip(),
                rows=[
                    ("Capital", country.capital or "Not specified"),
                    ("Population", population),
                    ("Area", area),
                ],
            ),
        ))
        self.status = f"Located: {country.common_name}"
        return country
