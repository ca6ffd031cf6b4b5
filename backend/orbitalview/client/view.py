"""Render models for the map session — what a map front end draws, as plain data."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from orbitalview.models import SatelliteSummary, WeatherSnapshot

LatLng = tuple[float, float]


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notice:
    id: int
    message: str
    level: NoticeLevel = NoticeLevel.INFO


@dataclass
class Viewport:
    center: LatLng
    zoom: int | None = None
    bounds: tuple[LatLng, LatLng] | None = None


@dataclass
class Popup:
    title: str
    rows: list[tuple[str, str]] = field(default_factory=list)
    status: str | None = None


@dataclass
class Marker:
    position: LatLng
    kind: str
    label: str = ""
    popup: Popup | None = None


@dataclass
class Polyline:
    points: list[LatLng]
    color: str = "#FFD166"
    dashed: bool = True


@dataclass
class Layer:
    """A clearable group of map features."""

    name: str
    features: list[Marker | Polyline] = field(default_factory=list)

    def clear(self) -> None:
        self.features = []

    def add(self, feature: Marker | Polyline) -> None:
        self.features.append(feature)

    @property
    def markers(self) -> list[Marker]:
        return [f for f in self.features if isinstance(f, Marker)]

    @property
    def polylines(self) -> list[Polyline]:
        return [f for f in self.features if isinstance(f, Polyline)]


@dataclass
class SatelliteListPanel:
    entries: list[SatelliteSummary] = field(default_factory=list)

    EMPTY_MESSAGE = "No satellites detected above your location"
    EMPTY_HINT = "Try a different time or location"

    @property
    def empty(self) -> bool:
        return not self.entries

    @staticmethod
    def altitude_text(entry: SatelliteSummary) -> str:
        if entry.altitude is None:
            return "Altitude unknown"
        return f"{entry.altitude:.0f} km altitude"


@dataclass
class WeatherPanel:
    snapshot: WeatherSnapshot | None = None

    UNAVAILABLE_MESSAGE = "Weather data unavailable"

    @property
    def available(self) -> bool:
        return self.snapshot is not None

    def rows(self) -> list[tuple[str, str]]:
        if self.snapshot is None:
            return []
        w = self.snapshot
        visibility = f"{w.visibility_km:.1f} km" if w.visibility_km is not None else "unknown"
        return [
            ("Temperature", f"{round(w.temperature_c)}°C"),
            ("Wind Speed", f"{w.wind_speed_mps:g} m/s"),
            ("Humidity", f"{w.humidity_pct:g}%"),
            ("Visibility", visibility),
        ]


class ImageState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ImagePanel:
    object_url: str | None = None
    info: str = ""
    state: ImageState = ImageState.IDLE
