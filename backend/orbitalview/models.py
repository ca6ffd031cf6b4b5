from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from orbitalview.errors import ClientRenderError


# --- Location ---

class Location(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    try:
        lat_f, lng_f = float(lat), float(lng)
    except (TypeError, ValueError):
        return False
    return -90 <= lat_f <= 90 and -180 <= lng_f <= 180


# --- N2YO payloads ---

class SatelliteSummary(BaseModel):
    id: int
    name: str
    altitude: float | None = Field(default=None, description="Altitude above sea level (km)")

    @classmethod
    def from_n2yo(cls, entry: dict) -> SatelliteSummary:
        try:
            return cls(
                id=entry["satid"],
                name=entry.get("satname") or f"Satellite {entry['satid']}",
                altitude=entry.get("satalt"),
            )
        except (KeyError, AttributeError, TypeError, PydanticValidationError) as exc:
            raise ClientRenderError(f"Malformed satellite entry: {exc}") from exc


class PassPrediction(BaseModel):
    start_time: int = Field(description="Pass start, UTC epoch seconds")
    duration_seconds: int
    max_elevation_degrees: float

    @classmethod
    def from_n2yo(cls, entry: dict) -> PassPrediction:
        try:
            start = int(entry["startUTC"])
            # the pass panel renders this as a UTC date
            datetime.fromtimestamp(start, tz=timezone.utc)
            return cls(
                start_time=start,
                duration_seconds=round(float(entry.get("duration", 0))),
                max_elevation_degrees=float(entry["maxEl"]),
            )
        except (KeyError, AttributeError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise ClientRenderError(f"Malformed pass entry: {exc}") from exc


# --- OpenWeatherMap payload ---

class WeatherSnapshot(BaseModel):
    location_name: str
    condition_text: str
    temperature_c: float
    wind_speed_mps: float
    humidity_pct: float
    visibility_km: float | None = None

    @classmethod
    def from_openweather(cls, data: dict) -> WeatherSnapshot:
        try:
            condition = data["weather"][0]
            main = data["main"]
            visibility = data.get("visibility")
            return cls(
                location_name=data.get("name") or "Current Location",
                condition_text=condition.get("description", ""),
                temperature_c=main["temp"],
                wind_speed_mps=data["wind"]["speed"],
                humidity_pct=main["humidity"],
                visibility_km=round(visibility / 1000, 1) if visibility else None,
            )
        except (KeyError, IndexError, AttributeError, TypeError, PydanticValidationError) as exc:
            raise ClientRenderError(f"Malformed weather payload: {exc}") from exc


# --- REST Countries payload ---

class CountryRecord(BaseModel):
    common_name: str
    flag_glyph: str = ""
    capital: str | None = None
    capital_latlng: tuple[float, float] | None = None
    latlng: tuple[float, float] | None = None
    population: int | None = None
    area_km2: float | None = None

    @classmethod
    def from_restcountries(cls, data: dict) -> CountryRecord:
        try:
            capitals = data.get("capital") or []
            return cls(
                common_name=data["name"]["common"],
                flag_glyph=data.get("flag") or "",
                capital=capitals[0] if capitals else None,
                capital_latlng=_latlng((data.get("capitalInfo") or {}).get("latlng")),
                latlng=_latlng(data.get("latlng")),
                population=data.get("population"),
                area_km2=data.get("area"),
            )
        except (KeyError, AttributeError, TypeError, ValueError) as exc:
            raise ClientRenderError(f"Malformed country record: {exc}") from exc

    @property
    def display_latlng(self) -> tuple[float, float] | None:
        """Capital coordinates when known, otherwise the country centroid."""
        return self.capital_latlng or self.latlng


def _latlng(value: Any) -> tuple[float, float] | None:
    if not value or len(value) < 2:
        return None
    return float(value[0]), float(value[1])


# --- API responses ---

class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
