"""Device position sources for the session's locate action."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from orbitalview.errors import OrbitalViewError
from orbitalview.models import Location

LOCATE_TIMEOUT_S = 10.0


class GeolocationErrorCode(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"


GEOLOCATION_MESSAGES = {
    GeolocationErrorCode.PERMISSION_DENIED: "Location access denied by user",
    GeolocationErrorCode.POSITION_UNAVAILABLE: "Location information unavailable",
    GeolocationErrorCode.TIMEOUT: "Location request timed out",
}

UNSUPPORTED_MESSAGE = "Geolocation is not supported by this browser"


class GeolocationError(OrbitalViewError):
    def __init__(self, code: GeolocationErrorCode):
        super().__init__(GEOLOCATION_MESSAGES[code])
        self.code = code


class PositionProvider(Protocol):
    async def current_position(self) -> Location:
        """Return one fix or raise GeolocationError."""
        ...


class FixedPositionProvider:
    """Always reports the same coordinates (manual configuration, headless use)."""

    def __init__(self, latitude: float, longitude: float):
        self.location = Location(latitude=latitude, longitude=longitude)

    async def current_position(self) -> Location:
        return self.location
