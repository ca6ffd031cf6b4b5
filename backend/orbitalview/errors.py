"""Error taxonomy shared by the gateway and the map session."""

from __future__ import annotations


class OrbitalViewError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(OrbitalViewError):
    """A required query parameter is missing or malformed (HTTP 400)."""


class UpstreamError(OrbitalViewError):
    """The provider answered with a non-success status or could not be reached (HTTP 500).

    ``public_message`` is what the caller sees; ``detail`` only goes to the log.
    """

    def __init__(self, provider: str, public_message: str, detail: str = "", status_code: int | None = None):
        super().__init__(f"{provider}: {detail or public_message}")
        self.provider = provider
        self.public_message = public_message
        self.detail = detail
        self.status_code = status_code


class GatewayError(OrbitalViewError):
    """The map session got a non-success answer from the gateway, or none at all."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ClientRenderError(OrbitalViewError):
    """A response lacked a field the session needs to render (no passes, no coordinates...)."""
