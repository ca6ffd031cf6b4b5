from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from orbitalview.config import Settings
from orbitalview.main import create_app

N2YO_KEY = "n2yo-test-key-123"
NASA_KEY = "nasa-test-key-456"
OWM_KEY = "owm-test-key-789"


class FakeUpstream:
    """Records every outbound request and answers with whatever the test queued."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.response: httpx.Response = httpx.Response(200, json={})
        self.error: Exception | None = None

    def reply(self, status_code: int = 200, **kwargs) -> None:
        self.response = httpx.Response(status_code, **kwargs)

    def fail(self, exc_type: type[httpx.HTTPError] = httpx.ConnectError) -> None:
        self.error = exc_type

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("connection refused", request=request)
        return self.response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        n2yo_api_key=N2YO_KEY,
        nasa_api_key=NASA_KEY,
        openweather_api_key=OWM_KEY,
        static_dir=tmp_path / "missing-public",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def gateway_app(settings, upstream):
    return create_app(settings, transport=upstream.transport)


@pytest.fixture
def client(gateway_app):
    with TestClient(gateway_app) as c:
        yield c
