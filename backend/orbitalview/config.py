"""Runtime configuration — upstream credentials, base URLs, server bind."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

N2YO_BASE_URL = "https://api.n2yo.com/rest/v1"
NASA_BASE_URL = "https://api.nasa.gov"
OPENWEATHER_BASE_URL = "https://api.openweathermap.org"
RESTCOUNTRIES_BASE_URL = "https://restcountries.com/v3.1"

DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "public"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """Everything the gateway needs, built once at startup and injected."""

    n2yo_api_key: str = ""
    nasa_api_key: str = ""
    openweather_api_key: str = ""
    n2yo_base_url: str = N2YO_BASE_URL
    nasa_base_url: str = NASA_BASE_URL
    openweather_base_url: str = OPENWEATHER_BASE_URL
    static_dir: Path = field(default=DEFAULT_STATIC_DIR)
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        if dotenv:
            load_dotenv()
        return cls(
            n2yo_api_key=os.getenv("N2YO_API_KEY", ""),
            nasa_api_key=os.getenv("NASA_API_KEY", ""),
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY", ""),
            n2yo_base_url=os.getenv("N2YO_BASE_URL", N2YO_BASE_URL).rstrip("/"),
            nasa_base_url=os.getenv("NASA_BASE_URL", NASA_BASE_URL).rstrip("/"),
            openweather_base_url=os.getenv("OPENWEATHER_BASE_URL", OPENWEATHER_BASE_URL).rstrip("/"),
            static_dir=Path(os.getenv("ORBITALVIEW_STATIC_DIR", str(DEFAULT_STATIC_DIR))),
            host=os.getenv("ORBITALVIEW_HOST", "127.0.0.1"),
            port=int(os.getenv("ORBITALVIEW_PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def secrets(self) -> tuple[str, ...]:
        return tuple(k for k in (self.n2yo_api_key, self.nasa_api_key, self.openweather_api_key) if k)

    def missing_keys(self) -> list[str]:
        names = {
            "N2YO_API_KEY": self.n2yo_api_key,
            "NASA_API_KEY": self.nasa_api_key,
            "OPENWEATHER_API_KEY": self.openweather_api_key,
        }
        return [name for name, value in names.items() if not value]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # keep keyed request URLs out of the log
    logging.getLogger("httpx").setLevel(logging.WARNING)
