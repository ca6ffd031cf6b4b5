"""FastAPI application — CORS, error handlers, proxy routes, static assets, health check."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from orbitalview.config import Settings, configure_logging
from orbitalview.errors import UpstreamError, ValidationError
from orbitalview.models import ErrorResponse, HealthResponse
from orbitalview.routes.proxy import router as proxy_router
from orbitalview.upstream import ProviderClient

logger = logging.getLogger(__name__)

INDEX_PAGE = "OrbitalView.html"


def create_app(settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Build the gateway around an explicit Settings object.

    ``transport`` replaces the network layer of the provider client (tests use
    ``httpx.MockTransport``).
    """
    settings = settings or Settings.from_env()
    provider = ProviderClient(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        missing = settings.missing_keys()
        if missing:
            logger.warning("Upstream credentials not set: %s", ", ".join(missing))
        yield
        await provider.aclose()

    app = FastAPI(
        title="Orbital View Gateway",
        description="Keyed proxy for satellite, imagery and weather providers",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # --- Error handlers ---

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        logger.error("Upstream failure on %s: %s", request.url.path, exc.detail or exc.public_message)
        return JSONResponse(status_code=500, content=ErrorResponse(error=exc.public_message).model_dump())

    # --- Routes ---

    app.include_router(proxy_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(status="ok")

    static_dir = settings.static_dir
    if static_dir.is_dir():
        if (static_dir / INDEX_PAGE).is_file():
            @app.get("/", include_in_schema=False)
            async def index():
                return FileResponse(static_dir / INDEX_PAGE)

        app.mount("/", StaticFiles(directory=static_dir), name="static")
    else:
        logger.info("Static directory %s not found, serving API only", static_dir)

    return app


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
