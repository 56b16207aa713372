"""weblist FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from weblist import __version__
from weblist.config import Settings, get_settings
from weblist.exceptions import WeblistError
from weblist.services import build_services

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"

_JSON_ERROR_PREFIXES = ("/api/", "/upload")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # === STARTUP ===
    settings: Settings = app.state.services.settings
    _setup_logging(settings)
    logger.info(
        "weblist v%s serving %s on %s:%s",
        __version__, settings.root_dir, settings.host, settings.port,
    )

    try:
        yield
    finally:
        # === SHUTDOWN ===
        logger.info("weblist shutting down")


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Noisy third-party loggers to WARNING
    for noisy in ("uvicorn.access", "multipart", "python_multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


async def _weblist_error_handler(request: Request, exc: WeblistError):
    """JSON for API-style endpoints, plain text for everything a browser navigates to."""
    if request.url.path.startswith(_JSON_ERROR_PREFIXES):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    from weblist.api.middleware import rate_limit, require_auth, security_headers
    from weblist.api.routes import api_router, web_router

    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )
    app.state.services = build_services(settings)

    app.add_exception_handler(WeblistError, _weblist_error_handler)

    # Last added runs first: throttling precedes auth, headers wrap both
    if settings.auth_enabled:
        app.middleware("http")(require_auth)
    if settings.request_rate_per_second > 0:
        app.middleware("http")(rate_limit)
    app.middleware("http")(security_headers)

    if ASSETS_DIR.is_dir():
        app.mount("/assets", StaticFiles(directory=ASSETS_DIR), name="assets")
    else:
        logger.info("No assets found at %s", ASSETS_DIR)

    app.include_router(api_router, prefix="/api")
    app.include_router(web_router)

    return app


def run(**kwargs: Any) -> None:
    import uvicorn

    settings = get_settings()
    _setup_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        **kwargs,
    )


if __name__ == "__main__":
    run()
