from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response

from cepfinder.api.routes import router
from cepfinder.core.config import get_settings
from cepfinder.core.logging import configure_logging, get_logger
from cepfinder.services.cep_service import create_cep_service
from cepfinder.services.http import build_async_client


settings = get_settings()
configure_logging(settings.debug)

_logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with build_async_client(settings) as client:
        app.state.cep_service = create_cep_service(settings, client)
        _logger.info(
            "Postal code service ready",
            providers=[provider.name for provider in app.state.cep_service.providers],
            race_timeout=settings.race_timeout,
            provider_timeout=settings.provider_timeout,
        )
        yield


app = FastAPI(
    title="cepfinder API", version="0.1.0", debug=settings.debug, lifespan=lifespan
)

app.include_router(router)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request.headers.get("x-request-id") or uuid.uuid4().hex
    )
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        _logger.exception(
            "Request failed", method=request.method, path=request.url.path
        )
        raise
    _logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Return basic service health."""

    return {"status": "ok"}


def run() -> None:
    uvicorn.run(
        "cepfinder.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
