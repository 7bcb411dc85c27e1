from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from catalog_manager import __version__
from catalog_manager.api.errors import register_error_handlers
from catalog_manager.api.routes import catalog_items, health, service_types
from catalog_manager.config import get_settings
from catalog_manager.db.seed import seed_defaults
from catalog_manager.db.session import create_schema, dispose_engine, get_session, init_engine
from catalog_manager.logging import configure_logging, request_context

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    started = time.perf_counter()
    with request_context(request_id=request_id, method=request.method, path=request.url.path):
        response = await call_next(request)
        logger.info(
            "request_completed",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level, json=not settings.debug)
    init_engine(settings)
    await create_schema()
    if settings.seed_on_startup:
        async for session in get_session():
            await seed_defaults(session)
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Catalog Manager API",
        version=__version__,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.cors_origins],
            allow_methods=["*"],
            allow_headers=["*"],
            allow_credentials=True,
        )

    app.middleware("http")(log_requests)
    register_error_handlers(app)
    app.include_router(service_types.router, prefix=settings.api_prefix, tags=["service-types"])
    app.include_router(catalog_items.router, prefix=settings.api_prefix, tags=["catalog-items"])
    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    return app


app = create_app()
