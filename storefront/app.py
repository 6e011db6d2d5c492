"""
FastAPI application entry point for the storefront backend.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.config import Settings, get_settings
from storefront.db import StorageContext
from storefront.dependencies import get_storage, select_storage
from storefront.routes import router
from storefront.schemas import HealthResponse

NOT_FOUND_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageContext] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Storage is chosen once per process, never per request.
        if getattr(app.state, "storage", None) is None:
            app.state.storage = select_storage(settings)
        yield

    app = FastAPI(title="Storefront Backend", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    @app.get("/", response_class=PlainTextResponse)
    def root(storage: StorageContext = Depends(get_storage)) -> str:
        return f"Hello from the Skid RC Backend! Connected to {storage.backend_name}."

    @app.get("/healthz", response_model=HealthResponse)
    def healthz() -> HealthResponse:
        return HealthResponse(
            status="ok", time=datetime.now(timezone.utc).isoformat()
        )

    app.include_router(router, prefix=settings.api_prefix)

    # Must stay last so it only sees paths nothing else matched.
    @app.api_route("/{path:path}", methods=NOT_FOUND_METHODS, include_in_schema=False)
    def not_found(path: str) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "Route not found."},
        )

    return app
