"""SKU Matching Engine - Main FastAPI Application

Maps food items from meal plans to SKUs on Sam's Club, Hema and Dingdong.

This module creates and configures the FastAPI application, including:
- Structured logging and request ID correlation
- Platform adapter registry, catalog reader and matcher wiring
- Exception handlers
- The SKU matching router
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from catalog import SqlCatalogReader
from config import Settings, get_settings
from database import build_session_factory, create_engine_from_settings
from feedback import SqlCorrectionSink
from matching.ports import CatalogReaderPort, CorrectionSinkPort
from matching.router import router as matching_router
from matching.sku_matcher import SkuMatcher
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from platforms import build_default_registry


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    catalog_reader: Optional[CatalogReaderPort] = None,
    correction_sink: Optional[CorrectionSinkPort] = None,
) -> FastAPI:
    """Application factory.

    Args:
        settings: Settings (defaults to the cached environment settings)
        catalog_reader: Catalog reader (defaults to SqlCatalogReader on DATABASE_URL)
        correction_sink: Correction sink (defaults to SqlCorrectionSink when
            CORRECTION_SINK is "sql", otherwise corrections are only logged)

    Returns:
        Configured FastAPI application; the matcher is on app.state.matcher
    """
    settings = settings or get_settings()

    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    session_factory = None
    if catalog_reader is None or (correction_sink is None and settings.CORRECTION_SINK == "sql"):
        session_factory = build_session_factory(create_engine_from_settings(settings))

    if catalog_reader is None:
        catalog_reader = SqlCatalogReader(session_factory)
    if correction_sink is None and settings.CORRECTION_SINK == "sql":
        correction_sink = SqlCorrectionSink(session_factory)

    registry = build_default_registry(settings)
    matcher = SkuMatcher(
        catalog_reader,
        registry=registry,
        correction_sink=correction_sink,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("SKU matching engine starting up...")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Registered platforms: {', '.join(registry.list_available())}")

        yield

        logger.info("SKU matching engine shutting down...")
        matcher.close()

    docs_enabled = settings.ENVIRONMENT != "production"
    app = FastAPI(
        title="SKU Matching Engine",
        description="Maps meal-plan food items to e-commerce platform SKUs",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.matcher = matcher

    app.add_middleware(RequestIDMiddleware)
    _register_exception_handlers(app)
    app.include_router(matching_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, Any]:
        return {
            "name": "SKU Matching Engine",
            "version": "0.1.0",
            "status": "running",
            "platforms": registry.list_available(),
        }

    return app


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Return field-level details for malformed request bodies."""
        logger.warning(
            f"Validation error on {request.method} {request.url.path}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request,
        exc: SQLAlchemyError
    ) -> JSONResponse:
        """Log the full database error but return a generic message."""
        logger.error(
            f"Database error on {request.method} {request.url.path}",
            exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "database_error",
                "message": "A database error occurred. Please try again later.",
            },
        )


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )
