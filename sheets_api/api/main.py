"""
FastAPI Application Entry Point
===============================

Main FastAPI application with health check, middleware,
and lifecycle management.
"""

import asyncio
import time
from contextlib import asynccontextmanager, suppress
from datetime import datetime, timezone
from typing import Any, AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sheets_api import __version__
from sheets_api.config.settings import Settings, get_settings
from sheets_api.parsers.header_mapper import HeaderMapper, default_header_rules
from sheets_api.schemas.responses import ErrorResponse
from sheets_api.services.result_cache import CacheKey, ResultCache
from sheets_api.services.sheet_data_service import SheetDataService
from sheets_api.services.sheet_source import GoogleSheetsCsvSource
from sheets_api.utils.errors import (
    EmptyPayloadError,
    SheetsApiError,
    SourceConnectionError,
    SourceFormatError,
    TabConfigNotFoundError,
)
from sheets_api.utils.logger import configure_logging, get_logger, request_context

logger = get_logger(__name__)

ERROR_STATUS: dict[type[SheetsApiError], int] = {
    TabConfigNotFoundError: status.HTTP_404_NOT_FOUND,
    SourceFormatError: status.HTTP_502_BAD_GATEWAY,
    EmptyPayloadError: status.HTTP_502_BAD_GATEWAY,
    SourceConnectionError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _status_for(exc: SheetsApiError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def build_sheet_data_service(settings: Settings) -> SheetDataService:
    """Construct the process-wide cache, source and data service."""
    return SheetDataService(
        cache=ResultCache(),
        source=GoogleSheetsCsvSource(settings),
        ttl_seconds=settings.cache_ttl_seconds,
        header_mapper=HeaderMapper(default_header_rules(settings.title_marker)),
    )


async def warm_default_sheet(settings: Settings, service: SheetDataService) -> None:
    """Load the default sheet into the cache; a failure is only logged."""
    key = CacheKey(settings.default_spreadsheet_id, settings.default_sheet_gid)
    try:
        result = await service.get_records(key)
    except SheetsApiError as e:
        logger.warning(
            "Default sheet not loaded; POST /api/refresh to download data",
            key=str(key),
            error=e.message,
        )
        return
    logger.info("Default sheet loaded", key=str(key), rows=result.total_rows)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Warms the cache with the default sheet in a background task when
    enabled, so the server accepts requests while the download runs. An
    unfinished warm-up is cancelled on shutdown.
    """
    settings: Settings = app.state.settings
    service: SheetDataService = app.state.sheet_data_service

    logger.info(
        "sheets-api service starting",
        version=__version__,
        environment=settings.environment,
        port=settings.fastapi_port,
        base_path=settings.base_path or "(root)",
    )

    warmup: asyncio.Task[None] | None = None
    if settings.preload_default_sheet:
        warmup = asyncio.create_task(warm_default_sheet(settings, service))
    app.state.warmup_task = warmup

    yield

    if warmup is not None and not warmup.done():
        warmup.cancel()
        with suppress(asyncio.CancelledError):
            await warmup
        logger.info("Default sheet warm-up cancelled")

    logger.info("sheets-api service shutting down", cached_sheets=service.cache.size())


def create_app(
    settings: Settings | None = None,
    sheet_data_service: SheetDataService | None = None,
) -> FastAPI:
    """
    FastAPI application factory.

    Args:
        settings: Application settings (defaults to environment)
        sheet_data_service: Pre-built data service (tests inject one)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Sheets API",
        description=(
            "Google Sheets CSV to JSON API. Parses multi-line CSV exports into "
            "records and caches them per spreadsheet tab."
        ),
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.sheet_data_service = sheet_data_service or build_sheet_data_service(settings)

    base_path = settings.base_path.rstrip("/")

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Request Logging Middleware
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Any:
        """
        Log all incoming requests with timing and correlation ID.

        Adds X-Request-ID header for tracing and X-Process-Time header
        with request duration in seconds. Events logged by the handler
        carry the same request_id.
        """
        request_id = str(uuid4())
        start_time = time.perf_counter()

        with request_context(request_id):
            logger.info(
                "Request received",
                method=request.method,
                path=str(request.url.path),
                query=str(request.query_params) if request.query_params else None,
                client_ip=request.client.host if request.client else None,
            )

            response = await call_next(request)

            process_time = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
                duration_ms=round(process_time * 1000, 2),
            )

        return response

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(SheetsApiError)
    async def sheets_api_error_handler(request: Request, exc: SheetsApiError) -> JSONResponse:
        """Handle application-specific errors."""
        logger.error(
            "Application error",
            error_type=type(exc).__name__,
            message=exc.message,
            details=exc.details,
            path=str(request.url),
        )
        return JSONResponse(
            status_code=_status_for(exc),
            content=ErrorResponse(
                error=type(exc).__name__,
                message=exc.message,
                details=exc.details,
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected errors."""
        logger.exception(
            "Unexpected error",
            error_type=type(exc).__name__,
            message=str(exc),
            path=str(request.url),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred",
            ).model_dump(),
        )

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        f"{base_path}/health",
        tags=["Health"],
        summary="Health check endpoint",
        response_model=dict[str, Any],
    )
    async def health_check(request: Request) -> dict[str, Any]:
        """Report service status and cached sheets."""
        service: SheetDataService = request.app.state.sheet_data_service
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "Google Sheets CSV API",
            "version": __version__,
            "basePath": base_path,
            "cache": {
                "totalCachedSheets": service.cache.size(),
                "cacheEntries": [str(key) for key in service.cache.keys()],
            },
        }

    # -------------------------------------------------------------------------
    # API Info Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        f"{base_path}/",
        tags=["Info"],
        summary="API information",
    )
    async def api_info() -> dict[str, Any]:
        """Return usage information."""
        api = f"{base_path}/api"
        return {
            "message": "Google Sheets CSV to JSON API with Parameters",
            "usage": {
                "data": f"GET {api}/data?spreadsheet_id=YOUR_ID&sheet_gid=YOUR_GID",
                "refresh": f"POST {api}/refresh?spreadsheet_id=YOUR_ID&sheet_gid=YOUR_GID",
                "info": f"GET {api}/info?spreadsheet_id=YOUR_ID&sheet_gid=YOUR_GID",
                "downloadConfig": f"POST {api}/download-config",
                "sheets": f"GET {api}/sheets",
                "clearCache": f"DELETE {api}/cache",
                "health": f"GET {base_path}/health",
            },
            "defaults": {
                "spreadsheetId": settings.default_spreadsheet_id,
                "sheetGid": settings.default_sheet_gid,
            },
            "version": __version__,
        }

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    from sheets_api.api.routes import cache_router, data_router, sheets_router

    app.include_router(data_router, prefix=f"{base_path}/api", tags=["Data"])
    app.include_router(cache_router, prefix=f"{base_path}/api/cache", tags=["Cache"])
    app.include_router(sheets_router, prefix=f"{base_path}/api", tags=["Sheets"])

    return app


# Create application instance
app = create_app()
