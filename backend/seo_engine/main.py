"""
SEO Engine Backend: FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, documentation
       registration, and lifecycle logging in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn seo_engine.main:app) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Request ID  │→│ Logging  │→│  CORS           │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ GET /health  │ │ GET /docs│ │ GET /api-docs/  │  │
    │  │              │ │          │ │   openapi.json  │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ HTTPException→4xx │ AppError→500 │ *→500     │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Startup:
    create_app() builds and validates the documentation manifest. A broken
    manifest raises ManifestError here, so uvicorn never starts serving.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from seo_engine.config import Settings, settings
from seo_engine.docs import include_routers, register_documentation
from seo_engine.exceptions import SeoEngineError
from seo_engine.middleware.logging import RequestLoggingMiddleware
from seo_engine.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from seo_engine.routes import health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (Docker captures it)
    """
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # RequestLoggingMiddleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def log_endpoints(config: Settings) -> None:
    """Startup banner listing where the service can be reached."""
    logger.info("Server running at %s", config.base_url)
    logger.info("API endpoints:")
    logger.info("   - Health: %s/health", config.base_url)
    logger.info("   - API docs: %s%s", config.base_url, config.docs_url)
    logger.info("   - OpenAPI document: %s%s", config.base_url, config.openapi_url)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup/shutdown logging. There are no resources to open or release:
    the manifest is already built by the time the server accepts requests.
    """
    config: Settings = app.state.settings
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("%s %s starting up...", config.api_title, config.api_version)
    log_endpoints(config)
    logger.info("=" * 60)

    yield

    logger.info("%s shutting down...", config.api_title)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request_id_var.get("")


def error_body(error: str, message: str, request: Request, details: Optional[dict] = None) -> dict:
    """ErrorResponse-shaped body."""
    return {
        "error": error,
        "message": message,
        "details": details,
        "request_id": _request_id(request),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        StarletteHTTPException  → its own status (404 routing miss, 405, ...)
        RequestValidationError  → 422 Unprocessable Entity
        SeoEngineError (base)   → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Responses never include stack traces; details are logged server-side.
    """

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Routing misses and other framework-raised HTTP errors."""
        status = exc.status_code
        if status == 404 and exc.detail in (None, "Not Found"):
            message = f"No route matches {request.method} {request.url.path}"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=status,
            content=error_body(HTTP_ERROR_CODES.get(status, "http_error"), message, request),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Client sent parameters that do not match the route's schema."""
        return JSONResponse(
            status_code=422,
            content=error_body(
                "validation_error",
                "Request parameters failed validation",
                request,
                details={"errors": jsonable_errors(exc)},
            ),
        )

    @app.exception_handler(SeoEngineError)
    async def handle_app_error(request: Request, exc: SeoEngineError):
        rid = _request_id(request)
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred.", request),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, full stack trace logged server-side only."""
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        # Rendered outside the middleware chain, so RequestIDMiddleware never sees it
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred.",
                request,
            ),
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input / ctx objects, which may not serialize."""
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use; defaults to the module-level singleton.

    Returns:
        Configured FastAPI instance with its documentation manifest installed.

    Raises:
        ManifestError: the generated documentation is inconsistent with the
            route table or references an undefined schema.
    """
    config = config or settings

    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=config.api_version,
        docs_url=config.docs_url,           # Swagger UI
        swagger_ui_oauth2_redirect_url=f"{config.docs_url.rstrip('/')}/oauth2-redirect",
        redoc_url=None,
        redirect_slashes=False,             # /health/ is a miss, not a redirect
        openapi_url=config.openapi_url,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    include_routers(app, health.router)

    # ── Documentation Registry ────────────────────────────────────────────
    # Must run after every router is included
    register_documentation(app, config)

    return app


# uvicorn expects `seo_engine.main:app` to be importable
app = create_app()
