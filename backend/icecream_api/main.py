"""
Acme Ice Cream API: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn icecream_api.main:app) or by run().
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌─────────────────┐               │
    │  │   Logging    │→│  Req ID + 500   │               │
    │  └──────────────┘ └─────────────────┘               │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌───────────────────────────────────┐ │
    │  │  GET /   │ │ GET/POST/PUT/DELETE /api/flavors  │ │
    │  └──────────┘ └───────────────────────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the engine
    3. Drop, recreate and seed the flavors table
    4. Publish engine + session factory on app.state
    A failure in 2-3 is logged and re-raised; the server does not start.

    Shutdown:
    1. Dispose the engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from icecream_api import __version__
from icecream_api.config import Settings, settings as default_settings
from icecream_api.database import create_engine, create_session_factory, dispose_engine
from icecream_api.exceptions import DatabaseError, NotFoundError, ValidationError
from icecream_api.middleware.logging import RequestLoggingMiddleware
from icecream_api.middleware.request_id import (
    GENERIC_SERVER_ERROR,
    RequestIDMiddleware,
    request_id_var,
)
from icecream_api.routes import flavors, landing
from icecream_api.services.seed_service import reset_schema

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.log_level == "DEBUG" else logging.WARNING
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: connect, reset the schema, seed, then hand over to the server.
    Shutdown: dispose the engine.

    No retry loop: if the database is unreachable or the schema statements
    fail, the error is logged and re-raised so uvicorn aborts startup.
    """
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("Acme Ice Cream API %s starting up...", __version__)

    engine = None
    try:
        engine = create_engine(settings)
        await reset_schema(engine)
    except Exception as e:
        logger.error("Error initializing app: %s", str(e))
        if engine is not None:
            await dispose_engine(engine)
        raise

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Ready to serve requests")

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Acme Ice Cream API shutting down...")
    await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _is_non_json_body_error(request: Request, exc: RequestValidationError) -> bool:
    """True when the only failure is a whole body that was not sent as JSON."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if not content_type or content_type == "application/json" or content_type.endswith("+json"):
        return False
    return all(tuple(error.get("loc", ())) == ("body",) for error in exc.errors())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError         → 400 (message returned as-is)
        RequestValidationError  → 400 "Invalid request" ("Name is required"
                                  for a non-JSON body)
        NotFoundError           → 404 (message returned as-is)
        DatabaseError           → 500 generic, details logged
        Exception (fallback)    → 500 generic; normally answered first by
                                  RequestIDMiddleware

    Server errors never expose internal details in the response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """
        Malformed JSON, out-of-range or non-integer path id, non-string name.

        A body sent with a non-JSON content type is treated as an empty
        object, so it gets the same message as a missing name.
        """
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid request: %s", rid, exc.errors())
        if _is_non_json_body_error(request, exc):
            return JSONResponse(status_code=400, content={"error": "Name is required"})
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to run with; defaults to the environment-loaded
                  singleton. The database engine built from it lives on
                  app.state for the lifetime of the app.
    """
    app = FastAPI(
        title="Acme Ice Cream API",
        description="CRUD API over ice-cream flavors.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings

    # Middleware executes in REVERSE order of addition:
    # Logging wraps RequestID so it records the 500s RequestID produces.
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(landing.router)
    app.include_router(flavors.router)

    return app


# uvicorn expects `icecream_api.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve `app` on the configured host and port."""
    settings: Settings = app.state.settings
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
