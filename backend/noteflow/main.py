"""
NoteFlow Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       lifecycle management and the construction of process-wide objects
       (the completion client) in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn noteflow.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: Rate Limit → Request ID → Logging → GZip    │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────────┐ ┌────────────┐ ┌──────────┐ ┌─────────┐  │
    │  │ POST /ai/* │ │ /notes CRUD│ │ /auth/*  │ │ /health │  │
    │  └────────────┘ └────────────┘ └──────────┘ └─────────┘  │
    │                                                          │
    │  app.state.completion_client  (one per process)          │
    │                                                          │
    │  Exception Handlers → {"error": ..., "details": ...}     │
    │  Validation→400 │ Auth→401 │ NotFound→404 │ AI/DB→500    │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from noteflow import __version__
from noteflow.config import settings
from noteflow.database import dispose_engine
from noteflow.exceptions import (
    AIOperationError,
    AuthenticationError,
    DatabaseError,
    NoteFlowError,
    NotFoundError,
    ValidationError,
)
from noteflow.middleware.logging import RequestLoggingMiddleware
from noteflow.middleware.rate_limit import RateLimitMiddleware
from noteflow.middleware.request_id import RequestIDMiddleware, request_id_var
from noteflow.routes import ai, auth, health, notes
from noteflow.services.llm_base import CompletionClient
from noteflow.services.openai_service import OpenAICompletionClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # These log every request/connection at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check, completion client report.
    Shutdown: dispose the database engine.

    A missing OPENAI_API_KEY is reported here but does not stop the server:
    notes and sign-in keep working and every AI request answers 500 with the
    configuration message until the key is set and the process restarted.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("NoteFlow Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("AI endpoints will fail until the configuration is fixed.")

    client: CompletionClient = app.state.completion_client
    logger.info(
        "Completion client: %s (%s)",
        type(client).__name__,
        "configured" if client.is_configured else "NOT configured",
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("NoteFlow Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, details: Optional[str] = None) -> dict:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the error envelope.

    Handler hierarchy:
        RequestValidationError  → 400 (malformed JSON / wrong field types)
        ValidationError         → 400
        AuthenticationError     → 401
        NotFoundError           → 404
        AIOperationError        → 500 with details
        DatabaseError           → 500, generic message
        NoteFlowError (base)    → 500
        Exception (fallback)    → 500, stack trace logged only

    The request ID is returned in the X-Request-ID header, never in the body.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body is not JSON, not an object, or has wrongly typed fields."""
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        )
        logger.warning("[%s] Invalid request body: %s", request_id_var.get(""), details)
        return JSONResponse(status_code=400, content=_error_body("Invalid request body", details))

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=_error_body(exc.message))

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(status_code=401, content=_error_body(exc.message))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body(exc.message))

    @app.exception_handler(AIOperationError)
    async def handle_ai_operation_error(request: Request, exc: AIOperationError):
        """Provider or configuration failure: fixed message plus the underlying text."""
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.details,
            exc.context,
        )
        return JSONResponse(status_code=500, content=_error_body(exc.message, exc.details))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the client; context logged server-side only."""
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content=_error_body(exc.message))

    @app.exception_handler(NoteFlowError)
    async def handle_noteflow_error(request: Request, exc: NoteFlowError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=500, content=_error_body(exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("An unexpected error occurred. Please try again."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(completion_client: Optional[CompletionClient] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        completion_client: Client used by every AI endpoint. Defaults to an
            OpenAICompletionClient built from settings. Tests pass a fake.

    The client is attached to app.state here rather than in the lifespan so
    that it exists even when the ASGI lifespan protocol is not run
    (e.g. httpx.ASGITransport in tests).
    """
    app = FastAPI(
        title="NoteFlow API",
        description=(
            "Note-taking backend: notes CRUD, password sign-in and AI-assisted "
            "summarize, generate, improve, answer and tag operations."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.completion_client = completion_client or OpenAICompletionClient.from_settings(settings)

    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(ai.router)
    app.include_router(notes.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


# uvicorn expects `noteflow.main:app` to be importable
app = create_app()
