"""
api/main.py -- FastAPI application entry point for notekeeper.

Run with:  uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware     -- enforces per-route rate limits from api.limiter

Lifespan builds the database engine and both stores on startup and disposes
the engine on shutdown. Stores are reached through app.state, never through
module globals.

Error contract: every error response is {"error": str, "code": str,
"details": [...] | null}. Domain errors (core.errors) carry their own status;
FastAPI body validation becomes a 400; anything unclassified is a 500 with a
generic message and the traceback goes to the log only.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorResponse, HealthResponse
from api.routes.login import router as login_router
from api.routes.notes import router as notes_router
from api.routes.users import router as users_router
from auth.store import UserStore
from core.config import get_settings
from core.database import create_db_engine, ping
from core.errors import NoteKeeperError
from notes.store import NoteStore

VERSION = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("notekeeper.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the engine for the whole server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown. Both stores share one engine so notes.user_id can reference
    users.id inside one database.
    """
    logger.info("notekeeper API starting up")
    engine = create_db_engine(_settings.database_url)
    app.state.engine = engine
    app.state.user_store = UserStore(engine)
    app.state.note_store = NoteStore(engine)
    logger.info("Stores initialized (%d users)", app.state.user_store.count_users())

    yield

    engine.dispose()
    logger.info("notekeeper API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="notekeeper API",
    description="Notes with user registration and bearer-token login.",
    version=VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=_settings.allowed_hosts,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(login_router, prefix="/api", tags=["Auth"])
app.include_router(notes_router, prefix="/api", tags=["Notes"])


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _error_response(status_code: int, error: str, code: str, details: list[str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump(),
    )


@app.exception_handler(NoteKeeperError)
async def domain_error_handler(request: Request, exc: NoteKeeperError) -> JSONResponse:
    """Render a typed domain error. Only the class's client-safe message is sent."""
    return _error_response(exc.status_code, exc.message, exc.code, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 listing every field violation in the request."""
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return _error_response(400, "request validation failed", "validation_error", details)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with Retry-After when a rate limit is exceeded.

    Retry-After is the length of the violated limit's window (60 for
    "10/minute", 3600 for "5/hour").
    """
    retry_after = exc.limit.limit.get_expiry()
    response = _error_response(429, "too many requests", "rate_limited")
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing-level errors (unknown path, wrong method) in the same envelope."""
    if exc.status_code == 404:
        return _error_response(404, "unknown endpoint", "unknown_endpoint")
    return _error_response(exc.status_code, str(exc.detail), f"http_{exc.status_code}")


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal error", "internal_error")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version and a database round-trip check."""
    db_ok = ping(request.app.state.engine)
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
