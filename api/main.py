"""
api/main.py -- FastAPI application entry point for the Character API.

This module is the single process-wide request dispatcher: every request goes
through the middleware stack below, then to the /auth or /characters router,
and anything that matches neither ends up in the 404 handler.

Run with:      python main.py
               uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware    -- permissive cross-origin headers (Settings.cors_origins)
  2. log_requests      -- one access log line per request; turns uncaught
                          exceptions into the generic 500
  3. SlowAPIMiddleware -- applies the limiter default limits

Per-route limits (POST /auth/login) are checked by the @limiter.limit wrapper
around the handler itself.

Lifespan creates the three in-memory stores once at startup and hangs them on
app.state; handlers and auth dependencies reach them through request.app.state.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import HealthResponse, MessageResponse
from api.routes.auth import router as auth_router
from api.routes.characters import router as characters_router
from auth.store import TokenStore, UserStore
from characters.store import CharacterStore
from core.config import get_settings
from core.errors import ApiError, InternalError, NotFoundError, ValidationError

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("charapi.api")

_settings = get_settings()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the process-wide stores on startup.

    Everything lives in memory, so there is nothing to close on shutdown;
    the stores go away with the process.
    """
    logger.info("Character API starting up")
    app.state.token_store = TokenStore()
    app.state.user_store = UserStore()
    app.state.character_store = CharacterStore()
    logger.info("Stores initialized (character_roles=%s)", ",".join(_settings.character_roles))

    yield

    logger.info(
        "Character API shutdown complete (users=%d, characters=%d, revoked_tokens=%d)",
        len(app.state.user_store),
        len(app.state.character_store),
        len(app.state.token_store),
    )


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Character API",
    description="User registration/login and CRUD on characters, behind bearer-token auth.",
    version=VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# Starlette wraps middleware so the LAST one added is the outermost. Add in
# reverse of the order a request should meet them: SlowAPI, the logger, then
# CORS, so every response the logger produces still gets CORS headers.
# ---------------------------------------------------------------------------

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        # Rendered here rather than by ServerErrorMiddleware, which sits
        # outside CORS and this access log.
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        response = _error_response(InternalError())
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


app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Router registration -- dispatch by URL prefix
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])
app.include_router(characters_router, tags=["Characters"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error leaves the API as {"message": ...}, optionally with a "detail"
# list for validation failures.
# ---------------------------------------------------------------------------


def _error_response(exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=MessageResponse(message=exc.message, detail=exc.detail).model_dump(exclude_none=True),
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render errors raised by stores, auth dependencies and routes."""
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when a request body, path or query parameter fails validation.

    Only location and message are echoed back; pydantic's raw error context
    can hold the rejected input, including passwords.
    """
    detail = [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]
    return _error_response(ValidationError(detail=detail))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing failures.

    Unknown paths (404) and known paths with an unsupported method (405) both
    answer 404 Endpoint Not Found.
    """
    if exc.status_code in (404, 405):
        return _error_response(NotFoundError())
    return JSONResponse(
        status_code=exc.status_code,
        content=MessageResponse(message=str(exc.detail)).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a rate limit is exceeded.

    Sync on purpose: SlowAPIMiddleware calls this handler directly and uses
    its return value as the response.
    """
    retry_after = exc.limit.limit.get_expiry() if exc.limit is not None else 60
    response = JSONResponse(
        status_code=429,
        content=MessageResponse(message="Too Many Requests").model_dump(exclude_none=True),
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for errors raised outside log_requests.

    The exception is logged server-side only; the client gets a generic body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(InternalError())


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=VERSION)
