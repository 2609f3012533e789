"""
api/main.py -- FastAPI application entry point for the People API.

Run with:      python main.py
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware  -- adds CORS headers for allowed browser origins
  2. log_requests    -- one access-log line per request

Lifespan opens the user and person stores on startup and closes them on
shutdown. Stores live on app.state, never in module globals, so tests swap in
isolated in-memory stores by replacing the lifespan.
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
from starlette.exceptions import HTTPException

from api.models import ErrorDetail, ErrorResponse, HelloResponse
from api.routes.auth import router as auth_router
from api.routes.people import router as people_router
from auth.store import UserStore
from core.config import get_settings
from core.errors import PeopleAPIError, Unauthorized
from people.store import PersonStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("peopleapi.api")

_settings = get_settings()

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open both stores against DATABASE_URL and publish the variant flags.

    Everything before yield runs on startup; everything after yield runs on
    shutdown.
    """
    logger.info("People API starting up (auth_enabled=%s)", _settings.auth_enabled)
    app.state.auth_enabled = _settings.auth_enabled
    app.state.legacy_status_codes = _settings.legacy_status_codes
    app.state.user_store = UserStore(_settings.database_url)
    app.state.person_store = PersonStore(_settings.database_url)
    logger.info("Connected to database")

    yield

    app.state.user_store.close()
    app.state.person_store.close()
    logger.info("Disconnected from database")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="People API",
    description="CRUD over people, scoped to the signed-in user.",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
        getattr(request.state, "username", "-"),
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])
app.include_router(people_router, tags=["People"])


@app.get("/", response_model=HelloResponse, tags=["Health"])
async def hello() -> HelloResponse:
    return HelloResponse()


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(PeopleAPIError)
async def people_api_error_handler(request: Request, exc: PeopleAPIError) -> JSONResponse:
    """Render a domain error with its own code and status.

    In legacy status mode Unauthorized keeps the original service's 400.
    """
    status_code = exc.status_code
    if isinstance(exc, Unauthorized) and getattr(request.app.state, "legacy_status_codes", False):
        status_code = 400
    return _error_response(status_code, exc.code, exc.message, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when a request body fails validation -- a client error like any other."""
    return _error_response(400, "validation_error", "Request validation failed.", str(exc.errors()))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return a structured error for FastAPI/Starlette HTTP exceptions (404 on unknown paths, 405, ...)."""
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is logged, never sent: the client receives only a
    generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")
