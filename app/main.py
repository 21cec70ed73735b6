"""FastAPI application entry point.

Configures CORS, structured logging, the shared directory state, error
handlers and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from app.core.config import settings
from app.core.errors import DuplicateEmailError, FieldValidationError, StoreFaultError
from app.core.logging import setup_logging
from app.routers import health, talents
from app.routers.talents import (
    duplicate_email_response,
    ordered_messages,
    server_error_response,
    validation_failed_response,
)
from app.services.state import DirectoryState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    application.state.directory = DirectoryState()
    logger.info("Application starting up")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Talent Directory API",
    description="Submit candidate profiles and search the directory by skill",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error Handlers
# ---------------------------------------------------------------------------
@app.exception_handler(DuplicateEmailError)
async def handle_duplicate_email(request: Request, exc: DuplicateEmailError) -> JSONResponse:
    return duplicate_email_response()


@app.exception_handler(FieldValidationError)
async def handle_field_validation(request: Request, exc: FieldValidationError) -> JSONResponse:
    return validation_failed_response(ordered_messages(exc.errors))


@app.exception_handler(RequestValidationError)
async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return validation_failed_response([str(err.get("msg", "Invalid request")) for err in exc.errors()])


@app.exception_handler(StoreFaultError)
async def handle_store_fault(request: Request, exc: StoreFaultError) -> JSONResponse:
    logger.error(
        "store_fault",
        extra={"path": request.url.path, "error_message": str(exc)},
    )
    return server_error_response()


# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(talents.router, prefix="/api/talents", tags=["Talents"])
