"""Talent directory endpoints.

POST / -- submit a talent (201, or 400 on validation/duplicate email).
GET  / -- list talents, optionally filtered by ``skill`` (newest first).
GET  /state -- snapshot of the shared directory state.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from starlette.responses import JSONResponse

from app.core.constants import (
    FIELD_ORDER,
    MSG_DUPLICATE_EMAIL,
    MSG_DUPLICATE_EMAIL_ERROR,
    MSG_SERVER_ERROR,
    MSG_TALENT_ADDED,
    MSG_VALIDATION_FAILED,
)
from app.db.store import TalentStore, get_talent_store
from app.models.talent import TalentInput
from app.services.state import DirectoryState
from app.services.talents import search, submit

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies and response envelopes
# ---------------------------------------------------------------------------

def get_directory_state(request: Request) -> DirectoryState:
    """Return the ``DirectoryState`` attached to the running app."""
    return request.app.state.directory


def ordered_messages(errors: dict[str, str]) -> list[str]:
    """Flatten a field-error mapping into a list in form field order."""
    known = [errors[name] for name in FIELD_ORDER if name in errors]
    extra = [message for name, message in errors.items() if name not in FIELD_ORDER]
    return known + extra


def validation_failed_response(messages: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": MSG_VALIDATION_FAILED, "errors": messages},
    )


def duplicate_email_response() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": MSG_DUPLICATE_EMAIL,
            "error": MSG_DUPLICATE_EMAIL_ERROR,
        },
    )


def server_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": MSG_SERVER_ERROR},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", status_code=201)
def create_talent(
    payload: Any = Body(None),
    store: TalentStore = Depends(get_talent_store),
    state: DirectoryState = Depends(get_directory_state),
) -> Any:
    """Add a new talent to the directory."""
    candidate = TalentInput.model_validate(payload) if isinstance(payload, dict) else None
    result = submit(candidate, store, state)

    if result.ok and result.talent is not None:
        return {
            "success": True,
            "message": MSG_TALENT_ADDED,
            "data": result.talent.to_wire(),
        }
    if result.duplicate:
        return duplicate_email_response()
    if result.errors:
        return validation_failed_response(ordered_messages(result.errors))
    return server_error_response()


@router.get("", status_code=200)
def list_talents(
    skill: str | None = Query(None, description="Case-insensitive skill substring"),
    store: TalentStore = Depends(get_talent_store),
    state: DirectoryState = Depends(get_directory_state),
) -> dict[str, Any]:
    """Return all talents, or those with a skill containing ``skill``."""
    result = search(skill, store, state)
    return {
        "success": True,
        "count": result.count,
        "data": [talent.to_wire() for talent in result.talents],
    }


@router.get("/state", status_code=200)
def directory_state(
    state: DirectoryState = Depends(get_directory_state),
) -> dict[str, Any]:
    """Return loading/error/filter status of the directory."""
    return state.snapshot()
