"""Health check endpoint.

Returns service status including directory store connectivity.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from app.core.config import settings
from app.db.store import TalentStore, get_talent_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(store: TalentStore = Depends(get_talent_store)) -> Any:
    """Return 200 when the store answers, 503 otherwise."""
    db_status = "connected" if store.ping() else "disconnected"

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
    }

    if db_status != "connected":
        logger.warning("health_check_degraded", extra={"backend": settings.STORE_BACKEND})
        return JSONResponse(status_code=503, content=payload)

    return payload
