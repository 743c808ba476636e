"""Health check endpoint.

Returns service status including database connectivity.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.core.config import settings
from app.core.constants import USERS_TABLE
from app.db.supabase import get_supabase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return health status including a real Supabase connectivity test.

    Returns 200 OK when healthy, 503 when the database is unreachable.  The
    in-memory backend has no database and always reports ``memory``.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if settings.STORAGE_BACKEND.lower() == "memory":
        return {"status": "ok", "database": "memory", "timestamp": timestamp}

    db_status = "disconnected"
    try:
        client = get_supabase()
        result = client.table(USERS_TABLE).select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "timestamp": timestamp,
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
