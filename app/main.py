"""FastAPI application entry point.

Configures CORS, structured logging, the domain error handler, lifespan
events, and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import MatchingError
from app.core.logging import setup_logging
from app.routers import connections, health, matches, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info(
        "Application starting up",
        extra={"storage_backend": settings.STORAGE_BACKEND},
    )
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Co-founder Matching API",
    description="Profiles, co-founder match feed and connection requests",
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
# Error Handling
# ---------------------------------------------------------------------------
@app.exception_handler(MatchingError)
async def matching_error_handler(request: Request, exc: MatchingError) -> JSONResponse:
    """Render domain errors as ``{"success": false, "error", "message"}``."""
    logger.warning(
        "request_rejected",
        extra={
            "path": request.url.path,
            "error_kind": exc.kind,
            "error_message": str(exc),
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.kind, "message": str(exc)},
    )


# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(matches.router, prefix="/api/matches", tags=["Matches"])
app.include_router(connections.router, prefix="/api", tags=["Connections"])
