"""Co-founder matching endpoints.

GET  /matches              -- ranked candidate feed for a user.
POST /matches              -- send a connection request.
GET  /matches/requests     -- pending requests received and sent.
POST /matches/{id}/respond -- accept or reject a pending request.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import settings
from app.core.exceptions import MatchingError
from app.db.repository import CofounderRepository, get_repository
from app.models.connection import (
    CreateRequestBody,
    CreateRequestResponse,
    RequestsResponse,
    RespondBody,
    RespondResponse,
)
from app.models.match import MatchFeedResponse
from app.services.connections import (
    create_request,
    list_incoming,
    list_outgoing,
    respond,
)
from app.services.matching import build_feed

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=MatchFeedResponse)
async def get_matches(
    user_id: UUID = Query(..., alias="userId", description="Viewer's user id"),
    limit: int | None = Query(
        None,
        ge=1,
        le=settings.MAX_MATCH_POOL_SIZE,
        description="Candidate pool size",
    ),
    repo: CofounderRepository = Depends(get_repository),
) -> MatchFeedResponse:
    """Return candidates ranked by match score, with any connection status."""
    pool_size = limit or settings.MATCH_POOL_SIZE
    try:
        matches = build_feed(repo, user_id, pool_size)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "get_matches_failed",
            extra={"user_id": str(user_id), "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to fetch matches") from exc

    return MatchFeedResponse(matches=matches)


@router.post("", response_model=CreateRequestResponse)
async def create_match_request(
    body: CreateRequestBody,
    repo: CofounderRepository = Depends(get_repository),
) -> CreateRequestResponse:
    """Send a connection request; 409 if one already exists for the pair."""
    try:
        request = create_request(repo, body.requester_id, body.target_id)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "create_match_failed",
            extra={
                "requester_id": str(body.requester_id),
                "target_id": str(body.target_id),
                "error_message": str(exc),
            },
        )
        raise HTTPException(status_code=500, detail="Failed to create match") from exc

    return CreateRequestResponse(match=request)


@router.get("/requests", response_model=RequestsResponse)
async def get_requests(
    user_id: UUID = Query(..., alias="userId"),
    repo: CofounderRepository = Depends(get_repository),
) -> RequestsResponse:
    """Return pending requests: ``requests`` received and ``sent``."""
    try:
        incoming = list_incoming(repo, user_id)
        outgoing = list_outgoing(repo, user_id)
    except Exception as exc:
        logger.error(
            "get_requests_failed",
            extra={"user_id": str(user_id), "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to fetch requests") from exc

    return RequestsResponse(requests=incoming, sent=outgoing)


@router.post("/{request_id}/respond", response_model=RespondResponse)
async def respond_to_request(
    request_id: UUID,
    body: RespondBody,
    repo: CofounderRepository = Depends(get_repository),
) -> RespondResponse:
    """Accept or reject a pending request; decided requests return 409."""
    try:
        request = respond(repo, request_id, body.status)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "respond_match_failed",
            extra={"request_id": str(request_id), "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to respond") from exc

    return RespondResponse(request=request)
