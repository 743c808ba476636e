"""Accepted connections and the messages exchanged over them."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.exceptions import MatchingError
from app.db.repository import CofounderRepository, get_repository
from app.models.connection import ConnectionsResponse
from app.models.message import MessageCreate, MessageResponse, MessagesResponse
from app.services.connections import list_accepted_connections
from app.services.messages import list_messages, send_message

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/connections", response_model=ConnectionsResponse)
async def get_connections(
    user_id: UUID = Query(..., alias="userId"),
    repo: CofounderRepository = Depends(get_repository),
) -> ConnectionsResponse:
    """Return the user's accepted connections, one per partner."""
    try:
        connections = list_accepted_connections(repo, user_id)
    except Exception as exc:
        logger.error(
            "get_connections_failed",
            extra={"user_id": str(user_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500, detail="Failed to fetch connections"
        ) from exc

    return ConnectionsResponse(connections=connections)


@router.get("/messages", response_model=MessagesResponse)
async def get_messages(
    connection_id: UUID = Query(..., alias="connectionId"),
    repo: CofounderRepository = Depends(get_repository),
) -> MessagesResponse:
    try:
        messages = list_messages(repo, connection_id)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "get_messages_failed",
            extra={"connection_id": str(connection_id), "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to fetch messages") from exc

    return MessagesResponse(messages=messages)


@router.post("/messages", response_model=MessageResponse)
async def post_message(
    body: MessageCreate,
    repo: CofounderRepository = Depends(get_repository),
) -> MessageResponse:
    """Send a message on an accepted connection the sender belongs to."""
    try:
        message = send_message(repo, body.connection_id, body.sender_id, body.content)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "send_message_failed",
            extra={
                "connection_id": str(body.connection_id),
                "error_message": str(exc),
            },
        )
        raise HTTPException(status_code=500, detail="Failed to send message") from exc

    return MessageResponse(message=message)
