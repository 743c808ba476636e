"""Messages exchanged over an accepted connection."""

from __future__ import annotations

import logging
from uuid import UUID

from app.core.exceptions import InvalidState, InvalidTarget, NotFound
from app.db.repository import CofounderRepository
from app.models.connection import ConnectionRequest
from app.models.enums import ConnectionStatus
from app.models.message import ConnectionMessage

logger = logging.getLogger(__name__)


def _get_connection(repo: CofounderRepository, connection_id: UUID) -> ConnectionRequest:
    connection = repo.get_request(connection_id)
    if connection is None:
        raise NotFound(f"Connection {connection_id} not found")
    return connection


def send_message(
    repo: CofounderRepository,
    connection_id: UUID,
    sender_id: UUID,
    content: str,
) -> ConnectionMessage:
    """Post ``content`` on an accepted connection the sender belongs to."""
    connection = _get_connection(repo, connection_id)
    if connection.status != ConnectionStatus.accepted:
        raise InvalidState(
            f"Connection {connection_id} is {connection.status.value}, not accepted"
        )
    if not connection.involves(sender_id):
        raise InvalidTarget(f"User {sender_id} is not part of this connection")

    message = repo.insert_message(connection_id, sender_id, content)
    logger.info(
        "connection_message_sent",
        extra={"connection_id": str(connection_id), "sender_id": str(sender_id)},
    )
    return message


def list_messages(
    repo: CofounderRepository, connection_id: UUID
) -> list[ConnectionMessage]:
    """Messages of a connection, oldest first."""
    _get_connection(repo, connection_id)
    return repo.list_messages(connection_id)
