"""Connection workflow: create, respond to and list connection requests.

Uniqueness per ordered (requester, target) pair and the pending-only status
transition are enforced by the repository in a single atomic step; this
module never does check-then-insert on its own.
"""

from __future__ import annotations

import logging
from uuid import UUID

from app.core.exceptions import InvalidState, InvalidTarget, NotFound
from app.db.repository import CofounderRepository
from app.models.connection import (
    AcceptedConnection,
    ConnectionRequest,
    PendingRequest,
)
from app.models.enums import ConnectionDecision, ConnectionStatus
from app.services.scoring import score

logger = logging.getLogger(__name__)


def create_request(
    repo: CofounderRepository,
    requester_id: UUID,
    target_id: UUID,
) -> ConnectionRequest:
    """Send a pending connection request from ``requester_id`` to ``target_id``.

    Raises
    ------
    InvalidTarget
        The requester targeted themselves.
    NotFound
        The target has no profile.
    DuplicateRequest
        A request already exists for this ordered pair (any status).
    """
    if requester_id == target_id:
        raise InvalidTarget("You cannot send a connection request to yourself")

    profiles = repo.get_profiles([requester_id, target_id])
    target = profiles.get(target_id)
    if target is None:
        raise NotFound(f"User {target_id} not found")

    requester = profiles.get(requester_id)
    match_score = score(requester, target) if requester else None

    request = repo.insert_request(requester_id, target_id, match_score)
    logger.info(
        "connection_request_created",
        extra={
            "request_id": str(request.id),
            "requester_id": str(requester_id),
            "target_id": str(target_id),
            "match_score": match_score,
        },
    )
    return request


def respond(
    repo: CofounderRepository,
    request_id: UUID,
    decision: ConnectionDecision,
) -> ConnectionRequest:
    """Accept or reject a pending request.

    Decided requests are terminal: responding again raises ``InvalidState``.
    """
    new_status = ConnectionStatus(decision.value)
    updated = repo.transition_request(
        request_id, ConnectionStatus.pending, new_status
    )
    if updated is not None:
        logger.info(
            "connection_request_answered",
            extra={"request_id": str(request_id), "status": new_status.value},
        )
        return updated

    current = repo.get_request(request_id)
    if current is None:
        raise NotFound(f"Connection request {request_id} not found")
    raise InvalidState(
        f"Connection request {request_id} is already {current.status.value}"
    )


def _join_pending(
    repo: CofounderRepository,
    user_id: UUID,
    requests: list[ConnectionRequest],
) -> list[PendingRequest]:
    profiles = repo.get_profiles({r.counterpart_of(user_id) for r in requests})
    joined: list[PendingRequest] = []
    for request in requests:
        counterpart = profiles.get(request.counterpart_of(user_id))
        if counterpart is None:
            logger.debug(
                "connection_counterpart_missing",
                extra={"request_id": str(request.id)},
            )
            continue
        joined.append(
            PendingRequest(
                id=request.id,
                status=request.status,
                created_at=request.created_at,
                counterpart=counterpart,
            )
        )
    return joined


def list_incoming(repo: CofounderRepository, user_id: UUID) -> list[PendingRequest]:
    """Pending requests addressed to ``user_id``, with the sender profile."""
    requests = repo.list_requests(target_id=user_id, status=ConnectionStatus.pending)
    return _join_pending(repo, user_id, requests)


def list_outgoing(repo: CofounderRepository, user_id: UUID) -> list[PendingRequest]:
    """Pending requests sent by ``user_id``, with the receiver profile."""
    requests = repo.list_requests(
        requester_id=user_id, status=ConnectionStatus.pending
    )
    return _join_pending(repo, user_id, requests)


def list_accepted_connections(
    repo: CofounderRepository, user_id: UUID
) -> list[AcceptedConnection]:
    """Accepted connections from either side, one entry per partner."""
    as_requester = repo.list_requests(
        requester_id=user_id, status=ConnectionStatus.accepted
    )
    as_target = repo.list_requests(target_id=user_id, status=ConnectionStatus.accepted)
    requests = as_requester + as_target

    profiles = repo.get_profiles({r.counterpart_of(user_id) for r in requests})

    connections: list[AcceptedConnection] = []
    seen: set[UUID] = set()
    for request in requests:
        partner_id = request.counterpart_of(user_id)
        partner = profiles.get(partner_id)
        # Partner profile may have been deleted
        if partner is None or partner_id in seen:
            continue
        seen.add(partner_id)
        connections.append(AcceptedConnection(id=request.id, partner=partner))
    return connections
