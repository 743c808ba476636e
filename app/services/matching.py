"""Co-founder match feed.

Combines the User Directory, the scorer and the connection registry into a
ranked list of candidates for one viewer.  Read-only.
"""

from __future__ import annotations

import logging
from uuid import UUID

from app.core.exceptions import NotFound
from app.db.repository import CofounderRepository
from app.models.connection import ConnectionRequest
from app.models.match import MatchCandidate
from app.services.scoring import score

logger = logging.getLogger(__name__)


def _index_requests(
    viewer_id: UUID, requests: list[ConnectionRequest]
) -> dict[UUID, ConnectionRequest]:
    """Map counterpart id -> request; the viewer's outgoing request wins."""
    by_counterpart: dict[UUID, ConnectionRequest] = {}
    for request in requests:
        counterpart = request.counterpart_of(viewer_id)
        existing = by_counterpart.get(counterpart)
        if existing is None or (
            existing.requester_id != viewer_id and request.requester_id == viewer_id
        ):
            by_counterpart[counterpart] = request
    return by_counterpart


def build_feed(
    repo: CofounderRepository,
    viewer_id: UUID,
    candidate_pool_size: int,
) -> list[MatchCandidate]:
    """Return up to ``candidate_pool_size`` candidates ranked by score.

    Ties keep the directory's retrieval order.  Raises ``NotFound`` when the
    viewer has no profile.
    """
    viewer = repo.get_profile(viewer_id)
    if viewer is None:
        raise NotFound(f"User {viewer_id} not found")

    pool = [
        p for p in repo.list_profiles(viewer_id, candidate_pool_size)
        if p.id != viewer_id
    ]
    requests = _index_requests(
        viewer_id, repo.list_requests_between(viewer_id, [p.id for p in pool])
    )

    candidates: list[MatchCandidate] = []
    for profile in pool:
        request = requests.get(profile.id)
        candidates.append(
            MatchCandidate(
                **profile.model_dump(),
                match_score=score(viewer, profile),
                connection_status=request.status if request else None,
                connection_request_id=request.id if request else None,
            )
        )

    # sorted() is stable, so equal scores keep retrieval order
    ranked = sorted(candidates, key=lambda c: -c.match_score)

    logger.debug(
        "match_feed_built",
        extra={
            "viewer_id": str(viewer_id),
            "pool_size": len(pool),
            "with_connection": len(requests),
        },
    )
    return ranked
