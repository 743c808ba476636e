"""Response models for the co-founder match feed.

These are API-layer schemas; nothing here is persisted.
"""

from uuid import UUID

from pydantic import BaseModel

from app.models.enums import ConnectionStatus
from app.models.profile import UserProfile


class MatchCandidate(UserProfile):
    """A profile scored against the viewer, with any existing request."""
    match_score: int
    connection_status: ConnectionStatus | None = None
    connection_request_id: UUID | None = None


class MatchFeedResponse(BaseModel):
    """Full response for GET /api/matches."""
    success: bool = True
    matches: list[MatchCandidate] = []
