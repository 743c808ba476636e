"""Pydantic models for the ``cofounder_matches`` table.

The table stores the requester in ``user_id`` and the target in
``matched_user_id``; the models use ``requester_id`` / ``target_id`` and
the Supabase repository translates between the two.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ConnectionDecision, ConnectionStatus
from app.models.profile import UserProfile


class ConnectionRequest(BaseModel):
    """Full connection request record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    requester_id: UUID
    target_id: UUID
    status: ConnectionStatus
    match_score: int | None = None
    created_at: datetime

    def counterpart_of(self, user_id: UUID) -> UUID:
        """Return the participant on the other side from ``user_id``."""
        return self.target_id if self.requester_id == user_id else self.requester_id

    def involves(self, user_id: UUID) -> bool:
        return user_id in (self.requester_id, self.target_id)


class PendingRequest(BaseModel):
    """A pending request joined with the profile on the other side."""
    id: UUID
    status: ConnectionStatus
    created_at: datetime
    counterpart: UserProfile


class AcceptedConnection(BaseModel):
    """An accepted connection as seen by one participant."""
    id: UUID
    status: ConnectionStatus = ConnectionStatus.accepted
    partner: UserProfile


# --- API payloads ---

class CreateRequestBody(BaseModel):
    """Body for POST /api/matches."""
    model_config = ConfigDict(populate_by_name=True)

    requester_id: UUID = Field(alias="userId")
    target_id: UUID = Field(alias="matchedUserId")


class RespondBody(BaseModel):
    """Body for POST /api/matches/{id}/respond."""
    status: ConnectionDecision


class CreateRequestResponse(BaseModel):
    success: bool = True
    match: ConnectionRequest


class RespondResponse(BaseModel):
    success: bool = True
    request: ConnectionRequest


class RequestsResponse(BaseModel):
    """Pending requests: ``requests`` received, ``sent`` outgoing."""
    success: bool = True
    requests: list[PendingRequest] = []
    sent: list[PendingRequest] = []


class ConnectionsResponse(BaseModel):
    success: bool = True
    connections: list[AcceptedConnection] = []
