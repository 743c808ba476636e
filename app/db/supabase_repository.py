"""Supabase-backed implementation of ``CofounderRepository``.

Table layout (see ``supabase/migrations``):

- ``users``: one row per profile.
- ``cofounder_matches``: ``user_id`` is the requester, ``matched_user_id``
  the target; ``UNIQUE (user_id, matched_user_id)``.
- ``messages``: messages on accepted connections.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from app.core.constants import (
    MATCHES_TABLE,
    MESSAGES_TABLE,
    PROFILE_COLUMNS,
    UNIQUE_VIOLATION_CODE,
    USERS_TABLE,
)
from app.core.exceptions import DuplicateRequest
from app.models.connection import ConnectionRequest
from app.models.enums import ConnectionStatus
from app.models.message import ConnectionMessage
from app.models.profile import UserProfile

logger = logging.getLogger(__name__)


def _to_request(row: dict[str, Any]) -> ConnectionRequest:
    """Map a ``cofounder_matches`` row onto ``ConnectionRequest``."""
    return ConnectionRequest(
        id=row["id"],
        requester_id=row["user_id"],
        target_id=row["matched_user_id"],
        status=row["status"],
        match_score=row.get("match_score"),
        created_at=row["created_at"],
    )


class SupabaseRepository:
    """Reads and writes through a Supabase (PostgREST) client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        result = (
            self._client.table(USERS_TABLE)
            .select(PROFILE_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return UserProfile(**rows[0]) if rows else None

    def get_profiles(self, user_ids: Iterable[UUID]) -> dict[UUID, UserProfile]:
        ids = [str(uid) for uid in user_ids]
        if not ids:
            return {}
        result = (
            self._client.table(USERS_TABLE)
            .select(PROFILE_COLUMNS)
            .in_("id", ids)
            .execute()
        )
        profiles = [UserProfile(**row) for row in result.data or []]
        return {p.id: p for p in profiles}

    def list_profiles(self, exclude_id: UUID, limit: int) -> list[UserProfile]:
        result = (
            self._client.table(USERS_TABLE)
            .select(PROFILE_COLUMNS)
            .neq("id", str(exclude_id))
            .order("created_at")
            .limit(limit)
            .execute()
        )
        return [UserProfile(**row) for row in result.data or []]

    def update_profile(
        self, user_id: UUID, changes: dict[str, Any]
    ) -> UserProfile | None:
        if not changes:
            return self.get_profile(user_id)
        result = (
            self._client.table(USERS_TABLE)
            .update(changes)
            .eq("id", str(user_id))
            .execute()
        )
        rows = result.data or []
        return UserProfile(**rows[0]) if rows else None

    # ------------------------------------------------------------------
    # Connection requests
    # ------------------------------------------------------------------

    def get_request(self, request_id: UUID) -> ConnectionRequest | None:
        result = (
            self._client.table(MATCHES_TABLE)
            .select("*")
            .eq("id", str(request_id))
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return _to_request(rows[0]) if rows else None

    def insert_request(
        self,
        requester_id: UUID,
        target_id: UUID,
        match_score: int | None = None,
    ) -> ConnectionRequest:
        payload = {
            "user_id": str(requester_id),
            "matched_user_id": str(target_id),
            "status": ConnectionStatus.pending.value,
            "match_score": match_score,
        }
        try:
            result = self._client.table(MATCHES_TABLE).insert(payload).execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION_CODE:
                raise DuplicateRequest("Request already sent!") from exc
            raise
        return _to_request(result.data[0])

    def transition_request(
        self,
        request_id: UUID,
        from_status: ConnectionStatus,
        to_status: ConnectionStatus,
    ) -> ConnectionRequest | None:
        # Matches no row once the status has left from_status
        result = (
            self._client.table(MATCHES_TABLE)
            .update({"status": to_status.value})
            .eq("id", str(request_id))
            .eq("status", from_status.value)
            .execute()
        )
        rows = result.data or []
        return _to_request(rows[0]) if rows else None

    def list_requests(
        self,
        *,
        requester_id: UUID | None = None,
        target_id: UUID | None = None,
        status: ConnectionStatus | None = None,
    ) -> list[ConnectionRequest]:
        query = self._client.table(MATCHES_TABLE).select("*")
        if requester_id is not None:
            query = query.eq("user_id", str(requester_id))
        if target_id is not None:
            query = query.eq("matched_user_id", str(target_id))
        if status is not None:
            query = query.eq("status", status.value)
        result = query.order("created_at").execute()
        return [_to_request(row) for row in result.data or []]

    def list_requests_between(
        self, user_id: UUID, counterpart_ids: Iterable[UUID]
    ) -> list[ConnectionRequest]:
        """Requests in both directions, outgoing ones first."""
        ids = [str(cid) for cid in counterpart_ids]
        if not ids:
            return []
        outgoing = (
            self._client.table(MATCHES_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .in_("matched_user_id", ids)
            .execute()
        )
        incoming = (
            self._client.table(MATCHES_TABLE)
            .select("*")
            .eq("matched_user_id", str(user_id))
            .in_("user_id", ids)
            .execute()
        )
        rows = (outgoing.data or []) + (incoming.data or [])
        return [_to_request(row) for row in rows]

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def insert_message(
        self, connection_id: UUID, sender_id: UUID, content: str
    ) -> ConnectionMessage:
        result = (
            self._client.table(MESSAGES_TABLE)
            .insert(
                {
                    "connection_id": str(connection_id),
                    "sender_id": str(sender_id),
                    "content": content,
                }
            )
            .execute()
        )
        return ConnectionMessage(**result.data[0])

    def list_messages(self, connection_id: UUID) -> list[ConnectionMessage]:
        result = (
            self._client.table(MESSAGES_TABLE)
            .select("*")
            .eq("connection_id", str(connection_id))
            .order("created_at")
            .execute()
        )
        return [ConnectionMessage(**row) for row in result.data or []]
