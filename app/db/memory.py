"""In-memory implementation of ``CofounderRepository``.

Used by the test suite and for local development with
``STORAGE_BACKEND=memory``.  A single ``threading.Lock`` guards every write
so the (requester, target) uniqueness check and the pending-status check
happen atomically with the write that depends on them.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from app.core.exceptions import DuplicateRequest
from app.models.connection import ConnectionRequest
from app.models.enums import ConnectionStatus
from app.models.message import ConnectionMessage
from app.models.profile import UserProfile


class InMemoryRepository:
    """Dictionary-backed store; profiles keep insertion order."""

    def __init__(self, profiles: Iterable[UserProfile] = ()) -> None:
        self._lock = threading.Lock()
        self._profiles: dict[UUID, UserProfile] = {}
        self._requests: dict[UUID, ConnectionRequest] = {}
        self._pairs: set[tuple[UUID, UUID]] = set()
        self._messages: list[ConnectionMessage] = []
        for profile in profiles:
            self.add_profile(profile)

    def add_profile(self, profile: UserProfile) -> UserProfile:
        """Insert or replace a profile (stands in for signup)."""
        with self._lock:
            self._profiles[profile.id] = profile
        return profile

    # --- Profiles ---

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self._profiles.get(user_id)

    def get_profiles(self, user_ids: Iterable[UUID]) -> dict[UUID, UserProfile]:
        return {
            uid: self._profiles[uid] for uid in user_ids if uid in self._profiles
        }

    def list_profiles(self, exclude_id: UUID, limit: int) -> list[UserProfile]:
        others = [p for p in self._profiles.values() if p.id != exclude_id]
        return others[:limit]

    def update_profile(
        self, user_id: UUID, changes: dict[str, Any]
    ) -> UserProfile | None:
        with self._lock:
            current = self._profiles.get(user_id)
            if current is None:
                return None
            updated = UserProfile(**{**current.model_dump(), **changes})
            self._profiles[user_id] = updated
            return updated

    # --- Connection requests ---

    def get_request(self, request_id: UUID) -> ConnectionRequest | None:
        return self._requests.get(request_id)

    def insert_request(
        self,
        requester_id: UUID,
        target_id: UUID,
        match_score: int | None = None,
    ) -> ConnectionRequest:
        with self._lock:
            if (requester_id, target_id) in self._pairs:
                raise DuplicateRequest("Request already sent!")
            request = ConnectionRequest(
                id=uuid4(),
                requester_id=requester_id,
                target_id=target_id,
                status=ConnectionStatus.pending,
                match_score=match_score,
                created_at=datetime.now(timezone.utc),
            )
            self._requests[request.id] = request
            self._pairs.add((requester_id, target_id))
            return request

    def transition_request(
        self,
        request_id: UUID,
        from_status: ConnectionStatus,
        to_status: ConnectionStatus,
    ) -> ConnectionRequest | None:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != from_status:
                return None
            updated = current.model_copy(update={"status": to_status})
            self._requests[request_id] = updated
            return updated

    def list_requests(
        self,
        *,
        requester_id: UUID | None = None,
        target_id: UUID | None = None,
        status: ConnectionStatus | None = None,
    ) -> list[ConnectionRequest]:
        return [
            r
            for r in self._requests.values()
            if (requester_id is None or r.requester_id == requester_id)
            and (target_id is None or r.target_id == target_id)
            and (status is None or r.status == status)
        ]

    def list_requests_between(
        self, user_id: UUID, counterpart_ids: Iterable[UUID]
    ) -> list[ConnectionRequest]:
        ids = set(counterpart_ids)
        outgoing = [
            r for r in self._requests.values()
            if r.requester_id == user_id and r.target_id in ids
        ]
        incoming = [
            r for r in self._requests.values()
            if r.target_id == user_id and r.requester_id in ids
        ]
        return outgoing + incoming

    # --- Messages ---

    def insert_message(
        self, connection_id: UUID, sender_id: UUID, content: str
    ) -> ConnectionMessage:
        message = ConnectionMessage(
            id=uuid4(),
            connection_id=connection_id,
            sender_id=sender_id,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._messages.append(message)
        return message

    def list_messages(self, connection_id: UUID) -> list[ConnectionMessage]:
        return sorted(
            (m for m in self._messages if m.connection_id == connection_id),
            key=lambda m: m.created_at,
        )
