"""Storage interface for profiles, connection requests and messages.

Services receive a ``CofounderRepository`` instead of reaching for a global
client, so the backend can be swapped (Supabase in production, in-memory for
tests and local development).  Routers obtain one through
``Depends(get_repository)``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol
from uuid import UUID

from app.core.config import settings
from app.models.connection import ConnectionRequest
from app.models.enums import ConnectionStatus
from app.models.message import ConnectionMessage
from app.models.profile import UserProfile

logger = logging.getLogger(__name__)


class CofounderRepository(Protocol):
    """Capabilities the matching services need from storage.

    ``insert_request`` must enforce uniqueness of the ordered
    (requester, target) pair atomically and raise ``DuplicateRequest`` on a
    violation.  ``transition_request`` must be a single conditional update
    that only succeeds while the record is still in ``from_status``.
    """

    # --- Profiles ---

    def get_profile(self, user_id: UUID) -> UserProfile | None: ...

    def get_profiles(self, user_ids: Iterable[UUID]) -> dict[UUID, UserProfile]: ...

    def list_profiles(self, exclude_id: UUID, limit: int) -> list[UserProfile]: ...

    def update_profile(
        self, user_id: UUID, changes: dict[str, Any]
    ) -> UserProfile | None: ...

    # --- Connection requests ---

    def get_request(self, request_id: UUID) -> ConnectionRequest | None: ...

    def insert_request(
        self,
        requester_id: UUID,
        target_id: UUID,
        match_score: int | None = None,
    ) -> ConnectionRequest: ...

    def transition_request(
        self,
        request_id: UUID,
        from_status: ConnectionStatus,
        to_status: ConnectionStatus,
    ) -> ConnectionRequest | None: ...

    def list_requests(
        self,
        *,
        requester_id: UUID | None = None,
        target_id: UUID | None = None,
        status: ConnectionStatus | None = None,
    ) -> list[ConnectionRequest]: ...

    def list_requests_between(
        self, user_id: UUID, counterpart_ids: Iterable[UUID]
    ) -> list[ConnectionRequest]: ...

    # --- Messages ---

    def insert_message(
        self, connection_id: UUID, sender_id: UUID, content: str
    ) -> ConnectionMessage: ...

    def list_messages(self, connection_id: UUID) -> list[ConnectionMessage]: ...


_memory_repository: CofounderRepository | None = None


def get_repository() -> CofounderRepository:
    """FastAPI dependency returning the configured repository."""
    global _memory_repository
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        if _memory_repository is None:
            from app.db.memory import InMemoryRepository

            logger.warning("storage_backend_memory", extra={"backend": backend})
            _memory_repository = InMemoryRepository()
        return _memory_repository

    from app.db.supabase import get_supabase
    from app.db.supabase_repository import SupabaseRepository

    return SupabaseRepository(get_supabase())
