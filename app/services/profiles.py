"""User Directory reads and profile updates."""

from __future__ import annotations

import logging
from uuid import UUID

from app.core.exceptions import NotFound
from app.db.repository import CofounderRepository
from app.models.profile import ProfileUpdate, UserProfile

logger = logging.getLogger(__name__)


def get_profile(repo: CofounderRepository, user_id: UUID) -> UserProfile:
    profile = repo.get_profile(user_id)
    if profile is None:
        raise NotFound(f"User {user_id} not found")
    return profile


def update_profile(
    repo: CofounderRepository, user_id: UUID, update: ProfileUpdate
) -> UserProfile:
    """Write the fields present in ``update`` and return the new profile."""
    changes = update.changes()
    profile = repo.update_profile(user_id, changes)
    if profile is None:
        raise NotFound(f"User {user_id} not found")
    logger.info(
        "profile_updated",
        extra={"user_id": str(user_id), "fields": sorted(changes)},
    )
    return profile
