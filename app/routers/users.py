"""User Directory endpoints: profile read and partial update."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from app.core.exceptions import MatchingError
from app.db.repository import CofounderRepository, get_repository
from app.models.profile import ProfileResponse, ProfileUpdate
from app.services.profiles import get_profile, update_profile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=ProfileResponse)
async def read_profile(
    user_id: UUID,
    repo: CofounderRepository = Depends(get_repository),
) -> ProfileResponse:
    try:
        profile = get_profile(repo, user_id)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "get_profile_failed",
            extra={"user_id": str(user_id), "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to fetch profile") from exc

    return ProfileResponse(user=profile)


@router.put("/{user_id}/profile", response_model=ProfileResponse)
async def write_profile(
    user_id: UUID,
    body: ProfileUpdate,
    repo: CofounderRepository = Depends(get_repository),
) -> ProfileResponse:
    """Update the provided profile fields (stage, bio, skills, location...)."""
    try:
        profile = update_profile(repo, user_id, body)
    except MatchingError:
        raise
    except Exception as exc:
        logger.error(
            "update_profile_failed",
            extra={"user_id": str(user_id), "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to update profile") from exc

    return ProfileResponse(user=profile)
