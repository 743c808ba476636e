"""Pydantic models for the ``users`` table (the User Directory).

Only the profile columns read by matching are modelled; credentials and
e-mail live with the identity provider.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class UserProfile(BaseModel):
    """Full profile record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None = None
    role: str | None = None
    stage: str | None = None
    skills: list[str] = []
    location: str | None = None
    bio: str | None = None

    @field_validator("skills", mode="before")
    @classmethod
    def _null_skills(cls, value: Any) -> Any:
        return [] if value is None else value


class ProfileUpdate(BaseModel):
    """Payload for PUT /api/users/{id}/profile.

    Only fields present in the request body are written.
    """
    name: str | None = None
    role: str | None = None
    stage: str | None = None
    bio: str | None = None
    skills: list[str] | None = None
    location: str | None = None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly provided fields as a column -> value map.

        ``skills`` is a NOT NULL column, so an explicit null leaves it as is.
        """
        fields = self.model_dump(exclude_unset=True)
        if fields.get("skills", []) is None:
            del fields["skills"]
        return fields


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserProfile
