"""Pydantic models for the ``messages`` table."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import MAX_MESSAGE_LENGTH


class MessageCreate(BaseModel):
    """Body for POST /api/messages."""
    model_config = ConfigDict(populate_by_name=True)

    connection_id: UUID = Field(alias="connectionId")
    sender_id: UUID = Field(alias="senderId")
    content: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value


class ConnectionMessage(BaseModel):
    """Full message record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    connection_id: UUID
    sender_id: UUID
    content: str
    created_at: datetime


class MessagesResponse(BaseModel):
    success: bool = True
    messages: list[ConnectionMessage] = []


class MessageResponse(BaseModel):
    success: bool = True
    message: ConnectionMessage
