"""
Pydantic schemas for message requests and responses.
Messages are written by a user about a flat.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageCreate(BaseModel):
    """Schema for sending a message about a flat."""

    model_config = ConfigDict(populate_by_name=True)

    flat_id: str = Field(..., min_length=1, alias="flatID")
    content: str = Field(..., min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be empty or whitespace only")
        return v.strip()


class MessageResponse(BaseModel):
    """A stored message."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sender_id: str = Field(..., alias="senderId")
    flat_id: str = Field(..., alias="flatID")
    content: str
    created_at: Optional[str] = Field(None, alias="createdAt")


class MessageListResponse(BaseModel):
    items: List[MessageResponse]
    count: int
