"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

MAX_TITLE_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 2000


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    link: HttpUrl
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)


class BookmarkUpdate(BaseModel):
    """Schema for updating an existing bookmark. Only fields that are sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    link: HttpUrl | None = None
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("title", "link", mode="before")
    @classmethod
    def reject_null(cls, v: object) -> object:
        """Title and link are required columns; they may be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    link: str
    description: str | None
    created_at: datetime
    updated_at: datetime
