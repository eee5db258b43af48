from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from .common import CamelModel


class AnnouncementCreate(CamelModel):
    """Announcement for the caller's business."""
    heading: str = Field(..., max_length=200)
    content: str = Field(...)
    start_date: datetime = Field(..., description="Visible from")
    end_date: datetime = Field(..., description="Visible until")
    is_active: bool = Field(True)
    visible_to_admins: bool = Field(True)
    visible_to_teachers: bool = Field(True)
    visible_to_students: bool = Field(True)

    @field_validator("heading")
    @classmethod
    def _heading(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Heading is required")
        return v

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v

    @model_validator(mode="after")
    def _window(self) -> "AnnouncementCreate":
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class AnnouncementUpdate(CamelModel):
    heading: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)
    is_active: Optional[bool] = Field(None)
    visible_to_admins: Optional[bool] = Field(None)
    visible_to_teachers: Optional[bool] = Field(None)
    visible_to_students: Optional[bool] = Field(None)


class AnnouncementRead(CamelModel):
    id: int
    business_id: int
    heading: str
    content: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    visible_to_admins: bool
    visible_to_teachers: bool
    visible_to_students: bool
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
