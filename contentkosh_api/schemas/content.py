from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from contentkosh_api.db.models.enums import ContentType, Status
from .common import CamelModel


class ContentUpdate(CamelModel):
    """Only the title and status of uploaded content can change."""
    title: Optional[str] = Field(None)
    status: Optional[Status] = Field(None)

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v


class ContentRead(CamelModel):
    id: int
    batch_id: int
    title: str
    type: ContentType
    file_path: str
    file_size: int
    status: Status
    uploaded_by: int
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
