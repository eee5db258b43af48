from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from .common import CamelModel
from .user import UserRead


class BatchCreate(CamelModel):
    """Create batch payload."""
    code_name: str = Field(..., description="Unique code name")
    display_name: str = Field(..., description="Display name")
    start_date: datetime = Field(..., description="Start date")
    end_date: datetime = Field(..., description="End date")
    is_active: bool = Field(True)
    course_id: int = Field(..., gt=0, description="Owning course")

    @field_validator("code_name")
    @classmethod
    def _code_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Batch code name is required")
        return v

    @field_validator("display_name")
    @classmethod
    def _display_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Batch display name is required")
        return v

    @model_validator(mode="after")
    def _dates_ordered(self) -> "BatchCreate":
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class BatchUpdate(CamelModel):
    code_name: Optional[str] = Field(None)
    display_name: Optional[str] = Field(None)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)
    is_active: Optional[bool] = Field(None)

    @field_validator("code_name")
    @classmethod
    def _code_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Batch code name cannot be empty")
        return v

    @field_validator("display_name")
    @classmethod
    def _display_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Batch display name cannot be empty")
        return v


class BatchRead(CamelModel):
    id: int
    code_name: str
    display_name: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    course_id: int
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class BatchUserRead(CamelModel):
    """Batch membership with the member's public profile."""
    id: int
    batch_id: int
    user_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    user: Optional[UserRead] = None


class BatchWithUsers(BatchRead):
    batch_users: List[BatchUserRead] = Field(default_factory=list)


class BatchMembershipRequest(CamelModel):
    """Add or remove a user from a batch."""
    user_id: int = Field(..., gt=0)
    batch_id: int = Field(..., gt=0)


class BatchUserUpdate(CamelModel):
    is_active: bool = Field(..., description="Whether the membership is active")
