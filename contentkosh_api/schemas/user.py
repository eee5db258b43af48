from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from contentkosh_api.db.models.enums import Status, UserRole
from .common import CamelModel


def _assignable_role(cls, v: Optional[UserRole]) -> Optional[UserRole]:
    if v == UserRole.SUPERADMIN:
        raise ValueError("Role must be one of ADMIN, TEACHER, STUDENT, USER")
    return v


class UserRead(CamelModel):
    """User read model. The password hash is never exposed."""
    id: int = Field(..., description="User ID")
    email: EmailStr = Field(..., description="User email")
    name: str = Field(..., description="Full name")
    mobile: Optional[str] = Field(None)
    role: UserRole = Field(..., description="Role")
    status: Status = Field(..., description="Account status")
    business_id: Optional[int] = Field(None, description="Owning business")
    created_at: datetime = Field(..., description="Created timestamp")
    updated_at: datetime = Field(..., description="Updated timestamp")


class UserCreate(CamelModel):
    """Admin create user payload; the user joins the business in the path."""
    name: str = Field(..., description="Full name")
    email: EmailStr = Field(..., description="Email")
    mobile: Optional[str] = Field(None, description="Mobile number")
    password: str = Field(..., description="Password")
    role: UserRole = Field(..., description="Role")

    _role_not_superadmin = field_validator("role")(_assignable_role)

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("User name is required")
        return v

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UserUpdate(CamelModel):
    """Admin update user payload."""
    name: Optional[str] = Field(None)
    mobile: Optional[str] = Field(None)
    role: Optional[UserRole] = Field(None)
    status: Optional[Status] = Field(None)

    _role_not_superadmin = field_validator("role")(_assignable_role)

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v
