from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from contentkosh_api.db.models.enums import UserRole
from .common import CamelModel
from .user import UserRead


class SignupRequest(CamelModel):
    """Self-service signup; the account is created with the USER role."""
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., description="User password")
    name: str = Field(..., description="Full name")
    mobile: Optional[str] = Field(None, description="Mobile number")

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class RegisterRequest(SignupRequest):
    """Registration returning a token pair. Role defaults to ADMIN."""
    role: UserRole = Field(UserRole.ADMIN, description="Account role")

    @field_validator("role")
    @classmethod
    def _no_superadmin(cls, v: UserRole) -> UserRole:
        if v == UserRole.SUPERADMIN:
            raise ValueError("SUPERADMIN accounts cannot be self-registered")
        return v


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=1, description="User password")


class RefreshRequest(CamelModel):
    """Request to rotate a refresh token."""
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


class LogoutRequest(CamelModel):
    refresh_token: Optional[str] = Field(None, description="Refresh token to revoke")


class TokenPair(CamelModel):
    """Access and refresh tokens."""
    token_type: str = Field("bearer", description="Token type, typically 'bearer'")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token")


class AuthResponse(TokenPair):
    """Token pair plus the authenticated user."""
    user: UserRead
