from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, HttpUrl, field_validator

from .common import CamelModel

_SLUG_RE = re.compile(r"^[a-z0-9-]+$")
_PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")


class _BusinessFields(CamelModel):
    logo_url: Optional[HttpUrl] = Field(None, description="Logo URL")
    tagline: Optional[str] = Field(None, max_length=255)
    contact_number: Optional[str] = Field(None, description="Contact number in E.164 format")
    email: Optional[EmailStr] = Field(None, description="Contact email")
    address: Optional[str] = Field(None)
    youtube_url: Optional[HttpUrl] = Field(None)
    instagram_url: Optional[HttpUrl] = Field(None)
    linkedin_url: Optional[HttpUrl] = Field(None)
    facebook_url: Optional[HttpUrl] = Field(None)

    @field_validator("contact_number")
    @classmethod
    def _phone_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _PHONE_RE.match(v):
            raise ValueError("Phone number must be a valid E.164 format")
        return v

    def to_values(self) -> dict:
        """Column values for the fields that were explicitly set, URLs as plain strings."""
        values = self.model_dump(exclude_unset=True)
        for key, value in list(values.items()):
            if key.endswith("_url") and value is not None:
                values[key] = str(value)
        return values


class BusinessCreate(_BusinessFields):
    """Create business payload."""
    institute_name: str = Field(..., description="Institute name")
    slug: str = Field(..., description="URL-safe unique identifier")

    @field_validator("institute_name")
    @classmethod
    def _institute_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Institute name is required")
        if len(v) > 100:
            raise ValueError("Institute name must be shorter than 100 characters")
        return v

    @field_validator("slug")
    @classmethod
    def _slug(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Slug is required")
        if not _SLUG_RE.match(v):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
        return v


class BusinessUpdate(_BusinessFields):
    """Update business payload."""
    institute_name: Optional[str] = Field(None)
    slug: Optional[str] = Field(None)

    @field_validator("institute_name")
    @classmethod
    def _institute_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Institute name cannot be empty")
        if len(v) > 100:
            raise ValueError("Institute name must be shorter than 100 characters")
        return v

    @field_validator("slug")
    @classmethod
    def _slug(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _SLUG_RE.match(v):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
        return v


class BusinessRead(CamelModel):
    id: int
    institute_name: str
    slug: str
    logo_url: Optional[str] = None
    tagline: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    youtube_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    facebook_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
