from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from contentkosh_api.db.models.enums import UserRole
from .common import CamelModel


class PermissionRead(CamelModel):
    id: int
    code: str
    description: Optional[str] = None


class PermissionAssign(CamelModel):
    """Assign, replace or remove permission codes for a user."""
    user_id: Optional[int] = Field(None, description="Target user")
    permissions: Optional[List[str]] = Field(None, description="Permission codes")


class PermissionUser(CamelModel):
    id: int
    role: UserRole


class UserPermissions(CamelModel):
    user: PermissionUser
    permissions: List[str] = Field(default_factory=list)
