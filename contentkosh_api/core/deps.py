from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core import access
from contentkosh_api.core.errors import ForbiddenError, UnauthorizedError
from contentkosh_api.core.logging import business_id_var, user_id_var
from contentkosh_api.core.security import CurrentUser, decode_access_token
from contentkosh_api.db.models.academics import Course, Exam
from contentkosh_api.db.models.batch import Batch
from contentkosh_api.db.models.business import Business
from contentkosh_api.db.models.content import Content
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.models.security import User
from contentkosh_api.db.session import get_async_session
from contentkosh_api.services.permissions import PermissionService

logger = logging.getLogger(__name__)

# Bearer scheme (used by docs); missing headers are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Resolve the caller from the Bearer access token.

    The token is verified locally; no database round trip is made. Account
    status is re-checked when the refresh token is exchanged.

    Raises:
        UnauthorizedError: 401 when the header is missing or the token is invalid/expired.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")
    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token")
    try:
        user = CurrentUser.from_claims(claims)
    except (KeyError, TypeError, ValueError):
        logger.warning("Access token carried malformed claims")
        raise UnauthorizedError("Invalid or expired token")

    user_id_var.set(str(user.id))
    if user.business_id is not None:
        business_id_var.set(str(user.business_id))
    return user


# PUBLIC_INTERFACE
def require_roles(*roles: UserRole) -> Callable[..., CurrentUser]:
    """
    Dependency factory enforcing that the caller has one of the given roles.
    SUPERADMIN passes every role gate.
    """

    async def _checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.is_superadmin or user.role in roles:
            return user
        raise ForbiddenError("Forbidden")

    return _checker


# PUBLIC_INTERFACE
def require_permission(code: str) -> Callable[..., CurrentUser]:
    """
    Dependency factory admitting ADMIN/SUPERADMIN callers and any user
    explicitly granted the permission code.
    """

    async def _checker(
        user: CurrentUser = Depends(get_current_user),
        session: AsyncSession = Depends(get_async_session),
    ) -> CurrentUser:
        if user.is_admin:
            return user
        if await PermissionService(session).user_has_permission(user.id, code):
            return user
        raise ForbiddenError(f"Missing required permission: {code}")

    return _checker


# Resource access dependencies. Path parameter names match the route templates.

# PUBLIC_INTERFACE
async def business_access(
    business_id: int = Path(..., gt=0, description="Business ID"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Business:
    return await access.resolve_business_access(session, business_id, user)


# PUBLIC_INTERFACE
async def exam_access(
    exam_id: int = Path(..., gt=0, description="Exam ID"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Exam:
    return await access.resolve_exam_access(session, exam_id, user)


# PUBLIC_INTERFACE
async def course_access(
    course_id: int = Path(..., gt=0, description="Course ID"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Course:
    return await access.resolve_course_access(session, course_id, user)


# PUBLIC_INTERFACE
async def batch_access(
    batch_id: int = Path(..., gt=0, description="Batch ID"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Batch:
    return await access.resolve_batch_access(session, batch_id, user)


# PUBLIC_INTERFACE
async def content_access(
    content_id: int = Path(..., gt=0, description="Content ID"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> Content:
    return await access.resolve_content_access(session, content_id, user)


# PUBLIC_INTERFACE
async def user_access(
    user_id: int = Path(..., gt=0, description="User ID"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> User:
    return await access.resolve_user_access(session, user_id, user)
