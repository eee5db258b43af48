from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core import access
from contentkosh_api.core.deps import get_current_user, require_roles
from contentkosh_api.core.errors import BadRequestError
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.models.security import User
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.schemas.permission import PermissionAssign, PermissionRead, UserPermissions
from contentkosh_api.services.permissions import PermissionService

router = APIRouter(prefix="/permission", tags=["Permissions"])


async def _target_user(session: AsyncSession, payload: PermissionAssign, user: CurrentUser) -> User:
    if not payload.user_id:
        raise BadRequestError("User ID is required")
    return await access.resolve_user_access(session, payload.user_id, user)


def _require_codes(payload: PermissionAssign) -> List[str]:
    if not payload.permissions:
        raise BadRequestError("Permissions are required")
    return payload.permissions


# PUBLIC_INTERFACE
@router.get(
    "/list",
    response_model=ApiResponse[List[PermissionRead]],
    summary="List permissions",
    description="Every permission code known to the system.",
    dependencies=[Depends(get_current_user)],
)
async def list_permissions(session: AsyncSession = Depends(get_async_session)) -> ApiResponse:
    permissions = await PermissionService(session).list_permissions()
    return ok([PermissionRead.model_validate(p) for p in permissions])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ApiResponse[UserPermissions],
    summary="Get user permissions",
    description="Permission codes of a user; defaults to the caller.",
)
async def get_user_permissions(
    user_id: Optional[int] = Query(default=None, gt=0, description="Target user (defaults to caller)"),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    target = await access.resolve_user_access(session, user_id or user.id, user)
    result = await PermissionService(session).get_user_permissions(target)
    return ok(result)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[UserPermissions],
    summary="Assign permissions",
    description="Grant permission codes to a user. Codes the user already holds are skipped.",
)
async def assign_permissions(
    payload: PermissionAssign,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    codes = _require_codes(payload)
    target = await _target_user(session, payload, user)
    result = await PermissionService(session).assign_permissions(target, codes)
    return ok(result, "Permissions assigned successfully")


# PUBLIC_INTERFACE
@router.put(
    "",
    response_model=ApiResponse[UserPermissions],
    summary="Replace permissions",
    description="Replace the user's permissions with exactly the given set, atomically.",
)
async def replace_permissions(
    payload: PermissionAssign,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    if payload.permissions is None:
        raise BadRequestError("Permissions are required")
    target = await _target_user(session, payload, user)
    result = await PermissionService(session).replace_permissions(target, payload.permissions)
    return ok(result, "Permissions updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "",
    response_model=ApiResponse[UserPermissions],
    summary="Remove permissions",
    description="Remove the given codes, or every permission when none are given.",
)
async def remove_permissions(
    payload: PermissionAssign,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    target = await _target_user(session, payload, user)
    result = await PermissionService(session).remove_permissions(target, payload.permissions)
    return ok(result, "Permissions removed successfully")
