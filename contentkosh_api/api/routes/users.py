from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.deps import require_roles, user_access
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.models.security import User
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.schemas.user import UserRead, UserUpdate
from contentkosh_api.services.users import UserService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)


# PUBLIC_INTERFACE
@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    summary="Get user",
)
async def get_user(target: User = Depends(user_access)) -> ApiResponse:
    return ok(UserRead.model_validate(target))


# PUBLIC_INTERFACE
@router.put(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    summary="Update user",
    description="Update name, mobile, role or status. Mobile must stay unique.",
)
async def update_user(
    payload: UserUpdate,
    target: User = Depends(user_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    updated = await UserService(session).update_user(target.id, payload)
    return ok(UserRead.model_validate(updated), "User updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{user_id}",
    response_model=ApiResponse[None],
    summary="Delete user",
    description="Soft delete: the user is marked INACTIVE.",
)
async def delete_user(
    target: User = Depends(user_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await UserService(session).delete_user(target.id)
    return ok(None, "User deleted successfully")
