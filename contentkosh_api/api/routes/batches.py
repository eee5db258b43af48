from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core import access
from contentkosh_api.core.deps import batch_access, course_access, get_current_user, require_roles, user_access
from contentkosh_api.core.query import ListOptions, list_options
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.academics import Course
from contentkosh_api.db.models.batch import Batch
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.models.security import User
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.batch import (
    BatchCreate,
    BatchMembershipRequest,
    BatchRead,
    BatchUpdate,
    BatchUserRead,
    BatchUserUpdate,
    BatchWithUsers,
)
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.services.batches import BatchService

router = APIRouter(prefix="/batches", tags=["Batches"])


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[BatchRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create batch",
    description="Create a batch under a course of the caller's business. Code names are globally unique.",
)
async def create_batch(
    payload: BatchCreate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    batch = await BatchService(session).create_batch(payload, user)
    return ok(BatchRead.model_validate(batch), "Batch created successfully")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ApiResponse[List[BatchRead]],
    summary="List active batches",
    description=(
        "Active batches visible to the caller: every business for SUPERADMIN, the own business "
        "for ADMIN, and active memberships for TEACHER and STUDENT."
    ),
)
async def list_active_batches(
    user: CurrentUser = Depends(get_current_user),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    batches = await BatchService(session).list_active(user, options)
    return ok([BatchRead.model_validate(b) for b in batches])


# PUBLIC_INTERFACE
@router.post(
    "/add-user",
    response_model=ApiResponse[BatchUserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add user to batch",
    description="Only TEACHER and STUDENT users of the batch's business can be added.",
)
async def add_user_to_batch(
    payload: BatchMembershipRequest,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await access.resolve_batch_access(session, payload.batch_id, user)
    member = await BatchService(session).add_user(payload.batch_id, payload.user_id)
    return ok(BatchUserRead.model_validate(member), "User added to batch successfully")


# PUBLIC_INTERFACE
@router.post(
    "/remove-user",
    response_model=ApiResponse[None],
    summary="Remove user from batch",
)
async def remove_user_from_batch(
    payload: BatchMembershipRequest,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await access.resolve_batch_access(session, payload.batch_id, user)
    await BatchService(session).remove_user(payload.batch_id, payload.user_id)
    return ok(None, "User removed from batch successfully")


# PUBLIC_INTERFACE
@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[List[BatchRead]],
    summary="List batches of course",
)
async def list_batches_by_course(
    active: bool = Query(default=False, description="Only return active batches"),
    user: CurrentUser = Depends(get_current_user),
    course: Course = Depends(course_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    batches = await BatchService(session).list_by_course(course.id, user, active_only=active, options=options)
    return ok([BatchRead.model_validate(b) for b in batches])


# PUBLIC_INTERFACE
@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[List[BatchRead]],
    summary="List batches of user",
)
async def list_batches_for_user(
    target: User = Depends(user_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    batches = await BatchService(session).list_for_user(target.id, options)
    return ok([BatchRead.model_validate(b) for b in batches])


# PUBLIC_INTERFACE
@router.get("/{batch_id}", response_model=ApiResponse[BatchRead], summary="Get batch")
async def get_batch(batch: Batch = Depends(batch_access)) -> ApiResponse:
    return ok(BatchRead.model_validate(batch))


# PUBLIC_INTERFACE
@router.get(
    "/{batch_id}/with-users",
    response_model=ApiResponse[BatchWithUsers],
    summary="Get batch with members",
)
async def get_batch_with_users(
    batch: Batch = Depends(batch_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    loaded = await BatchService(session).get_batch(batch.id, with_users=True)
    return ok(BatchWithUsers.model_validate(loaded))


# PUBLIC_INTERFACE
@router.put(
    "/{batch_id}",
    response_model=ApiResponse[BatchRead],
    summary="Update batch",
)
async def update_batch(
    payload: BatchUpdate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    batch: Batch = Depends(batch_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    updated = await BatchService(session).update_batch(batch.id, payload, user)
    return ok(BatchRead.model_validate(updated), "Batch updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{batch_id}",
    response_model=ApiResponse[None],
    summary="Delete batch",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def delete_batch(
    batch: Batch = Depends(batch_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await BatchService(session).delete_batch(batch.id)
    return ok(None, "Batch deleted successfully")


# PUBLIC_INTERFACE
@router.get(
    "/{batch_id}/users",
    response_model=ApiResponse[List[BatchUserRead]],
    summary="List batch members",
)
async def list_batch_users(
    role: Optional[UserRole] = Query(default=None, description="Filter members by role"),
    batch: Batch = Depends(batch_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    members = await BatchService(session).list_members(batch.id, role=role)
    return ok([BatchUserRead.model_validate(m) for m in members])


# PUBLIC_INTERFACE
@router.put(
    "/{batch_id}/users/{user_id}",
    response_model=ApiResponse[BatchUserRead],
    summary="Update batch membership",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def update_batch_user(
    payload: BatchUserUpdate,
    user_id: int = Path(..., gt=0, description="User ID"),
    batch: Batch = Depends(batch_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    member = await BatchService(session).update_member(batch.id, user_id, payload.is_active)
    return ok(BatchUserRead.model_validate(member), "Batch user updated successfully")
