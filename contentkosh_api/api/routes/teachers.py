from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.deps import get_current_user, require_roles
from contentkosh_api.core.query import ListOptions, list_options
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.schemas.teacher import TeacherCreate, TeacherRead, TeacherUpdate
from contentkosh_api.services.teachers import TeacherService

router = APIRouter(prefix="/teachers", tags=["Teachers"])

TeacherIdPath = Path(..., gt=0, description="Teacher ID")


# PUBLIC_INTERFACE
@router.post(
    "/profile",
    response_model=ApiResponse[TeacherRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create teacher profile",
    description="Create the teacher profile of an existing user of the business.",
)
async def create_teacher_profile(
    payload: TeacherCreate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    teacher = await TeacherService(session).create_teacher(payload, user)
    return ok(TeacherRead.model_validate(teacher), "Teacher profile created successfully")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ApiResponse[List[TeacherRead]],
    summary="List teachers",
    description="Teacher profiles of the caller's business.",
)
async def list_teachers(
    user: CurrentUser = Depends(get_current_user),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    teachers = await TeacherService(session).list_teachers(user, options)
    return ok([TeacherRead.model_validate(t) for t in teachers])


# PUBLIC_INTERFACE
@router.get("/{teacher_id}", response_model=ApiResponse[TeacherRead], summary="Get teacher profile")
async def get_teacher_profile(
    teacher_id: int = TeacherIdPath,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    teacher = await TeacherService(session).get_teacher(teacher_id, user)
    return ok(TeacherRead.model_validate(teacher))


# PUBLIC_INTERFACE
@router.put(
    "/{teacher_id}",
    response_model=ApiResponse[TeacherRead],
    summary="Update teacher profile",
    description="Allowed for admins of the profile's business and for the teacher themself.",
)
async def update_teacher_profile(
    payload: TeacherUpdate,
    teacher_id: int = TeacherIdPath,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    teacher = await TeacherService(session).update_teacher(teacher_id, payload, user)
    return ok(TeacherRead.model_validate(teacher), "Teacher profile updated successfully")
