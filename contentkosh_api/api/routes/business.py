from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.deps import business_access, get_current_user, require_roles
from contentkosh_api.core.query import ListOptions, list_options
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.business import Business
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.academics import ExamCreate, ExamRead, ExamUpdate
from contentkosh_api.schemas.business import BusinessCreate, BusinessRead, BusinessUpdate
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.schemas.user import UserCreate, UserRead
from contentkosh_api.services.business import BusinessService
from contentkosh_api.services.exams import ExamService
from contentkosh_api.services.users import UserService

router = APIRouter(prefix="/business", tags=["Business"])

ExamIdPath = Path(..., gt=0, description="Exam ID")


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[BusinessRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create business",
    description="Create a business. The caller becomes a member of it.",
)
async def create_business(
    payload: BusinessCreate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    business = await BusinessService(session).create_business(payload, user)
    return ok(BusinessRead.model_validate(business), "Business created successfully")


# PUBLIC_INTERFACE
@router.get(
    "/slug/{slug}",
    response_model=ApiResponse[BusinessRead],
    summary="Get business by slug",
    dependencies=[Depends(get_current_user)],
)
async def get_business_by_slug(
    slug: str,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    business = await BusinessService(session).get_business_by_slug(slug)
    return ok(BusinessRead.model_validate(business))


# PUBLIC_INTERFACE
@router.get(
    "/{business_id}",
    response_model=ApiResponse[BusinessRead],
    summary="Get business",
)
async def get_business(business: Business = Depends(business_access)) -> ApiResponse:
    return ok(BusinessRead.model_validate(business))


# PUBLIC_INTERFACE
@router.put(
    "/{business_id}",
    response_model=ApiResponse[BusinessRead],
    summary="Update business",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def update_business(
    payload: BusinessUpdate,
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    updated = await BusinessService(session).update_business(business.id, payload)
    return ok(BusinessRead.model_validate(updated), "Business updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{business_id}",
    response_model=ApiResponse[None],
    summary="Delete business",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def delete_business(
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await BusinessService(session).delete_business(business.id)
    return ok(None, "Business deleted successfully")


# Exams of a business

# PUBLIC_INTERFACE
@router.post(
    "/{business_id}/exams",
    response_model=ApiResponse[ExamRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create exam",
    description="Create an exam. Names are unique among the active exams of the business.",
)
async def create_exam(
    payload: ExamCreate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    exam = await ExamService(session).create_exam(business.id, payload, user)
    return ok(ExamRead.model_validate(exam), "Exam created successfully")


# PUBLIC_INTERFACE
@router.get(
    "/{business_id}/exams",
    response_model=ApiResponse[List[ExamRead]],
    summary="List exams",
    description="Active exams of the business. Teachers only see exams they teach a batch in.",
)
async def list_exams(
    user: CurrentUser = Depends(get_current_user),
    business: Business = Depends(business_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    exams = await ExamService(session).list_exams(business.id, user, options)
    return ok([ExamRead.model_validate(e) for e in exams])


# PUBLIC_INTERFACE
@router.get(
    "/{business_id}/exams/{exam_id}",
    response_model=ApiResponse[ExamRead],
    summary="Get exam",
)
async def get_exam(
    exam_id: int = ExamIdPath,
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    exam = await ExamService(session).get_exam(business.id, exam_id)
    return ok(ExamRead.model_validate(exam))


# PUBLIC_INTERFACE
@router.put(
    "/{business_id}/exams/{exam_id}",
    response_model=ApiResponse[ExamRead],
    summary="Update exam",
)
async def update_exam(
    payload: ExamUpdate,
    exam_id: int = ExamIdPath,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    exam = await ExamService(session).update_exam(business.id, exam_id, payload, user)
    return ok(ExamRead.model_validate(exam), "Exam updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{business_id}/exams/{exam_id}",
    response_model=ApiResponse[None],
    summary="Delete exam",
    description="Soft delete: the exam is marked INACTIVE.",
)
async def delete_exam(
    exam_id: int = ExamIdPath,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await ExamService(session).delete_exam(business.id, exam_id, user)
    return ok(None, "Exam deleted successfully")


# Users of a business

# PUBLIC_INTERFACE
@router.post(
    "/{business_id}/users",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create user in business",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def create_business_user(
    payload: UserCreate,
    business: Business = Depends(business_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    created = await UserService(session).create_user(business.id, payload)
    return ok(UserRead.model_validate(created), "User created successfully")


# PUBLIC_INTERFACE
@router.get(
    "/{business_id}/users",
    response_model=ApiResponse[List[UserRead]],
    summary="List users of business",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def list_business_users(
    role: Optional[UserRole] = Query(default=None, description="Filter by role"),
    business: Business = Depends(business_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    users = await UserService(session).list_users(business.id, role=role, options=options)
    return ok([UserRead.model_validate(u) for u in users])
