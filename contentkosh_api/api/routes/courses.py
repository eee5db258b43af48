from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.deps import exam_access, get_current_user, require_roles
from contentkosh_api.core.query import ListOptions, list_options
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.academics import Exam
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.academics import (
    CourseCreate,
    CourseRead,
    CourseUpdate,
    SubjectCreate,
    SubjectRead,
    SubjectUpdate,
)
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.services.courses import CourseService, SubjectService

router = APIRouter(prefix="/exams/{exam_id}/courses", tags=["Courses"])

CourseIdPath = Path(..., gt=0, description="Course ID")
SubjectIdPath = Path(..., gt=0, description="Subject ID")
ActiveQuery = Query(default=False, description="Only return ACTIVE records")

admin_only = [Depends(require_roles(UserRole.ADMIN))]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[CourseRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    dependencies=admin_only,
)
async def create_course(
    payload: CourseCreate,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).create_course(exam.id, payload)
    return ok(CourseRead.model_validate(course), "Course created successfully")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ApiResponse[List[CourseRead]],
    summary="List courses",
    description="Courses of the exam. Teachers only see courses they teach a batch in.",
)
async def list_courses(
    active: bool = ActiveQuery,
    user: CurrentUser = Depends(get_current_user),
    exam: Exam = Depends(exam_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    courses = await CourseService(session).list_courses(exam.id, user, active_only=active, options=options)
    return ok([CourseRead.model_validate(c) for c in courses])


# PUBLIC_INTERFACE
@router.get("/{course_id}", response_model=ApiResponse[CourseRead], summary="Get course")
async def get_course(
    course_id: int = CourseIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).get_course(exam.id, course_id)
    return ok(CourseRead.model_validate(course))


# PUBLIC_INTERFACE
@router.put(
    "/{course_id}",
    response_model=ApiResponse[CourseRead],
    summary="Update course",
    dependencies=admin_only,
)
async def update_course(
    payload: CourseUpdate,
    course_id: int = CourseIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).update_course(exam.id, course_id, payload)
    return ok(CourseRead.model_validate(course), "Course updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{course_id}",
    response_model=ApiResponse[None],
    summary="Delete course",
    dependencies=admin_only,
)
async def delete_course(
    course_id: int = CourseIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await CourseService(session).delete_course(exam.id, course_id)
    return ok(None, "Course deleted successfully")


# Subjects of a course. The course is always checked against the exam first.

# PUBLIC_INTERFACE
@router.post(
    "/{course_id}/subjects",
    response_model=ApiResponse[SubjectRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create subject",
    dependencies=admin_only,
)
async def create_subject(
    payload: SubjectCreate,
    course_id: int = CourseIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).get_course(exam.id, course_id)
    subject = await SubjectService(session).create_subject(course.id, payload)
    return ok(SubjectRead.model_validate(subject), "Subject created successfully")


# PUBLIC_INTERFACE
@router.get(
    "/{course_id}/subjects",
    response_model=ApiResponse[List[SubjectRead]],
    summary="List subjects",
)
async def list_subjects(
    course_id: int = CourseIdPath,
    active: bool = ActiveQuery,
    exam: Exam = Depends(exam_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).get_course(exam.id, course_id)
    subjects = await SubjectService(session).list_subjects(course.id, active_only=active, options=options)
    return ok([SubjectRead.model_validate(s) for s in subjects])


# PUBLIC_INTERFACE
@router.get(
    "/{course_id}/subjects/{subject_id}",
    response_model=ApiResponse[SubjectRead],
    summary="Get subject",
)
async def get_subject(
    course_id: int = CourseIdPath,
    subject_id: int = SubjectIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).get_course(exam.id, course_id)
    subject = await SubjectService(session).get_subject(course.id, subject_id)
    return ok(SubjectRead.model_validate(subject))


# PUBLIC_INTERFACE
@router.put(
    "/{course_id}/subjects/{subject_id}",
    response_model=ApiResponse[SubjectRead],
    summary="Update subject",
    dependencies=admin_only,
)
async def update_subject(
    payload: SubjectUpdate,
    course_id: int = CourseIdPath,
    subject_id: int = SubjectIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).get_course(exam.id, course_id)
    subject = await SubjectService(session).update_subject(course.id, subject_id, payload)
    return ok(SubjectRead.model_validate(subject), "Subject updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{course_id}/subjects/{subject_id}",
    response_model=ApiResponse[None],
    summary="Delete subject",
    dependencies=admin_only,
)
async def delete_subject(
    course_id: int = CourseIdPath,
    subject_id: int = SubjectIdPath,
    exam: Exam = Depends(exam_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    course = await CourseService(session).get_course(exam.id, course_id)
    await SubjectService(session).delete_subject(course.id, subject_id)
    return ok(None, "Subject deleted successfully")
