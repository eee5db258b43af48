"""
Tenant ownership checks for hierarchical resources.

Each resolver loads a resource, walks its foreign keys up to the owning
business and compares that business with the caller's:

    Content -> Batch -> Course -> Exam -> Business

A missing resource raises that resource's NotFoundError; a foreign business
raises ForbiddenError. SUPERADMIN callers skip the business comparison but
still get NotFound for missing rows. The resolvers return the loaded entity so
handlers do not fetch it twice.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import ForbiddenError, NotFoundError
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.academics import Course, Exam
from contentkosh_api.db.models.batch import Batch
from contentkosh_api.db.models.business import Business
from contentkosh_api.db.models.content import Content
from contentkosh_api.db.models.security import User
from contentkosh_api.repositories.academics import CourseRepository, ExamRepository
from contentkosh_api.repositories.batch import BatchRepository
from contentkosh_api.repositories.business import BusinessRepository
from contentkosh_api.repositories.content import ContentRepository
from contentkosh_api.repositories.security import UserRepository


def _owns(user: CurrentUser, business_id: Optional[int]) -> bool:
    if user.is_superadmin:
        return True
    return business_id is not None and business_id == user.business_id


# PUBLIC_INTERFACE
async def resolve_business_access(session: AsyncSession, business_id: int, user: CurrentUser) -> Business:
    business = await BusinessRepository(session).get_by_id(business_id)
    if business is None:
        raise NotFoundError("Business")
    if not _owns(user, business.id):
        raise ForbiddenError("You do not have access to this business")
    return business


# PUBLIC_INTERFACE
async def resolve_exam_access(session: AsyncSession, exam_id: int, user: CurrentUser) -> Exam:
    exam = await ExamRepository(session).get_by_id(exam_id)
    if exam is None:
        raise NotFoundError("Exam")
    if not _owns(user, exam.business_id):
        raise ForbiddenError("You do not have access to this exam")
    return exam


# PUBLIC_INTERFACE
async def resolve_course_access(session: AsyncSession, course_id: int, user: CurrentUser) -> Course:
    """Course -> Exam -> Business."""
    course = await CourseRepository(session).get_by_id(course_id)
    if course is None:
        raise NotFoundError("Course")
    exam = await ExamRepository(session).get_by_id(course.exam_id)
    if exam is None:
        raise ForbiddenError("Course is not linked to a valid exam")
    if not _owns(user, exam.business_id):
        raise ForbiddenError("You do not have access to this course")
    return course


async def _batch_business_id(session: AsyncSession, batch: Batch) -> int:
    course = await CourseRepository(session).get_by_id(batch.course_id)
    exam = await ExamRepository(session).get_by_id(course.exam_id) if course else None
    if exam is None:
        raise ForbiddenError("Batch is not correctly associated with an exam")
    return exam.business_id


# PUBLIC_INTERFACE
async def resolve_batch_access(session: AsyncSession, batch_id: int, user: CurrentUser) -> Batch:
    """Batch -> Course -> Exam -> Business."""
    batch = await BatchRepository(session).get_by_id(batch_id)
    if batch is None:
        raise NotFoundError("Batch")
    business_id = await _batch_business_id(session, batch)
    if not _owns(user, business_id):
        raise ForbiddenError("You do not have access to this batch")
    return batch


# PUBLIC_INTERFACE
async def ensure_batch_member(
    session: AsyncSession, batch_id: int, user: CurrentUser, action: str = "access"
) -> None:
    """Non-admin callers must hold an active membership in the batch."""
    if user.is_admin:
        return
    member = await BatchRepository(session).get_member(batch_id, user.id)
    if member is None or not member.is_active:
        raise ForbiddenError(f"You must be an active user in this batch to {action} content")


# PUBLIC_INTERFACE
async def resolve_content_access(session: AsyncSession, content_id: int, user: CurrentUser) -> Content:
    """Content -> Batch -> Course -> Exam -> Business, plus batch membership for non-admins."""
    content = await ContentRepository(session).get_by_id(content_id)
    if content is None:
        raise NotFoundError("Content")
    await resolve_batch_access(session, content.batch_id, user)
    await ensure_batch_member(session, content.batch_id, user)
    return content


# PUBLIC_INTERFACE
async def resolve_user_access(session: AsyncSession, user_id: int, user: CurrentUser) -> User:
    target = await UserRepository(session).get_by_id(user_id)
    if target is None:
        raise NotFoundError("User")
    if not _owns(user, target.business_id):
        raise ForbiddenError("You do not have access to this user")
    return target
