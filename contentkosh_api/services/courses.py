from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import BadRequestError, NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.academics import Course, Subject
from contentkosh_api.db.models.enums import Status, UserRole
from contentkosh_api.repositories.academics import CourseRepository, SubjectRepository
from contentkosh_api.schemas.academics import CourseCreate, CourseUpdate, SubjectCreate, SubjectUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


class CourseService(BaseService):
    """Courses of an exam. Names are unique per exam, case-insensitively."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = CourseRepository(session)

    # PUBLIC_INTERFACE
    async def create_course(self, exam_id: int, payload: CourseCreate) -> Course:
        logger.info("CourseService: Creating new course '%s' for exam %s", payload.name, exam_id)
        if await self.repo.find_by_name(exam_id, payload.name):
            raise BadRequestError("Course with this name already exists for this exam")
        values = payload.model_dump(exclude_none=True)
        course = await self.repo.create(exam_id=exam_id, **values)
        await self.commit()
        return course

    # PUBLIC_INTERFACE
    async def get_course(self, exam_id: int, course_id: int) -> Course:
        """Fetch a course and verify it belongs to the exam in the path."""
        course = await self.repo.get_by_id(course_id)
        if course is None:
            logger.error("CourseService: Course with ID %s not found", course_id)
            raise NotFoundError("Course")
        if course.exam_id != exam_id:
            raise NotFoundError("Course", "Course not found in this exam")
        return course

    # PUBLIC_INTERFACE
    async def list_courses(
        self,
        exam_id: int,
        user: CurrentUser,
        active_only: bool = False,
        options: Optional[ListOptions] = None,
    ) -> List[Course]:
        teacher_id = user.id if user.role == UserRole.TEACHER else None
        return await self.repo.list_by_exam(
            exam_id, active_only=active_only, teacher_user_id=teacher_id, options=options
        )

    # PUBLIC_INTERFACE
    async def update_course(self, exam_id: int, course_id: int, payload: CourseUpdate) -> Course:
        logger.info("CourseService: Updating course %s", course_id)
        course = await self.get_course(exam_id, course_id)
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in values and await self.repo.find_by_name(exam_id, values["name"], exclude_id=course_id):
            raise BadRequestError("Course with this name already exists for this exam")
        course = await self.repo.update(course, **values)
        await self.commit()
        logger.info("CourseService: Course updated successfully: %s", course.name)
        return course

    # PUBLIC_INTERFACE
    async def delete_course(self, exam_id: int, course_id: int) -> None:
        logger.info("CourseService: Deleting course %s", course_id)
        course = await self.get_course(exam_id, course_id)
        await self.repo.delete(course)
        await self.commit()
        logger.info("CourseService: Course deleted successfully: ID %s", course_id)


class SubjectService(BaseService):
    """Subjects of a course. Names are unique per course, case-insensitively."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = SubjectRepository(session)

    # PUBLIC_INTERFACE
    async def create_subject(self, course_id: int, payload: SubjectCreate) -> Subject:
        logger.info("SubjectService: Creating new subject '%s' for course %s", payload.name, course_id)
        if await self.repo.find_by_name(course_id, payload.name):
            raise BadRequestError("Subject with this name already exists for this course")
        values = payload.model_dump(exclude_none=True)
        values.setdefault("status", Status.ACTIVE)
        subject = await self.repo.create(course_id=course_id, **values)
        await self.commit()
        return subject

    # PUBLIC_INTERFACE
    async def get_subject(self, course_id: int, subject_id: int) -> Subject:
        subject = await self.repo.get_by_id(subject_id)
        if subject is None:
            raise NotFoundError("Subject")
        if subject.course_id != course_id:
            raise NotFoundError("Subject", "Subject not found in this course")
        return subject

    # PUBLIC_INTERFACE
    async def list_subjects(
        self, course_id: int, active_only: bool = False, options: Optional[ListOptions] = None
    ) -> List[Subject]:
        return await self.repo.list_by_course(course_id, active_only=active_only, options=options)

    # PUBLIC_INTERFACE
    async def update_subject(self, course_id: int, subject_id: int, payload: SubjectUpdate) -> Subject:
        logger.info("SubjectService: Updating subject %s", subject_id)
        subject = await self.get_subject(course_id, subject_id)
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in values and await self.repo.find_by_name(course_id, values["name"], exclude_id=subject_id):
            raise BadRequestError("Subject with this name already exists for this course")
        subject = await self.repo.update(subject, **values)
        await self.commit()
        return subject

    # PUBLIC_INTERFACE
    async def delete_subject(self, course_id: int, subject_id: int) -> None:
        logger.info("SubjectService: Deleting subject %s", subject_id)
        subject = await self.get_subject(course_id, subject_id)
        await self.repo.delete(subject)
        await self.commit()
