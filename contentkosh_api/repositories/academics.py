from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import func, select

from contentkosh_api.core.query import ListOptions
from contentkosh_api.db.models.academics import Course, Exam, Subject
from contentkosh_api.db.models.batch import Batch, BatchUser
from contentkosh_api.db.models.enums import Status
from .base import BaseRepository


def _courses_taught_by(user_id: int):
    """Subquery of course ids with a batch where the user is an active member."""
    return (
        select(Batch.course_id)
        .join(BatchUser, BatchUser.batch_id == Batch.id)
        .where(BatchUser.user_id == user_id, BatchUser.is_active.is_(True))
    )


class ExamRepository(BaseRepository):
    """Repository for exams."""

    async def get_by_id(self, exam_id: int) -> Optional[Exam]:
        stmt = select(Exam).where(Exam.id == exam_id)
        return await self.scalar_one_or_none(stmt)

    async def find_active_by_name(
        self, business_id: int, name: str, exclude_id: Optional[int] = None
    ) -> Optional[Exam]:
        """Case-sensitive lookup of an ACTIVE exam name inside a business."""
        stmt = select(Exam).where(
            Exam.business_id == business_id,
            Exam.name == name,
            Exam.status == Status.ACTIVE,
        )
        if exclude_id is not None:
            stmt = stmt.where(Exam.id != exclude_id)
        return await self.scalar_one_or_none(stmt.limit(1))

    async def list_active_for_business(
        self,
        business_id: int,
        *,
        teacher_user_id: Optional[int] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Exam]:
        stmt = select(Exam).where(Exam.business_id == business_id, Exam.status == Status.ACTIVE)
        if teacher_user_id is not None:
            stmt = stmt.where(
                Exam.id.in_(select(Course.exam_id).where(Course.id.in_(_courses_taught_by(teacher_user_id))))
            )
        stmt = self.apply_list_options(stmt, Exam, options, Exam.name.asc())
        res = await self.scalars(stmt)
        return list(res)

    async def create(self, **values: Any) -> Exam:
        exam = Exam(**values)
        await self.add(exam)
        await self.flush()
        return exam

    async def update(self, exam: Exam, **values: Any) -> Exam:
        for key, value in values.items():
            setattr(exam, key, value)
        await self.flush()
        return exam

    async def soft_delete(self, exam: Exam, updated_by: Optional[int] = None) -> Exam:
        exam.status = Status.INACTIVE
        exam.updated_by = updated_by
        await self.flush()
        return exam


class CourseRepository(BaseRepository):
    """Repository for courses."""

    async def get_by_id(self, course_id: int) -> Optional[Course]:
        stmt = select(Course).where(Course.id == course_id)
        return await self.scalar_one_or_none(stmt)

    async def find_by_name(self, exam_id: int, name: str, exclude_id: Optional[int] = None) -> Optional[Course]:
        stmt = select(Course).where(Course.exam_id == exam_id, func.lower(Course.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Course.id != exclude_id)
        return await self.scalar_one_or_none(stmt.limit(1))

    async def list_by_exam(
        self,
        exam_id: int,
        *,
        active_only: bool = False,
        teacher_user_id: Optional[int] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Course]:
        stmt = select(Course).where(Course.exam_id == exam_id)
        if active_only:
            stmt = stmt.where(Course.status == Status.ACTIVE)
        if teacher_user_id is not None:
            stmt = stmt.where(Course.id.in_(_courses_taught_by(teacher_user_id)))
        stmt = self.apply_list_options(stmt, Course, options, Course.name.asc())
        res = await self.scalars(stmt)
        return list(res)

    async def create(self, **values: Any) -> Course:
        course = Course(**values)
        await self.add(course)
        await self.flush()
        return course

    async def update(self, course: Course, **values: Any) -> Course:
        for key, value in values.items():
            setattr(course, key, value)
        await self.flush()
        return course


class SubjectRepository(BaseRepository):
    """Repository for subjects."""

    async def get_by_id(self, subject_id: int) -> Optional[Subject]:
        stmt = select(Subject).where(Subject.id == subject_id)
        return await self.scalar_one_or_none(stmt)

    async def find_by_name(self, course_id: int, name: str, exclude_id: Optional[int] = None) -> Optional[Subject]:
        stmt = select(Subject).where(Subject.course_id == course_id, func.lower(Subject.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Subject.id != exclude_id)
        return await self.scalar_one_or_none(stmt.limit(1))

    async def list_by_course(
        self,
        course_id: int,
        *,
        active_only: bool = False,
        options: Optional[ListOptions] = None,
    ) -> List[Subject]:
        stmt = select(Subject).where(Subject.course_id == course_id)
        if active_only:
            stmt = stmt.where(Subject.status == Status.ACTIVE)
        stmt = self.apply_list_options(stmt, Subject, options, Subject.name.asc())
        res = await self.scalars(stmt)
        return list(res)

    async def create(self, **values: Any) -> Subject:
        subject = Subject(**values)
        await self.add(subject)
        await self.flush()
        return subject

    async def update(self, subject: Subject, **values: Any) -> Subject:
        for key, value in values.items():
            setattr(subject, key, value)
        await self.flush()
        return subject
