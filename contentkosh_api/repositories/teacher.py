from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import select

from contentkosh_api.core.query import ListOptions
from contentkosh_api.db.models.teacher import Teacher
from .base import BaseRepository


class TeacherRepository(BaseRepository):
    """Repository for teacher profiles."""

    async def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        stmt = select(Teacher).where(Teacher.id == teacher_id)
        return await self.scalar_one_or_none(stmt)

    async def get_by_user_id(self, user_id: int) -> Optional[Teacher]:
        stmt = select(Teacher).where(Teacher.user_id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def list_by_business(self, business_id: int, options: Optional[ListOptions] = None) -> List[Teacher]:
        stmt = select(Teacher).where(Teacher.business_id == business_id)
        stmt = self.apply_list_options(stmt, Teacher, options, Teacher.created_at.desc())
        res = await self.scalars(stmt)
        return list(res)

    async def create(self, **values: Any) -> Teacher:
        teacher = Teacher(**values)
        await self.add(teacher)
        await self.flush()
        return teacher

    async def update(self, teacher: Teacher, **values: Any) -> Teacher:
        for key, value in values.items():
            setattr(teacher, key, value)
        await self.flush()
        return teacher
