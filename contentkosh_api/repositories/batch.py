from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from contentkosh_api.core.query import ListOptions
from contentkosh_api.db.models.academics import Course, Exam
from contentkosh_api.db.models.batch import Batch, BatchUser
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.models.security import User
from .base import BaseRepository


class BatchRepository(BaseRepository):
    """Repository for batches and their memberships."""

    async def get_by_id(self, batch_id: int, *, with_users: bool = False) -> Optional[Batch]:
        stmt = select(Batch).where(Batch.id == batch_id)
        if with_users:
            stmt = stmt.options(
                selectinload(Batch.batch_users).selectinload(BatchUser.user)
            ).execution_options(populate_existing=True)
        return await self.scalar_one_or_none(stmt)

    async def get_by_code_name(self, code_name: str, exclude_id: Optional[int] = None) -> Optional[Batch]:
        stmt = select(Batch).where(Batch.code_name == code_name)
        if exclude_id is not None:
            stmt = stmt.where(Batch.id != exclude_id)
        return await self.scalar_one_or_none(stmt.limit(1))

    async def get_business_id(self, batch_id: int) -> Optional[int]:
        """Resolve the owning business id through course and exam in one query."""
        stmt = (
            select(Exam.business_id)
            .join(Course, Course.exam_id == Exam.id)
            .join(Batch, Batch.course_id == Course.id)
            .where(Batch.id == batch_id)
        )
        return await self.scalar_one_or_none(stmt)

    async def list_by_course(
        self,
        course_id: int,
        *,
        active_only: bool = False,
        member_user_id: Optional[int] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Batch]:
        stmt = select(Batch).where(Batch.course_id == course_id)
        if active_only:
            stmt = stmt.where(Batch.is_active.is_(True))
        if member_user_id is not None:
            stmt = stmt.where(
                Batch.id.in_(
                    select(BatchUser.batch_id).where(
                        BatchUser.user_id == member_user_id, BatchUser.is_active.is_(True)
                    )
                )
            )
        stmt = self.apply_list_options(stmt, Batch, options, Batch.created_at.desc())
        res = await self.scalars(stmt)
        return list(res)

    async def list_active(
        self,
        *,
        business_id: Optional[int] = None,
        member_user_id: Optional[int] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Batch]:
        """Active batches, optionally narrowed to a business and/or to active memberships of a user."""
        stmt = select(Batch).where(Batch.is_active.is_(True))
        if business_id is not None:
            stmt = (
                stmt.join(Course, Course.id == Batch.course_id)
                .join(Exam, Exam.id == Course.exam_id)
                .where(Exam.business_id == business_id)
            )
        if member_user_id is not None:
            stmt = stmt.where(
                Batch.id.in_(
                    select(BatchUser.batch_id).where(
                        BatchUser.user_id == member_user_id, BatchUser.is_active.is_(True)
                    )
                )
            )
        stmt = self.apply_list_options(stmt, Batch, options, Batch.start_date.desc())
        res = await self.scalars(stmt)
        return list(res)

    async def list_for_user(self, user_id: int, options: Optional[ListOptions] = None) -> List[Batch]:
        stmt = select(Batch).join(BatchUser, BatchUser.batch_id == Batch.id).where(BatchUser.user_id == user_id)
        stmt = self.apply_list_options(stmt, Batch, options, Batch.created_at.desc())
        res = await self.scalars(stmt)
        return list(res)

    async def create(self, **values: Any) -> Batch:
        batch = Batch(**values)
        await self.add(batch)
        await self.flush()
        return batch

    async def update(self, batch: Batch, **values: Any) -> Batch:
        for key, value in values.items():
            setattr(batch, key, value)
        await self.flush()
        return batch

    # Memberships
    async def get_member(self, batch_id: int, user_id: int, *, with_user: bool = False) -> Optional[BatchUser]:
        stmt = select(BatchUser).where(BatchUser.batch_id == batch_id, BatchUser.user_id == user_id)
        if with_user:
            stmt = stmt.options(selectinload(BatchUser.user)).execution_options(populate_existing=True)
        return await self.scalar_one_or_none(stmt)

    async def add_member(self, batch_id: int, user_id: int, is_active: bool = True) -> BatchUser:
        member = BatchUser(batch_id=batch_id, user_id=user_id, is_active=is_active)
        await self.add(member)
        await self.flush()
        return member

    async def list_members(
        self, batch_id: int, *, role: Optional[UserRole] = None
    ) -> List[BatchUser]:
        stmt = (
            select(BatchUser)
            .join(User, User.id == BatchUser.user_id)
            .where(BatchUser.batch_id == batch_id)
            .options(selectinload(BatchUser.user))
            .order_by(BatchUser.created_at.desc())
        )
        if role:
            stmt = stmt.where(User.role == role)
        res = await self.scalars(stmt)
        return list(res)
