from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.access import resolve_course_access
from contentkosh_api.core.errors import AlreadyExistsError, BadRequestError, ForbiddenError, NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.base import as_utc
from contentkosh_api.db.models.batch import Batch, BatchUser
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.repositories.batch import BatchRepository
from contentkosh_api.repositories.security import UserRepository
from contentkosh_api.schemas.batch import BatchCreate, BatchUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)

_MEMBER_ROLES = (UserRole.TEACHER, UserRole.STUDENT)


class BatchService(BaseService):
    """
    Batches of a course and their memberships.

    Only TEACHER and STUDENT users of the batch's own business can be members;
    a user appears at most once per batch.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = BatchRepository(session)
        self.users = UserRepository(session)

    # PUBLIC_INTERFACE
    async def create_batch(self, payload: BatchCreate, user: CurrentUser) -> Batch:
        logger.info("BatchService: Creating new batch '%s' for course %s", payload.code_name, payload.course_id)
        await resolve_course_access(self.session, payload.course_id, user)
        if await self.repo.get_by_code_name(payload.code_name):
            raise AlreadyExistsError("Batch with this code name")

        batch = await self.repo.create(
            **payload.model_dump(),
            created_by=user.id,
        )
        await self.commit()
        return batch

    # PUBLIC_INTERFACE
    async def get_batch(self, batch_id: int, with_users: bool = False) -> Batch:
        batch = await self.repo.get_by_id(batch_id, with_users=with_users)
        if batch is None:
            raise NotFoundError("Batch")
        return batch

    # PUBLIC_INTERFACE
    async def list_by_course(
        self,
        course_id: int,
        user: CurrentUser,
        active_only: bool = False,
        options: Optional[ListOptions] = None,
    ) -> List[Batch]:
        """Batches of a course; teachers only see batches they are active members of."""
        member_id = user.id if user.role == UserRole.TEACHER else None
        return await self.repo.list_by_course(
            course_id, active_only=active_only, member_user_id=member_id, options=options
        )

    # PUBLIC_INTERFACE
    async def list_active(self, user: CurrentUser, options: Optional[ListOptions] = None) -> List[Batch]:
        """
        Active batches visible to the caller.

        SUPERADMIN sees every business, ADMIN its own business, TEACHER and
        STUDENT only batches they are active members of.
        """
        if user.role not in (UserRole.SUPERADMIN, UserRole.ADMIN, UserRole.TEACHER, UserRole.STUDENT):
            raise ForbiddenError("You do not have access to view batches")
        if user.is_superadmin:
            return await self.repo.list_active(options=options)
        if user.business_id is None:
            raise ForbiddenError("User is not associated with a business")
        member_id = None if user.role == UserRole.ADMIN else user.id
        return await self.repo.list_active(
            business_id=user.business_id, member_user_id=member_id, options=options
        )

    # PUBLIC_INTERFACE
    async def list_for_user(self, user_id: int, options: Optional[ListOptions] = None) -> List[Batch]:
        return await self.repo.list_for_user(user_id, options=options)

    # PUBLIC_INTERFACE
    async def update_batch(self, batch_id: int, payload: BatchUpdate, user: CurrentUser) -> Batch:
        logger.info("BatchService: Updating batch %s", batch_id)
        batch = await self.get_batch(batch_id)
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        code_name = values.get("code_name")
        if code_name and await self.repo.get_by_code_name(code_name, exclude_id=batch_id):
            raise AlreadyExistsError("Batch with this code name")
        start = as_utc(values.get("start_date", batch.start_date))
        end = as_utc(values.get("end_date", batch.end_date))
        if ("start_date" in values or "end_date" in values) and end < start:
            raise BadRequestError("End date must be after start date")

        batch = await self.repo.update(batch, updated_by=user.id, **values)
        await self.commit()
        return batch

    # PUBLIC_INTERFACE
    async def delete_batch(self, batch_id: int) -> None:
        logger.info("BatchService: Deleting batch %s", batch_id)
        batch = await self.get_batch(batch_id)
        await self.repo.delete(batch)
        await self.commit()

    # PUBLIC_INTERFACE
    async def add_user(self, batch_id: int, user_id: int) -> BatchUser:
        """Enroll a teacher or student of the batch's business."""
        logger.info("BatchService: Adding user %s to batch %s", user_id, batch_id)
        await self.get_batch(batch_id)
        business_id = await self.repo.get_business_id(batch_id)
        if business_id is None:
            raise BadRequestError("Batch is not associated with a valid business")

        target = await self.users.get_by_id(user_id)
        if target is None:
            raise NotFoundError("User")
        if target.business_id != business_id:
            raise BadRequestError("User is not part of this business")
        if target.role not in _MEMBER_ROLES:
            raise BadRequestError("Only Teachers and Students can be added to a batch")
        if await self.repo.get_member(batch_id, user_id):
            raise AlreadyExistsError("Batch user", "User is already in this batch")

        await self.repo.add_member(batch_id, user_id)
        await self.commit()
        return await self.repo.get_member(batch_id, user_id, with_user=True)

    # PUBLIC_INTERFACE
    async def remove_user(self, batch_id: int, user_id: int) -> None:
        logger.info("BatchService: Removing user %s from batch %s", user_id, batch_id)
        member = await self.repo.get_member(batch_id, user_id)
        if member is None:
            raise NotFoundError("Batch user", "User is not in this batch")
        await self.repo.delete(member)
        await self.commit()

    # PUBLIC_INTERFACE
    async def list_members(self, batch_id: int, role: Optional[UserRole] = None) -> List[BatchUser]:
        return await self.repo.list_members(batch_id, role=role)

    # PUBLIC_INTERFACE
    async def update_member(self, batch_id: int, user_id: int, is_active: bool) -> BatchUser:
        logger.info("BatchService: Updating batch user %s in batch %s", user_id, batch_id)
        member = await self.repo.get_member(batch_id, user_id)
        if member is None:
            raise NotFoundError("Batch user", "User is not in this batch")
        member.is_active = is_active
        await self.repo.flush()
        await self.commit()
        return await self.repo.get_member(batch_id, user_id, with_user=True)
