from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import BadRequestError, ForbiddenError, NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.base import as_utc, utcnow
from contentkosh_api.db.models.business import Announcement
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.repositories.business import AnnouncementRepository
from contentkosh_api.schemas.announcement import AnnouncementCreate, AnnouncementUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)

_AUDIENCE = {
    UserRole.ADMIN: "admins",
    UserRole.TEACHER: "teachers",
    UserRole.STUDENT: "students",
}


class AnnouncementService(BaseService):
    """
    Business-wide announcements.

    Admins see every announcement of their business; other roles only see
    active announcements addressed to their role whose window includes now.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = AnnouncementRepository(session)

    def _require_business(self, user: CurrentUser) -> int:
        if user.business_id is None:
            raise ForbiddenError("User is not associated with a business")
        return user.business_id

    @staticmethod
    def _visible_now(announcement: Announcement, user: CurrentUser) -> bool:
        audience = _AUDIENCE.get(user.role)
        if audience is None or not getattr(announcement, f"visible_to_{audience}"):
            return False
        now = utcnow()
        return (
            announcement.is_active
            and as_utc(announcement.start_date) <= now <= as_utc(announcement.end_date)
        )

    # PUBLIC_INTERFACE
    async def create_announcement(self, payload: AnnouncementCreate, user: CurrentUser) -> Announcement:
        business_id = self._require_business(user)
        logger.info("AnnouncementService: Creating announcement for business %s", business_id)
        announcement = await self.repo.create(
            business_id=business_id, created_by=user.id, **payload.model_dump()
        )
        await self.commit()
        return announcement

    # PUBLIC_INTERFACE
    async def list_announcements(
        self, user: CurrentUser, options: Optional[ListOptions] = None
    ) -> List[Announcement]:
        business_id = self._require_business(user)
        if user.is_admin:
            return await self.repo.list_for_business(business_id, options=options)
        audience = _AUDIENCE.get(user.role)
        if audience is None:
            return []
        return await self.repo.list_for_business(
            business_id, visible_to=audience, active_at=utcnow(), options=options
        )

    # PUBLIC_INTERFACE
    async def get_announcement(self, announcement_id: int, user: CurrentUser) -> Announcement:
        announcement = await self.repo.get_by_id(announcement_id)
        if announcement is None:
            raise NotFoundError("Announcement")
        if not user.is_superadmin and announcement.business_id != user.business_id:
            raise ForbiddenError("You do not have access to this announcement")
        if not user.is_admin and not self._visible_now(announcement, user):
            raise NotFoundError("Announcement")
        return announcement

    # PUBLIC_INTERFACE
    async def update_announcement(
        self, announcement_id: int, payload: AnnouncementUpdate, user: CurrentUser
    ) -> Announcement:
        announcement = await self.get_announcement(announcement_id, user)
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        start = as_utc(values.get("start_date", announcement.start_date))
        end = as_utc(values.get("end_date", announcement.end_date))
        if end < start:
            raise BadRequestError("End date must be after start date")
        announcement = await self.repo.update(announcement, **values)
        await self.commit()
        logger.info("AnnouncementService: Announcement %s updated", announcement_id)
        return announcement

    # PUBLIC_INTERFACE
    async def delete_announcement(self, announcement_id: int, user: CurrentUser) -> None:
        """Soft delete: the announcement is deactivated."""
        announcement = await self.get_announcement(announcement_id, user)
        await self.repo.deactivate(announcement)
        await self.commit()
        logger.info("AnnouncementService: Announcement %s deactivated", announcement_id)
