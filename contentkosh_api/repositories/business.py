from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import and_, select

from contentkosh_api.core.query import ListOptions
from contentkosh_api.db.models.business import Announcement, Business
from .base import BaseRepository


class BusinessRepository(BaseRepository):
    """Repository for tenants."""

    async def get_by_id(self, business_id: int) -> Optional[Business]:
        stmt = select(Business).where(Business.id == business_id)
        return await self.scalar_one_or_none(stmt)

    async def get_by_slug(self, slug: str) -> Optional[Business]:
        stmt = select(Business).where(Business.slug == slug)
        return await self.scalar_one_or_none(stmt)

    async def create(self, **values: Any) -> Business:
        business = Business(**values)
        await self.add(business)
        await self.flush()
        return business

    async def update(self, business: Business, **values: Any) -> Business:
        for key, value in values.items():
            setattr(business, key, value)
        await self.flush()
        return business


class AnnouncementRepository(BaseRepository):
    """Repository for business announcements."""

    async def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        stmt = select(Announcement).where(Announcement.id == announcement_id)
        return await self.scalar_one_or_none(stmt)

    async def create(self, **values: Any) -> Announcement:
        announcement = Announcement(**values)
        await self.add(announcement)
        await self.flush()
        return announcement

    async def update(self, announcement: Announcement, **values: Any) -> Announcement:
        for key, value in values.items():
            setattr(announcement, key, value)
        await self.flush()
        return announcement

    async def list_for_business(
        self,
        business_id: int,
        *,
        visible_to: Optional[str] = None,
        active_at: Optional[datetime] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Announcement]:
        """
        List announcements of a business.

        visible_to narrows to one audience flag ('admins', 'teachers', 'students');
        active_at keeps active rows whose window contains that instant.
        """
        stmt = select(Announcement).where(Announcement.business_id == business_id)
        if visible_to == "admins":
            stmt = stmt.where(Announcement.visible_to_admins.is_(True))
        elif visible_to == "teachers":
            stmt = stmt.where(Announcement.visible_to_teachers.is_(True))
        elif visible_to == "students":
            stmt = stmt.where(Announcement.visible_to_students.is_(True))
        if active_at is not None:
            stmt = stmt.where(
                and_(
                    Announcement.is_active.is_(True),
                    Announcement.start_date <= active_at,
                    Announcement.end_date >= active_at,
                )
            )
        stmt = self.apply_list_options(stmt, Announcement, options, Announcement.start_date.desc())
        res = await self.scalars(stmt)
        return list(res)

    async def deactivate(self, announcement: Announcement) -> Announcement:
        announcement.is_active = False
        await self.flush()
        return announcement
