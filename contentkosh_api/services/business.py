from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import AlreadyExistsError, NotFoundError
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.business import Business
from contentkosh_api.repositories.business import BusinessRepository
from contentkosh_api.repositories.security import UserRepository
from contentkosh_api.schemas.business import BusinessCreate, BusinessUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


class BusinessService(BaseService):
    """Tenant lifecycle. The creating user becomes a member of the new business."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = BusinessRepository(session)
        self.users = UserRepository(session)

    # PUBLIC_INTERFACE
    async def create_business(self, payload: BusinessCreate, user: CurrentUser) -> Business:
        logger.info("BusinessService: Creating business '%s'", payload.slug)
        if await self.repo.get_by_slug(payload.slug):
            raise AlreadyExistsError("Business with this slug")

        business = await self.repo.create(**payload.to_values())
        creator = None if user.is_superadmin else await self.users.get_by_id(user.id)
        if creator is not None:
            await self.users.update(creator, business_id=business.id)
        await self.commit()
        logger.info("BusinessService: Business %s created by user %s", business.id, user.id)
        return business

    # PUBLIC_INTERFACE
    async def get_business(self, business_id: int) -> Business:
        business = await self.repo.get_by_id(business_id)
        if business is None:
            raise NotFoundError("Business")
        return business

    # PUBLIC_INTERFACE
    async def get_business_by_slug(self, slug: str) -> Business:
        business = await self.repo.get_by_slug(slug)
        if business is None:
            raise NotFoundError("Business")
        return business

    # PUBLIC_INTERFACE
    async def update_business(self, business_id: int, payload: BusinessUpdate) -> Business:
        business = await self.get_business(business_id)
        values = payload.to_values()
        slug = values.get("slug")
        if slug and slug != business.slug and await self.repo.get_by_slug(slug):
            raise AlreadyExistsError("Business with this slug")

        business = await self.repo.update(business, **values)
        await self.commit()
        logger.info("BusinessService: Business %s updated", business_id)
        return business

    # PUBLIC_INTERFACE
    async def delete_business(self, business_id: int) -> None:
        business = await self.get_business(business_id)
        await self.repo.delete(business)
        await self.commit()
        logger.info("BusinessService: Business %s deleted", business_id)
