from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import AlreadyExistsError, NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import get_password_hash
from contentkosh_api.db.models.enums import Status, UserRole
from contentkosh_api.db.models.security import User
from contentkosh_api.repositories.business import BusinessRepository
from contentkosh_api.repositories.security import RefreshTokenRepository, UserRepository
from contentkosh_api.schemas.user import UserCreate, UserUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Business-scoped user administration. Deleting a user only marks it INACTIVE."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)
        self.tokens = RefreshTokenRepository(session)
        self.businesses = BusinessRepository(session)

    async def _ensure_business(self, business_id: int) -> None:
        if await self.businesses.get_by_id(business_id) is None:
            raise NotFoundError("Business")

    # PUBLIC_INTERFACE
    async def create_user(self, business_id: int, payload: UserCreate) -> User:
        logger.info("UserService: Creating user %s in business %s", payload.email, business_id)
        await self._ensure_business(business_id)
        if await self.repo.get_by_email(payload.email):
            raise AlreadyExistsError("User with this email")
        if payload.mobile and await self.repo.get_by_mobile(payload.mobile):
            raise AlreadyExistsError("User with this mobile")

        user = await self.repo.create(
            email=payload.email,
            password=get_password_hash(payload.password),
            name=payload.name,
            mobile=payload.mobile,
            role=payload.role,
            status=Status.ACTIVE,
            business_id=business_id,
        )
        try:
            await self.commit()
        except IntegrityError:
            raise AlreadyExistsError("User with this email or mobile")
        return user

    # PUBLIC_INTERFACE
    async def list_users(
        self,
        business_id: int,
        role: Optional[UserRole] = None,
        options: Optional[ListOptions] = None,
    ) -> List[User]:
        await self._ensure_business(business_id)
        return await self.repo.list_by_business(business_id, role=role, options=options)

    # PUBLIC_INTERFACE
    async def get_user(self, user_id: int) -> User:
        user = await self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User")
        return user

    # PUBLIC_INTERFACE
    async def update_user(self, user_id: int, payload: UserUpdate) -> User:
        user = await self.get_user(user_id)
        values = payload.model_dump(exclude_unset=True)
        mobile = values.get("mobile")
        if mobile and mobile != user.mobile and await self.repo.get_by_mobile(mobile):
            raise AlreadyExistsError("User with this mobile")

        user = await self.repo.update(user, **values)
        await self.commit()
        logger.info("UserService: User %s updated", user_id)
        return user

    # PUBLIC_INTERFACE
    async def delete_user(self, user_id: int) -> None:
        """Soft delete: the row stays, status becomes INACTIVE and refresh tokens are revoked."""
        user = await self.get_user(user_id)
        await self.repo.update(user, status=Status.INACTIVE)
        await self.tokens.revoke_all_for_user(user_id)
        await self.commit()
        logger.info("UserService: User %s deactivated", user_id)
