from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import AlreadyExistsError, AuthError, ForbiddenError, NotFoundError
from contentkosh_api.core.logging import user_id_var
from contentkosh_api.core.security import (
    create_access_token,
    generate_refresh_token,
    get_password_hash,
    refresh_token_expiry,
    verify_password,
)
from contentkosh_api.db.base import as_utc
from contentkosh_api.db.models.enums import Status, UserRole
from contentkosh_api.db.models.security import User
from contentkosh_api.repositories.security import RefreshTokenRepository, UserRepository
from contentkosh_api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, SignupRequest
from contentkosh_api.schemas.user import UserRead
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Account creation, credential checks and token issuance.

    Access tokens are signed JWTs verified without a database round trip.
    Refresh tokens are opaque, stored, single-use and rotated on every refresh.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.tokens = RefreshTokenRepository(session)

    async def _create_account(
        self,
        *,
        email: str,
        password: str,
        name: str,
        mobile: Optional[str],
        role: UserRole,
    ) -> User:
        if await self.users.get_by_email(email):
            raise AlreadyExistsError("User with this email")
        if mobile and await self.users.get_by_mobile(mobile):
            raise AlreadyExistsError("User with this mobile")
        return await self.users.create(
            email=email,
            password=get_password_hash(password),
            name=name,
            mobile=mobile,
            role=role,
            status=Status.ACTIVE,
        )

    async def _issue_tokens(self, user: User) -> AuthResponse:
        access = create_access_token(
            user_id=user.id,
            business_id=user.business_id,
            role=user.role.value,
            email=user.email,
        )
        refresh = generate_refresh_token()
        await self.tokens.create(user.id, refresh, refresh_token_expiry())
        return AuthResponse(
            access_token=access,
            refresh_token=refresh,
            user=UserRead.model_validate(user),
        )

    # PUBLIC_INTERFACE
    async def signup(self, payload: SignupRequest) -> User:
        """Create a USER-role account without issuing tokens."""
        logger.info("AuthService: Signing up %s", payload.email)
        user = await self._create_account(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            mobile=payload.mobile,
            role=UserRole.USER,
        )
        await self.commit()
        logger.info("AuthService: User %s signed up", user.id)
        return user

    # PUBLIC_INTERFACE
    async def register(self, payload: RegisterRequest) -> AuthResponse:
        """Create an account (ADMIN unless another role is given) and return a token pair."""
        logger.info("AuthService: Registering new user %s", payload.email)
        user = await self._create_account(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            mobile=payload.mobile,
            role=payload.role,
        )
        result = await self._issue_tokens(user)
        await self.commit()
        logger.info("AuthService: User registered successfully: %s", user.id)
        return result

    # PUBLIC_INTERFACE
    async def login(self, payload: LoginRequest) -> AuthResponse:
        logger.info("AuthService: Login attempt for %s", payload.email)
        user = await self.users.get_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password):
            logger.warning("Login failed for %s", payload.email)
            raise AuthError("Invalid email or password")
        if user.status != Status.ACTIVE:
            logger.warning("Login rejected for inactive account %s", payload.email)
            raise ForbiddenError("User account is inactive")

        result = await self._issue_tokens(user)
        await self.commit()
        user_id_var.set(str(user.id))
        logger.info("AuthService: User logged in: %s", user.id)
        return result

    # PUBLIC_INTERFACE
    async def refresh(self, refresh_token: str) -> AuthResponse:
        """Exchange a stored refresh token for a new pair, revoking the old one."""
        stored = await self.tokens.get_by_token(refresh_token)
        if stored is None:
            logger.warning("Refresh failed: token not found")
            raise AuthError("Invalid refresh token")
        if stored.is_revoked:
            logger.warning("Refresh failed: token revoked (user %s)", stored.user_id)
            raise AuthError("Refresh token has been revoked")
        if datetime.now(tz=timezone.utc) > as_utc(stored.expires_at):
            logger.warning("Refresh failed: token expired (user %s)", stored.user_id)
            raise AuthError("Refresh token has expired")

        user = stored.user
        if user.status != Status.ACTIVE:
            logger.warning("Refresh rejected for inactive user %s", user.id)
            raise ForbiddenError("User account is inactive")

        await self.tokens.revoke(refresh_token)
        result = await self._issue_tokens(user)
        await self.commit()
        logger.info("AuthService: Tokens refreshed for user %s", user.id)
        return result

    # PUBLIC_INTERFACE
    async def logout(self, refresh_token: Optional[str]) -> None:
        """Revoke the given refresh token. Unknown tokens are ignored."""
        if not refresh_token:
            return
        revoked = await self.tokens.revoke(refresh_token)
        await self.commit()
        logger.info("AuthService: Logout revoked %d token(s)", revoked)

    # PUBLIC_INTERFACE
    async def get_profile(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User")
        return user
