from __future__ import annotations

from typing import Any, Iterable, List, Optional

from sqlalchemy import delete, select, update

from contentkosh_api.core.query import ListOptions
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.models.security import Permission, RefreshToken, RolePermission, User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for user accounts."""

    async def get_by_id(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return await self.scalar_one_or_none(stmt)

    async def get_by_mobile(self, mobile: str) -> Optional[User]:
        stmt = select(User).where(User.mobile == mobile)
        return await self.scalar_one_or_none(stmt)

    async def create(self, **values: Any) -> User:
        user = User(**values)
        await self.add(user)
        await self.flush()
        return user

    async def update(self, user: User, **values: Any) -> User:
        for key, value in values.items():
            setattr(user, key, value)
        await self.flush()
        return user

    async def list_by_business(
        self,
        business_id: int,
        *,
        role: Optional[UserRole] = None,
        options: Optional[ListOptions] = None,
    ) -> List[User]:
        stmt = select(User).where(User.business_id == business_id)
        if role:
            stmt = stmt.where(User.role == role)
        stmt = self.apply_list_options(stmt, User, options, User.created_at.desc())
        res = await self.scalars(stmt)
        return list(res)


class PermissionRepository(BaseRepository):
    """Repository for the permission catalogue and per-user grants."""

    async def list_permissions(self) -> List[Permission]:
        stmt = select(Permission).order_by(Permission.code)
        res = await self.scalars(stmt)
        return list(res)

    async def get_by_codes(self, codes: Iterable[str]) -> List[Permission]:
        stmt = select(Permission).where(Permission.code.in_(list(codes)))
        res = await self.scalars(stmt)
        return list(res)

    async def ensure_permission(self, code: str, description: Optional[str] = None) -> Permission:
        stmt = select(Permission).where(Permission.code == code)
        perm = await self.scalar_one_or_none(stmt)
        if perm:
            return perm
        perm = Permission(code=code, description=description or code)
        await self.add(perm)
        await self.flush()
        return perm

    async def list_codes_for_user(self, user_id: int) -> List[str]:
        stmt = (
            select(Permission.code)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.user_id == user_id)
            .order_by(Permission.code)
        )
        res = await self.scalars(stmt)
        return list(res)

    async def list_permission_ids_for_user(self, user_id: int) -> List[int]:
        stmt = select(RolePermission.permission_id).where(RolePermission.user_id == user_id)
        res = await self.scalars(stmt)
        return list(res)

    async def add_grants(self, user_id: int, permission_ids: Iterable[int]) -> None:
        await self.add_all(
            RolePermission(user_id=user_id, permission_id=pid) for pid in permission_ids
        )
        await self.flush()

    async def delete_grants(self, user_id: int, permission_ids: Optional[Iterable[int]] = None) -> int:
        """Delete the user's grants; all of them when permission_ids is None."""
        stmt = delete(RolePermission).where(RolePermission.user_id == user_id)
        if permission_ids is not None:
            stmt = stmt.where(RolePermission.permission_id.in_(list(permission_ids)))
        res = await self.execute(stmt.execution_options(synchronize_session=False))
        return res.rowcount or 0


class RefreshTokenRepository(BaseRepository):
    """Repository for stored refresh tokens."""

    async def create(self, user_id: int, token: str, expires_at) -> RefreshToken:
        row = RefreshToken(user_id=user_id, token=token, expires_at=expires_at, is_revoked=False)
        await self.add(row)
        await self.flush()
        return row

    async def get_by_token(self, token: str) -> Optional[RefreshToken]:
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return await self.scalar_one_or_none(stmt)

    async def revoke(self, token: str) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token)
            .values(is_revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        res = await self.execute(stmt)
        return res.rowcount or 0

    async def revoke_all_for_user(self, user_id: int) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        res = await self.execute(stmt)
        return res.rowcount or 0
