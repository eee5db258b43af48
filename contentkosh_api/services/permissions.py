from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import BadRequestError
from contentkosh_api.db.models.security import Permission, User
from contentkosh_api.repositories.security import PermissionRepository
from contentkosh_api.schemas.permission import PermissionUser, UserPermissions
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


class PermissionService(BaseService):
    """
    Per-user permission grants layered on top of roles.

    Codes are treated as a set: duplicates collapse and ordering is not kept.
    Unknown codes reject the whole request before anything changes.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = PermissionRepository(session)

    async def _resolve_ids(self, codes: Iterable[str]) -> List[int]:
        wanted = set(codes)
        records = await self.repo.get_by_codes(wanted)
        if len(records) != len(wanted):
            raise BadRequestError("Some permissions are invalid")
        return [p.id for p in records]

    # PUBLIC_INTERFACE
    async def list_permissions(self) -> List[Permission]:
        return await self.repo.list_permissions()

    # PUBLIC_INTERFACE
    async def get_user_permissions(self, user: User) -> UserPermissions:
        codes = await self.repo.list_codes_for_user(user.id)
        return UserPermissions(user=PermissionUser(id=user.id, role=user.role), permissions=codes)

    # PUBLIC_INTERFACE
    async def user_has_permission(self, user_id: int, code: str) -> bool:
        return code in await self.repo.list_codes_for_user(user_id)

    # PUBLIC_INTERFACE
    async def assign_permissions(self, user: User, codes: List[str]) -> UserPermissions:
        """Add grants, skipping ones the user already holds."""
        ids = await self._resolve_ids(codes)
        held = set(await self.repo.list_permission_ids_for_user(user.id))
        new_ids = [pid for pid in ids if pid not in held]
        if new_ids:
            await self.repo.add_grants(user.id, new_ids)
        await self.commit()
        logger.info("PermissionService: Assigned %d permission(s) to user %s", len(new_ids), user.id)
        return await self.get_user_permissions(user)

    # PUBLIC_INTERFACE
    async def replace_permissions(self, user: User, codes: List[str]) -> UserPermissions:
        """
        Replace the user's grants with exactly the given set.

        Delete and insert run in one transaction; concurrent readers see either
        the old set or the new one.
        """
        ids = await self._resolve_ids(codes)
        try:
            await self.repo.delete_grants(user.id)
            await self.repo.add_grants(user.id, ids)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("PermissionService: Replaced permissions of user %s (%d grant(s))", user.id, len(ids))
        return await self.get_user_permissions(user)

    # PUBLIC_INTERFACE
    async def remove_permissions(self, user: User, codes: Optional[List[str]] = None) -> UserPermissions:
        """Remove the given codes, or every grant when no codes are given. Unknown codes are ignored."""
        if codes:
            records = await self.repo.get_by_codes(set(codes))
            removed = await self.repo.delete_grants(user.id, [p.id for p in records])
        else:
            removed = await self.repo.delete_grants(user.id)
        await self.commit()
        logger.info("PermissionService: Removed %d permission(s) from user %s", removed, user.id)
        return await self.get_user_permissions(user)
