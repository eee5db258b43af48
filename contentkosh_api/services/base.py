from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """
    Base class for services. Holds a session for use across multiple repositories.

    Services keep business logic and orchestration, delegating data access to
    repositories. Repositories only flush; the service decides when a unit of
    work is committed.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        """Commit the unit of work, rolling back if the commit itself fails."""
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
