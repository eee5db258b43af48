from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy import Executable, Select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty

from contentkosh_api.core.query import ListOptions


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Repositories never enforce tenant scoping themselves; callers resolve
    ownership through the access dependencies before touching rows.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def flush(self) -> None:
        await self.session.flush()

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)

    async def delete(self, entity: Any) -> None:
        await self.session.delete(entity)

    @staticmethod
    def apply_list_options(stmt: Select, model: Any, options: Optional[ListOptions], default_order: Any) -> Select:
        """
        Apply sort and pagination to a select.

        Unknown sort fields fall back to the default ordering so callers cannot
        order by arbitrary attributes.
        """
        order = default_order
        if options and options.sort_field:
            attr = getattr(model, options.sort_field, None)
            prop = getattr(attr, "property", None)
            if isinstance(prop, ColumnProperty):
                order = attr.desc() if options.sort_desc else attr.asc()
        stmt = stmt.order_by(order)
        if options and options.skip is not None:
            stmt = stmt.offset(options.skip)
        if options and options.take is not None:
            stmt = stmt.limit(options.take)
        return stmt
