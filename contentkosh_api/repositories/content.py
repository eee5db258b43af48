from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import select

from contentkosh_api.core.query import ListOptions
from contentkosh_api.db.models.content import Content
from contentkosh_api.db.models.enums import ContentType, Status
from .base import BaseRepository


class ContentRepository(BaseRepository):
    """Repository for uploaded batch content."""

    async def get_by_id(self, content_id: int) -> Optional[Content]:
        stmt = select(Content).where(Content.id == content_id)
        return await self.scalar_one_or_none(stmt)

    async def list_by_batch(
        self,
        batch_id: int,
        *,
        content_type: Optional[ContentType] = None,
        status: Optional[Status] = None,
        search: Optional[str] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Content]:
        stmt = select(Content).where(Content.batch_id == batch_id)
        if content_type:
            stmt = stmt.where(Content.type == content_type)
        if status:
            stmt = stmt.where(Content.status == status)
        if search:
            stmt = stmt.where(Content.title.ilike(f"%{search}%"))
        stmt = self.apply_list_options(stmt, Content, options, Content.created_at.desc())
        res = await self.scalars(stmt)
        return list(res)

    async def create(self, **values: Any) -> Content:
        content = Content(**values)
        await self.add(content)
        await self.flush()
        return content

    async def update(self, content: Content, **values: Any) -> Content:
        for key, value in values.items():
            setattr(content, key, value)
        await self.flush()
        return content
