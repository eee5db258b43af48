from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.core.validation import validate_max_length, validate_required
from contentkosh_api.db.models.content import Content
from contentkosh_api.db.models.enums import ContentType, Status
from contentkosh_api.repositories.content import ContentRepository
from contentkosh_api.schemas.content import ContentUpdate
from contentkosh_api.services import storage
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentFile:
    path: str
    filename: str
    media_type: str


class ContentService(BaseService):
    """
    Uploaded batch content.

    The file is written to disk before the row is inserted; if the insert
    fails the file is removed again.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ContentRepository(session)

    # PUBLIC_INTERFACE
    async def create_content(
        self,
        batch_id: int,
        file: UploadFile,
        title: str,
        user: CurrentUser,
        declared_type: Optional[ContentType] = None,
        status: Optional[Status] = None,
    ) -> Content:
        validate_required(title, "Title")
        title = title.strip()
        logger.info("ContentService: Creating new content '%s' for batch %s", title, batch_id)

        stored = await storage.save_upload(file, declared_type)
        try:
            content = await self.repo.create(
                batch_id=batch_id,
                title=title,
                type=stored.content_type,
                file_path=stored.path,
                file_size=stored.size,
                status=status or Status.ACTIVE,
                uploaded_by=user.id,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            storage.remove_file(stored.path)
            raise
        return content

    # PUBLIC_INTERFACE
    async def list_contents(
        self,
        batch_id: int,
        content_type: Optional[ContentType] = None,
        status: Optional[Status] = None,
        search: Optional[str] = None,
        options: Optional[ListOptions] = None,
    ) -> List[Content]:
        validate_max_length(search, 100, "Search")
        return await self.repo.list_by_batch(
            batch_id, content_type=content_type, status=status, search=search, options=options
        )

    # PUBLIC_INTERFACE
    async def update_content(self, content: Content, payload: ContentUpdate, user: CurrentUser) -> Content:
        logger.info("ContentService: Updating content %s", content.id)
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        content = await self.repo.update(content, updated_by=user.id, **values)
        await self.commit()
        return content

    # PUBLIC_INTERFACE
    async def delete_content(self, content: Content) -> None:
        """Delete the row, then the stored file."""
        logger.info("ContentService: Deleting content %s", content.id)
        file_path = content.file_path
        await self.repo.delete(content)
        await self.commit()
        storage.remove_file(file_path)

    # PUBLIC_INTERFACE
    def get_file(self, content: Content) -> ContentFile:
        """Locate the stored file; the download name is the title plus the stored extension."""
        if not os.path.isfile(content.file_path):
            raise NotFoundError("File", "File not found on server")
        ext = os.path.splitext(content.file_path)[1]
        return ContentFile(
            path=content.file_path,
            filename=f"{content.title}{ext}",
            media_type=storage.mime_type_for(content.file_path),
        )
