from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core import access
from contentkosh_api.core.deps import batch_access, content_access, get_current_user, require_roles
from contentkosh_api.core.query import ListOptions, list_options
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.batch import Batch
from contentkosh_api.db.models.content import Content
from contentkosh_api.db.models.enums import ContentType, Status, UserRole
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.schemas.content import ContentRead, ContentUpdate
from contentkosh_api.services.content import ContentService

router = APIRouter(tags=["Content"])


# PUBLIC_INTERFACE
@router.post(
    "/batches/{batch_id}/contents",
    response_model=ApiResponse[ContentRead],
    status_code=status.HTTP_201_CREATED,
    summary="Upload content",
    description=(
        "Upload a PDF (.pdf) or image (.jpg, .jpeg, .png) to a batch. The type is taken from the "
        "file extension; a declared type must match it."
    ),
)
async def create_content(
    file: UploadFile = File(..., description="PDF or image file"),
    title: str = Form(..., description="Content title"),
    type: Optional[ContentType] = Form(default=None, description="PDF or IMAGE"),
    content_status: Optional[Status] = Form(default=None, alias="status", description="ACTIVE or INACTIVE"),
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    batch: Batch = Depends(batch_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await access.ensure_batch_member(session, batch.id, user, action="create")
    content = await ContentService(session).create_content(
        batch.id, file, title, user, declared_type=type, status=content_status
    )
    return ok(ContentRead.model_validate(content), "Content created successfully")


# PUBLIC_INTERFACE
@router.get(
    "/batches/{batch_id}/contents",
    response_model=ApiResponse[List[ContentRead]],
    summary="List content of batch",
)
async def list_contents(
    type: Optional[ContentType] = Query(default=None, description="Filter by content type"),
    content_status: Optional[Status] = Query(default=None, alias="status", description="Filter by status"),
    search: Optional[str] = Query(default=None, description="Case-insensitive title search"),
    user: CurrentUser = Depends(get_current_user),
    batch: Batch = Depends(batch_access),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await access.ensure_batch_member(session, batch.id, user)
    contents = await ContentService(session).list_contents(
        batch.id, content_type=type, status=content_status, search=search, options=options
    )
    return ok([ContentRead.model_validate(c) for c in contents])


# PUBLIC_INTERFACE
@router.get("/contents/{content_id}", response_model=ApiResponse[ContentRead], summary="Get content")
async def get_content(content: Content = Depends(content_access)) -> ApiResponse:
    return ok(ContentRead.model_validate(content))


# PUBLIC_INTERFACE
@router.get(
    "/contents/{content_id}/file",
    summary="Download content file",
    response_class=FileResponse,
)
async def get_content_file(
    content: Content = Depends(content_access),
    session: AsyncSession = Depends(get_async_session),
) -> FileResponse:
    stored = ContentService(session).get_file(content)
    return FileResponse(stored.path, media_type=stored.media_type, filename=stored.filename)


# PUBLIC_INTERFACE
@router.put(
    "/contents/{content_id}",
    response_model=ApiResponse[ContentRead],
    summary="Update content",
    description="Only the title and status can change.",
)
async def update_content(
    payload: ContentUpdate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER)),
    content: Content = Depends(content_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    updated = await ContentService(session).update_content(content, payload, user)
    return ok(ContentRead.model_validate(updated), "Content updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/contents/{content_id}",
    response_model=ApiResponse[None],
    summary="Delete content",
    description="Delete the record and its stored file.",
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.TEACHER))],
)
async def delete_content(
    content: Content = Depends(content_access),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await ContentService(session).delete_content(content)
    return ok(None, "Content deleted successfully")
