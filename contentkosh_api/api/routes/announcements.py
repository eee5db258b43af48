from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.deps import get_current_user, require_permission, require_roles
from contentkosh_api.core.query import ListOptions, list_options
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.announcement import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.services.announcements import AnnouncementService

router = APIRouter(prefix="/announcements", tags=["Announcements"])

AnnouncementIdPath = Path(..., gt=0, description="Announcement ID")


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ApiResponse[AnnouncementRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create announcement",
    description="Requires ADMIN or the ANNOUNCEMENT_CREATE permission.",
)
async def create_announcement(
    payload: AnnouncementCreate,
    user: CurrentUser = Depends(require_permission("ANNOUNCEMENT_CREATE")),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    announcement = await AnnouncementService(session).create_announcement(payload, user)
    return ok(AnnouncementRead.model_validate(announcement), "Announcement created successfully")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ApiResponse[List[AnnouncementRead]],
    summary="List announcements",
    description="Admins see all announcements of their business; other roles see active ones addressed to them.",
)
async def list_announcements(
    user: CurrentUser = Depends(get_current_user),
    options: ListOptions = Depends(list_options),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    announcements = await AnnouncementService(session).list_announcements(user, options)
    return ok([AnnouncementRead.model_validate(a) for a in announcements])


# PUBLIC_INTERFACE
@router.get("/{announcement_id}", response_model=ApiResponse[AnnouncementRead], summary="Get announcement")
async def get_announcement(
    announcement_id: int = AnnouncementIdPath,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    announcement = await AnnouncementService(session).get_announcement(announcement_id, user)
    return ok(AnnouncementRead.model_validate(announcement))


# PUBLIC_INTERFACE
@router.put("/{announcement_id}", response_model=ApiResponse[AnnouncementRead], summary="Update announcement")
async def update_announcement(
    payload: AnnouncementUpdate,
    announcement_id: int = AnnouncementIdPath,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    announcement = await AnnouncementService(session).update_announcement(announcement_id, payload, user)
    return ok(AnnouncementRead.model_validate(announcement), "Announcement updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{announcement_id}",
    response_model=ApiResponse[None],
    summary="Delete announcement",
    description="Soft delete: the announcement is deactivated.",
)
async def delete_announcement(
    announcement_id: int = AnnouncementIdPath,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await AnnouncementService(session).delete_announcement(announcement_id, user)
    return ok(None, "Announcement deleted successfully")
