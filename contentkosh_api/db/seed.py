"""
Database seeding utilities for reference data.

Seeds:
- The permission catalogue (content and announcement codes)
- Optionally, a demo business with one user per role

Usage:
  python -m contentkosh_api.db.run_migrations upgrade head
  python -m contentkosh_api.db.seed [--demo]
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.security import get_password_hash
from contentkosh_api.db.models.business import Business
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.db.session import get_async_session
from contentkosh_api.repositories.business import BusinessRepository
from contentkosh_api.repositories.security import PermissionRepository, UserRepository

logger = logging.getLogger(__name__)

PERMISSIONS: Dict[str, str] = {
    "CONTENT_CREATE": "Upload content to batches",
    "CONTENT_EDIT": "Edit batch content",
    "CONTENT_DELETE": "Delete batch content",
    "CONTENT_VIEW": "View batch content",
    "ANNOUNCEMENT_CREATE": "Create announcements",
    "ANNOUNCEMENT_VIEW": "View announcements",
}

DEMO_BUSINESS_SLUG = "demo-institute"
DEMO_PASSWORD = "password123"
DEMO_USERS: List[Tuple[str, str, UserRole]] = [
    ("superadmin@demo.contentkosh.com", "Super Admin", UserRole.SUPERADMIN),
    ("admin@demo.contentkosh.com", "Demo Admin", UserRole.ADMIN),
    ("teacher@demo.contentkosh.com", "Demo Teacher", UserRole.TEACHER),
    ("student@demo.contentkosh.com", "Demo Student", UserRole.STUDENT),
]


# PUBLIC_INTERFACE
async def seed_all(demo: bool = False) -> None:
    """
    Seed the database with reference data.

    This function:
      - Ensures every permission code of the catalogue exists
      - With demo=True, creates a demo business and one user per role
    Existing rows are left untouched, so seeding can be repeated.
    """
    async for session in get_async_session():
        await _seed_permissions(session)
        if demo:
            business = await _ensure_demo_business(session)
            await _seed_demo_users(session, business)
        await session.commit()


async def _seed_permissions(session: AsyncSession) -> None:
    repo = PermissionRepository(session)
    for code, description in PERMISSIONS.items():
        await repo.ensure_permission(code, description)
    logger.info("Seeded %d permission code(s)", len(PERMISSIONS))


async def _ensure_demo_business(session: AsyncSession) -> Business:
    repo = BusinessRepository(session)
    business = await repo.get_by_slug(DEMO_BUSINESS_SLUG)
    if business is None:
        business = await repo.create(institute_name="Demo Institute", slug=DEMO_BUSINESS_SLUG)
        logger.info("Created demo business %s", business.id)
    return business


async def _seed_demo_users(session: AsyncSession, business: Business) -> None:
    repo = UserRepository(session)
    hashed = get_password_hash(DEMO_PASSWORD)
    for email, name, role in DEMO_USERS:
        if await repo.get_by_email(email):
            continue
        # SUPERADMIN is business-agnostic
        business_id = None if role == UserRole.SUPERADMIN else business.id
        await repo.create(email=email, password=hashed, name=name, role=role, business_id=business_id)
        logger.info("Created demo %s user %s", role.value, email)


if __name__ == "__main__":
    asyncio.run(seed_all(demo="--demo" in sys.argv[1:]))
