from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import BadRequestError, ForbiddenError, NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.enums import Status
from contentkosh_api.db.models.teacher import Teacher
from contentkosh_api.repositories.security import UserRepository
from contentkosh_api.repositories.teacher import TeacherRepository
from contentkosh_api.schemas.teacher import TeacherCreate, TeacherUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)


class TeacherService(BaseService):
    """Teacher profiles: one per user, scoped to the user's business."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TeacherRepository(session)
        self.users = UserRepository(session)

    # PUBLIC_INTERFACE
    async def create_teacher(self, payload: TeacherCreate, user: CurrentUser) -> Teacher:
        logger.info(
            "TeacherService: Creating new teacher profile for user %s in business %s",
            payload.user_id,
            payload.business_id,
        )
        if not user.is_superadmin and user.business_id != payload.business_id:
            raise ForbiddenError("You do not have access to this business")

        target = await self.users.get_by_id(payload.user_id)
        if target is None:
            raise NotFoundError("User")
        if target.business_id != payload.business_id:
            raise BadRequestError("User does not belong to the specified business")
        if await self.repo.get_by_user_id(payload.user_id):
            raise BadRequestError("Teacher profile already exists for this user")

        professional = payload.professional
        if professional.experience_years < 0:
            raise BadRequestError("Experience years cannot be negative")
        personal = payload.personal

        teacher = await self.repo.create(
            user_id=payload.user_id,
            business_id=payload.business_id,
            qualification=professional.qualification,
            experience_years=professional.experience_years,
            designation=professional.designation,
            bio=professional.bio,
            languages=professional.languages or [],
            gender=personal.gender if personal else None,
            dob=personal.dob if personal else None,
            address=personal.address if personal else None,
            status=Status.ACTIVE,
            created_by=user.id,
        )
        await self.commit()
        logger.info("TeacherService: Teacher profile created: %s", teacher.id)
        return teacher

    # PUBLIC_INTERFACE
    async def get_teacher(self, teacher_id: int, user: CurrentUser) -> Teacher:
        teacher = await self.repo.get_by_id(teacher_id)
        if teacher is None:
            raise NotFoundError("Teacher profile")
        if not (user.is_superadmin or user.id == teacher.user_id or user.business_id == teacher.business_id):
            raise ForbiddenError("You do not have access to this teacher profile")
        return teacher

    # PUBLIC_INTERFACE
    async def list_teachers(self, user: CurrentUser, options: Optional[ListOptions] = None) -> List[Teacher]:
        if user.business_id is None:
            raise ForbiddenError("User is not associated with a business")
        return await self.repo.list_by_business(user.business_id, options)

    # PUBLIC_INTERFACE
    async def update_teacher(self, teacher_id: int, payload: TeacherUpdate, user: CurrentUser) -> Teacher:
        """
        Update a profile. Allowed for SUPERADMIN, admins of the profile's
        business and the teacher themself.
        """
        logger.info("TeacherService: Updating teacher profile %s", teacher_id)
        teacher = await self.repo.get_by_id(teacher_id)
        if teacher is None:
            raise NotFoundError("Teacher profile")
        same_business_admin = user.is_admin and user.business_id == teacher.business_id
        if not (user.is_superadmin or same_business_admin or user.id == teacher.user_id):
            raise ForbiddenError("You do not have permission to update this teacher profile")

        values: Dict[str, Any] = {}
        if payload.professional is not None:
            professional = payload.professional
            if professional.experience_years < 0:
                raise BadRequestError("Experience years cannot be negative")
            values.update(
                qualification=professional.qualification,
                experience_years=professional.experience_years,
                designation=professional.designation,
                bio=professional.bio,
            )
            if professional.languages is not None:
                values["languages"] = professional.languages
        if payload.personal is not None:
            values.update(payload.personal.model_dump(exclude_unset=True))
        if payload.status is not None:
            values["status"] = payload.status

        teacher = await self.repo.update(teacher, updated_by=user.id, **values)
        await self.commit()
        return teacher
