from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.errors import BadRequestError, NotFoundError
from contentkosh_api.core.query import ListOptions
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.models.academics import Exam
from contentkosh_api.db.models.enums import UserRole
from contentkosh_api.repositories.academics import ExamRepository
from contentkosh_api.schemas.academics import ExamCreate, ExamUpdate
from contentkosh_api.services.base import BaseService

logger = logging.getLogger(__name__)

DUPLICATE_EXAM_MESSAGE = "Exam with this name already exists for this business"


class ExamService(BaseService):
    """
    Exam catalogue of a business.

    Exam names are unique among the ACTIVE exams of a business. The check runs
    as read-then-write inside one SERIALIZABLE transaction so the caller gets an
    explicit duplicate-name error; a unique violation surfacing at commit maps
    to the same error.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ExamRepository(session)

    async def _begin_serializable(self) -> None:
        # Isolation can only be chosen when the connection is first procured.
        if self.session.in_transaction():
            await self.session.commit()
        await self.session.connection(execution_options={"isolation_level": "SERIALIZABLE"})

    async def _commit_unique(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise BadRequestError(DUPLICATE_EXAM_MESSAGE)

    # PUBLIC_INTERFACE
    async def create_exam(self, business_id: int, payload: ExamCreate, user: CurrentUser) -> Exam:
        """Create an exam in the business; duplicate active names are rejected with 400."""
        logger.info("ExamService: Creating new exam '%s' for business %s", payload.name, business_id)
        await self._begin_serializable()
        try:
            if await self.repo.find_active_by_name(business_id, payload.name):
                raise BadRequestError(DUPLICATE_EXAM_MESSAGE)
            exam = await self.repo.create(
                name=payload.name,
                code=payload.code,
                description=payload.description,
                start_date=payload.start_date,
                end_date=payload.end_date,
                business_id=business_id,
                created_by=user.id,
            )
        except IntegrityError:
            await self.session.rollback()
            raise BadRequestError(DUPLICATE_EXAM_MESSAGE)
        except Exception:
            await self.session.rollback()
            raise
        await self._commit_unique()
        logger.info("ExamService: Exam created successfully: %s", exam.id)
        return exam

    # PUBLIC_INTERFACE
    async def get_exam(self, business_id: int, exam_id: int) -> Exam:
        exam = await self.repo.get_by_id(exam_id)
        if exam is None or exam.business_id != business_id:
            logger.error("ExamService: Exam with ID %s not found", exam_id)
            raise NotFoundError("Exam")
        return exam

    # PUBLIC_INTERFACE
    async def list_exams(
        self, business_id: int, user: CurrentUser, options: Optional[ListOptions] = None
    ) -> List[Exam]:
        """Active exams of the business; teachers only see exams they teach a batch in."""
        teacher_id = user.id if user.role == UserRole.TEACHER else None
        return await self.repo.list_active_for_business(
            business_id, teacher_user_id=teacher_id, options=options
        )

    # PUBLIC_INTERFACE
    async def update_exam(
        self, business_id: int, exam_id: int, payload: ExamUpdate, user: CurrentUser
    ) -> Exam:
        logger.info("ExamService: Updating exam %s", exam_id)
        await self._begin_serializable()
        try:
            exam = await self.get_exam(business_id, exam_id)
            values = payload.model_dump(exclude_unset=True)
            # name and status are NOT NULL; null leaves them unchanged
            for key in ("name", "status"):
                if values.get(key, "") is None:
                    values.pop(key)
            if "name" in values and await self.repo.find_active_by_name(
                business_id, values["name"], exclude_id=exam_id
            ):
                raise BadRequestError(DUPLICATE_EXAM_MESSAGE)
            exam = await self.repo.update(exam, updated_by=user.id, **values)
        except IntegrityError:
            await self.session.rollback()
            raise BadRequestError(DUPLICATE_EXAM_MESSAGE)
        except Exception:
            await self.session.rollback()
            raise
        await self._commit_unique()
        logger.info("ExamService: Exam updated successfully: %s", exam.name)
        return exam

    # PUBLIC_INTERFACE
    async def delete_exam(self, business_id: int, exam_id: int, user: CurrentUser) -> None:
        """Soft delete: the exam is marked INACTIVE and keeps its row."""
        logger.info("ExamService: Deleting exam %s", exam_id)
        exam = await self.get_exam(business_id, exam_id)
        await self.repo.soft_delete(exam, updated_by=user.id)
        await self.commit()
        logger.info("ExamService: Exam deleted successfully: ID %s", exam_id)
