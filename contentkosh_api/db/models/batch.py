from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contentkosh_api.db.base import Base, IntPkMixin, TimestampMixin
from contentkosh_api.db.models.security import User


class Batch(IntPkMixin, TimestampMixin, Base):
    """Scheduled cohort of a course."""
    __tablename__ = "batches"

    code_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    course_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    updated_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    batch_users: Mapped[list["BatchUser"]] = relationship(
        "BatchUser", back_populates="batch", cascade="all, delete-orphan", passive_deletes=True
    )


class BatchUser(IntPkMixin, TimestampMixin, Base):
    """Membership of a teacher or student in a batch."""
    __tablename__ = "batch_users"
    __table_args__ = (
        UniqueConstraint("batch_id", "user_id", name="uq_batch_users_batch_user"),
    )

    batch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    batch: Mapped["Batch"] = relationship("Batch", back_populates="batch_users")
    user: Mapped["User"] = relationship(User)
