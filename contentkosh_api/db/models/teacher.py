from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import JSON, Date, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from contentkosh_api.db.base import Base, IntPkMixin, TimestampMixin
from contentkosh_api.db.models.enums import Gender, Status


class Teacher(IntPkMixin, TimestampMixin, Base):
    """Professional and personal profile of a TEACHER user."""
    __tablename__ = "teachers"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    business_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    qualification: Mapped[str] = mapped_column(String(255), nullable=False)
    experience_years: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    designation: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    languages: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    gender: Mapped[Optional[Gender]] = mapped_column(Enum(Gender, name="gender"), nullable=True)
    dob: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Status] = mapped_column(
        Enum(Status, name="teacher_status"), nullable=False, default=Status.ACTIVE
    )
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    updated_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
