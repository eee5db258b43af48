from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contentkosh_api.db.base import Base, IntPkMixin, TimestampMixin, utcnow
from contentkosh_api.db.models.enums import Status, UserRole


class User(IntPkMixin, TimestampMixin, Base):
    """Account belonging to one business (SUPERADMIN accounts may have none)."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    mobile: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, unique=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER
    )
    status: Mapped[Status] = mapped_column(
        Enum(Status, name="user_status"), nullable=False, default=Status.ACTIVE
    )
    business_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("businesses.id", ondelete="SET NULL"), nullable=True, index=True
    )

    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary="role_permissions",
        primaryjoin="User.id==RolePermission.user_id",
        secondaryjoin="Permission.id==RolePermission.permission_id",
        viewonly=True,
    )


class Permission(IntPkMixin, TimestampMixin, Base):
    """Fine-grained capability code granted to individual users."""
    __tablename__ = "permissions"

    code: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class RolePermission(IntPkMixin, TimestampMixin, Base):
    """Grant of a permission to a user, independent of the user's coarse role."""
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("user_id", "permission_id", name="uq_role_permissions_user_permission"),
    )

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    permission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False
    )

    permission: Mapped["Permission"] = relationship("Permission")


class RefreshToken(IntPkMixin, Base):
    """Opaque, rotatable refresh token."""
    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship("User", lazy="joined")
