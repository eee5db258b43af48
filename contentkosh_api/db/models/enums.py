from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    SUPERADMIN = "SUPERADMIN"
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    USER = "USER"


class Status(str, enum.Enum):
    """Lifecycle status shared by users, exams, courses, subjects, content and teacher profiles."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ContentType(str, enum.Enum):
    PDF = "PDF"
    IMAGE = "IMAGE"


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
