"""
ORM models for tenants, users and permissions, the exam/course/subject
catalogue, batches and their members, uploaded content, teacher profiles and
announcements.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .enums import ContentType, Gender, Status, UserRole  # noqa: F401
from .business import Announcement, Business  # noqa: F401
from .security import Permission, RefreshToken, RolePermission, User  # noqa: F401
from .academics import Course, Exam, Subject  # noqa: F401
from .batch import Batch, BatchUser  # noqa: F401
from .content import Content  # noqa: F401
from .teacher import Teacher  # noqa: F401
