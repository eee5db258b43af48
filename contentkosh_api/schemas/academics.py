from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from contentkosh_api.db.models.enums import Status
from .common import CamelModel


def _bounded_name(v: Optional[str], label: str, max_length: int, *, required: bool) -> Optional[str]:
    if v is None:
        if required:
            raise ValueError(f"{label} is required")
        return v
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required" if required else f"{label} cannot be empty")
    if len(v) > max_length:
        raise ValueError(f"{label} must be shorter than {max_length} characters")
    return v


# Exams
class ExamCreate(CamelModel):
    """Create exam payload. The business is taken from the request path."""
    name: Optional[str] = Field(None, validate_default=True, description="Exam name, unique among active exams")
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)
    business_id: Optional[int] = Field(None, description="Ignored in favour of the path business id")

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _bounded_name(v, "Exam name", 50, required=True)


class ExamUpdate(CamelModel):
    name: Optional[str] = Field(None)
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)
    status: Optional[Status] = Field(None)

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _bounded_name(v, "Exam name", 50, required=False)


class ExamRead(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Status
    business_id: int
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# Courses
class CourseCreate(CamelModel):
    """Create course payload. The exam is taken from the request path."""
    name: Optional[str] = Field(None, validate_default=True)
    description: Optional[str] = Field(None, max_length=500)
    duration: Optional[str] = Field(None, max_length=50)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)
    status: Optional[Status] = Field(None)

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _bounded_name(v, "Course name", 100, required=True)


class CourseUpdate(CamelModel):
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None, max_length=500)
    duration: Optional[str] = Field(None, max_length=50)
    start_date: Optional[datetime] = Field(None)
    end_date: Optional[datetime] = Field(None)
    status: Optional[Status] = Field(None)

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _bounded_name(v, "Course name", 100, required=False)


class CourseRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    duration: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Status
    exam_id: int
    created_at: datetime
    updated_at: datetime


# Subjects
class SubjectCreate(CamelModel):
    name: Optional[str] = Field(None, validate_default=True)
    description: Optional[str] = Field(None, max_length=500)
    status: Optional[Status] = Field(None)

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _bounded_name(v, "Subject name", 100, required=True)


class SubjectUpdate(CamelModel):
    name: Optional[str] = Field(None)
    description: Optional[str] = Field(None, max_length=500)
    status: Optional[Status] = Field(None)

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return _bounded_name(v, "Subject name", 100, required=False)


class SubjectRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    status: Status
    course_id: int
    created_at: datetime
    updated_at: datetime
