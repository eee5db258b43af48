from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from contentkosh_api.db.models.enums import Gender, Status
from .common import CamelModel


class ProfessionalDetails(CamelModel):
    qualification: str = Field(..., description="Highest qualification")
    experience_years: int = Field(..., description="Years of teaching experience")
    designation: str = Field(..., description="Designation")
    bio: Optional[str] = Field(None)
    languages: Optional[List[str]] = Field(None, description="Languages taught in")

    @field_validator("qualification")
    @classmethod
    def _qualification(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Qualification is required")
        return v

    @field_validator("designation")
    @classmethod
    def _designation(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Designation is required")
        return v

    @field_validator("bio")
    @classmethod
    def _strip_bio(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class PersonalDetails(CamelModel):
    gender: Optional[Gender] = Field(None)
    dob: Optional[date] = Field(None, description="Date of birth")
    address: Optional[str] = Field(None)

    @field_validator("address")
    @classmethod
    def _strip_address(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class TeacherCreate(CamelModel):
    """Create a teacher profile for an existing user of the business."""
    user_id: int = Field(..., gt=0)
    business_id: int = Field(..., gt=0)
    professional: ProfessionalDetails
    personal: Optional[PersonalDetails] = None


class TeacherUpdate(CamelModel):
    professional: Optional[ProfessionalDetails] = None
    personal: Optional[PersonalDetails] = None
    status: Optional[Status] = None


class TeacherRead(CamelModel):
    id: int
    user_id: int
    business_id: int
    qualification: str
    experience_years: int
    designation: str
    bio: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    gender: Optional[Gender] = None
    dob: Optional[date] = None
    address: Optional[str] = None
    status: Status
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
