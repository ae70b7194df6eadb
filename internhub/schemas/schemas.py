"""
Pydantic Schemas - Request Validation

All API request schemas in one file for simplicity.
JSON uses camelCase (companyName, jobId, minSalary); Python uses snake_case.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    user = "user"
    publisher = "publisher"
    admin = "admin"


class CompanySize(str, Enum):
    startup = "startup"
    small = "small"
    medium = "medium"
    large = "large"
    enterprise = "enterprise"


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_document(self, partial: bool = False) -> dict:
        """Dump as a MongoDB document (camelCase keys)."""
        if partial:
            return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.user

    @field_validator("role")
    @classmethod
    def no_self_made_admins(cls, v: UserRole) -> UserRole:
        if v is UserRole.admin:
            raise ValueError("admin accounts cannot be self-registered")
        return v


class LoginRequest(ApiModel):
    email: EmailStr
    password: str


# ============================================================
# GEO
# ============================================================

class GeoPoint(ApiModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2,
                                     description="[longitude, latitude]")

    @field_validator("coordinates")
    @classmethod
    def within_bounds(cls, v: List[float]) -> List[float]:
        longitude, latitude = v
        if not -180 <= longitude <= 180:
            raise ValueError("longitude must be between -180 and 180")
        if not -90 <= latitude <= 90:
            raise ValueError("latitude must be between -90 and 90")
        return v


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipPayload(ApiModel):
    job_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    department: Optional[str] = None
    address: Optional[str] = None
    min_salary: Optional[float] = Field(None, ge=0)
    max_salary: Optional[float] = Field(None, ge=0)
    duration_weeks: Optional[int] = Field(None, ge=1)
    is_remote: bool = False
    skills: List[str] = []
    geo_position: Optional[GeoPoint] = None

    @model_validator(mode="after")
    def salary_range(self):
        if self.min_salary is not None and self.max_salary is not None:
            if self.max_salary < self.min_salary:
                raise ValueError("maxSalary must not be lower than minSalary")
        return self


class InternshipCreate(ApiModel):
    company_name: str = Field(..., min_length=1)
    internship: InternshipPayload


class InternshipUpdate(ApiModel):
    job_id: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    department: Optional[str] = None
    address: Optional[str] = None
    min_salary: Optional[float] = Field(None, ge=0)
    max_salary: Optional[float] = Field(None, ge=0)
    duration_weeks: Optional[int] = Field(None, ge=1)
    is_remote: Optional[bool] = None
    skills: Optional[List[str]] = None
    geo_position: Optional[GeoPoint] = None

    @field_validator("job_id", "title", "is_remote", "skills")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(ApiModel):
    company_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    website: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[CompanySize] = None


class CompanyUpdate(ApiModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    website: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[CompanySize] = None

    @field_validator("company_name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v
