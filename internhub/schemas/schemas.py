"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Request schemas carry the form rules for every write; they are checked
before any store call, so a failing record never reaches the database.
"""

import re
from pydantic import BaseModel, EmailStr, ValidationError, field_validator, model_validator
from typing import Optional, List, Type, TypeVar
from datetime import date, datetime
from enum import Enum

from internhub.core.errors import ValidationFailed, first_validation_error


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    company = "company"
    admin = "admin"


class EducationLevel(str, Enum):
    high_school = "high_school"
    university = "university"
    graduate = "graduate"
    other = "other"


class ApplicationStatus(str, Enum):
    applied = "applied"
    reviewed = "reviewed"
    accepted = "accepted"
    rejected = "rejected"


# ============================================================
# FIELD HELPERS
# ============================================================

URL_PATTERN = re.compile(r"^https?://.+")
MAX_URL_LENGTH = 500


def blank_to_none(value):
    """Empty form fields arrive as "" and are stored as NULL."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def check_optional_url(value: Optional[str]) -> Optional[str]:
    value = blank_to_none(value)
    if value is None:
        return None
    if len(value) > MAX_URL_LENGTH:
        raise ValueError("URL too long")
    if not URL_PATTERN.match(value):
        raise ValueError("Must be a valid URL starting with http:// or https://")
    return value


def check_max_length(value: Optional[str], limit: int, message: str) -> Optional[str]:
    if value is not None and len(value) > limit:
        raise ValueError(message)
    return value


def check_string_list(values: List[str], max_items: int, item_limit: int,
                      count_message: str, item_message: str) -> List[str]:
    if len(values) > max_items:
        raise ValueError(count_message)
    for item in values:
        if len(item) > item_limit:
            raise ValueError(item_message)
    return values


M = TypeVar("M", bound=BaseModel)


def validate(model: Type[M], data: dict) -> M:
    """Validate `data` against `model`, surfacing only the first failure."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise first_validation_error(e.errors()) from e


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    role: UserRole = UserRole.student
    full_name: Optional[str] = None
    company_name: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("role")
    @classmethod
    def no_admin_signup(cls, v: UserRole) -> UserRole:
        if v == UserRole.admin:
            raise ValueError("Admin accounts cannot be created through signup")
        return v

    @field_validator("full_name")
    @classmethod
    def full_name_length(cls, v: Optional[str]) -> Optional[str]:
        v = blank_to_none(v.strip() if isinstance(v, str) else v)
        return check_max_length(v, 100, "Name must be less than 100 characters")

    @field_validator("company_name")
    @classmethod
    def company_name_length(cls, v: Optional[str]) -> Optional[str]:
        v = blank_to_none(v.strip() if isinstance(v, str) else v)
        return check_max_length(v, 200, "Company name must be less than 200 characters")

    @model_validator(mode="after")
    def role_metadata(self):
        if self.role == UserRole.student and not self.full_name:
            raise ValueError("Please enter your full name")
        if self.role == UserRole.company and not self.company_name:
            raise ValueError("Please enter your company name")
        return self


class SigninRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: str
    role: UserRole
    redirect_to: str


class AccountResponse(BaseModel):
    id: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class ProjectItem(BaseModel):
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    technologies: List[str] = []

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        return check_max_length(v, 100, "Project title must be less than 100 characters")

    @field_validator("description")
    @classmethod
    def description_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 500, "Project description must be less than 500 characters")

    @field_validator("url")
    @classmethod
    def url_shape(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)

    @field_validator("technologies")
    @classmethod
    def technologies_cap(cls, v: List[str]) -> List[str]:
        return check_string_list(v, 20, 50, "Maximum 20 technologies per project", "Technology name too long")


class StudentProfileUpdate(BaseModel):
    full_name: str = ""
    education_level: EducationLevel = EducationLevel.university
    skills: List[str] = []
    interests: List[str] = []
    location: Optional[str] = None
    bio: Optional[str] = None
    resume_url: Optional[str] = None
    avatar_url: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    projects: List[ProjectItem] = []

    @field_validator("full_name")
    @classmethod
    def full_name_length(cls, v: str) -> str:
        return check_max_length(v.strip(), 100, "Name must be less than 100 characters")

    @field_validator("education_level", mode="before")
    @classmethod
    def education_default(cls, v):
        # an unset level is saved as university, the form default
        v = blank_to_none(v)
        return EducationLevel.university if v is None else v

    @field_validator("skills")
    @classmethod
    def skills_cap(cls, v: List[str]) -> List[str]:
        return check_string_list(v, 50, 50, "Maximum 50 skills", "Skill too long")

    @field_validator("interests")
    @classmethod
    def interests_cap(cls, v: List[str]) -> List[str]:
        return check_string_list(v, 30, 50, "Maximum 30 interests", "Interest too long")

    @field_validator("location")
    @classmethod
    def location_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 200, "Location must be less than 200 characters")

    @field_validator("bio")
    @classmethod
    def bio_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 2000, "Bio must be less than 2,000 characters")

    @field_validator("resume_url")
    @classmethod
    def resume_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 500, "Resume URL too long")

    @field_validator("avatar_url")
    @classmethod
    def avatar_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 1000, "Avatar URL too long")

    @field_validator("github_url", "linkedin_url", "twitter_url", "portfolio_url")
    @classmethod
    def social_urls(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)

    @field_validator("projects")
    @classmethod
    def projects_cap(cls, v: List[ProjectItem]) -> List[ProjectItem]:
        if len(v) > 20:
            raise ValueError("Maximum 20 projects")
        return v


class StudentProfileResponse(BaseModel):
    id: str
    account_id: str
    full_name: str
    education_level: Optional[EducationLevel] = None
    skills: List[str] = []
    interests: List[str] = []
    location: Optional[str] = None
    bio: Optional[str] = None
    resume_url: Optional[str] = None
    avatar_url: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    projects: List[ProjectItem] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("skills", "interests", "projects", mode="before")
    @classmethod
    def null_lists(cls, v):
        return v or []


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyProfileUpdate(BaseModel):
    company_name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("company_name")
    @classmethod
    def company_name_length(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name is required")
        return check_max_length(v, 200, "Company name must be less than 200 characters")

    @field_validator("description")
    @classmethod
    def description_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 5000, "Description must be less than 5,000 characters")

    @field_validator("industry")
    @classmethod
    def industry_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 100, "Industry must be less than 100 characters")

    @field_validator("location")
    @classmethod
    def location_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 200, "Location must be less than 200 characters")

    @field_validator("website")
    @classmethod
    def website_shape(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)

    @field_validator("logo_url")
    @classmethod
    def logo_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 1000, "Logo URL too long")


class CompanyProfileResponse(BaseModel):
    id: str
    account_id: str
    company_name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CompanySummary(BaseModel):
    """Public company fields shown next to a posting."""
    id: str
    company_name: str
    logo_url: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipCreate(BaseModel):
    title: str
    description: str
    requirements: Optional[str] = None
    duration: Optional[str] = None
    is_paid: bool = False
    salary_info: Optional[str] = None
    location: str = ""
    is_remote: bool = False
    industry: Optional[str] = None
    application_deadline: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Title must be at least 3 characters")
        return check_max_length(v, 200, "Title must be less than 200 characters")

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Description must be at least 10 characters")
        return check_max_length(v, 10000, "Description must be less than 10,000 characters")

    @field_validator("requirements")
    @classmethod
    def requirements_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 5000, "Requirements must be less than 5,000 characters")

    @field_validator("duration")
    @classmethod
    def duration_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 50, "Duration must be less than 50 characters")

    @field_validator("salary_info")
    @classmethod
    def salary_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 100, "Salary info must be less than 100 characters")

    @field_validator("location", mode="before")
    @classmethod
    def location_text(cls, v):
        if v is None:
            v = ""
        if not isinstance(v, str):
            return v
        v = v.strip()
        return check_max_length(v, 200, "Location must be less than 200 characters")

    @field_validator("industry")
    @classmethod
    def industry_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 100, "Industry must be less than 100 characters")

    @field_validator("application_deadline", mode="before")
    @classmethod
    def deadline_blank(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def remote_location(self):
        if self.is_remote:
            self.location = "Remote"
        elif not self.location:
            raise ValueError("Location is required for on-site positions")
        return self


class InternshipUpdate(BaseModel):
    """Partial update; merged onto the stored posting and re-validated as InternshipCreate."""
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    duration: Optional[str] = None
    is_paid: Optional[bool] = None
    salary_info: Optional[str] = None
    location: Optional[str] = None
    is_remote: Optional[bool] = None
    industry: Optional[str] = None
    application_deadline: Optional[date] = None
    is_active: Optional[bool] = None


class InternshipFilter(BaseModel):
    keyword: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None
    is_remote: Optional[bool] = None
    is_paid: Optional[bool] = None


class InternshipResponse(BaseModel):
    id: str
    company_id: str
    title: str
    description: str
    requirements: Optional[str] = None
    duration: Optional[str] = None
    is_paid: Optional[bool] = None
    salary_info: Optional[str] = None
    location: str
    is_remote: Optional[bool] = None
    industry: Optional[str] = None
    is_active: Optional[bool] = None
    application_deadline: Optional[date] = None
    created_at: datetime
    updated_at: datetime
    company: Optional[CompanySummary] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    internship_id: str
    cover_letter: Optional[str] = None

    @field_validator("cover_letter")
    @classmethod
    def cover_letter_length(cls, v: Optional[str]) -> Optional[str]:
        return check_max_length(blank_to_none(v), 5000, "Cover letter must be less than 5,000 characters")


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicantSummary(BaseModel):
    """Student fields a company sees on an application."""
    id: str
    full_name: str
    education_level: Optional[EducationLevel] = None
    skills: List[str] = []
    location: Optional[str] = None
    bio: Optional[str] = None
    resume_url: Optional[str] = None
    avatar_url: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    projects: List[ProjectItem] = []

    @field_validator("skills", "projects", mode="before")
    @classmethod
    def null_lists(cls, v):
        return v or []


class ApplicationResponse(BaseModel):
    id: str
    student_id: str
    internship_id: str
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    internship_title: Optional[str] = None
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    student: Optional[ApplicantSummary] = None


class ApplyStatusResponse(BaseModel):
    internship_id: str
    has_applied: bool


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class StatusCounts(BaseModel):
    applied: int = 0
    reviewed: int = 0
    accepted: int = 0
    rejected: int = 0
    total: int = 0


class StudentDashboardResponse(BaseModel):
    profile: StudentProfileResponse
    counts: StatusCounts
    recent_applications: List[ApplicationResponse]


class CompanyDashboardResponse(BaseModel):
    profile: CompanyProfileResponse
    total_internships: int
    active_internships: int
    total_applications: int
    pending_applications: int
    recent_applications: List[ApplicationResponse]


class AdminStatsResponse(BaseModel):
    total_users: int
    total_students: int
    total_companies: int
    total_internships: int
    total_applications: int


# ============================================================
# STORAGE SCHEMAS
# ============================================================

class UploadResponse(BaseModel):
    bucket: str
    path: str
    url: str


class SignedUrlResponse(BaseModel):
    url: str
    expires_in: Optional[int] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

