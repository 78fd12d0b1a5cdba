"""
Table definitions (SQLAlchemy Core).

Tables:
1. accounts           - identity + role (student/company/admin)
2. auth_sessions      - one row per sign-in, revoked on sign-out
3. student_profiles   - owned by one student account
4. company_profiles   - owned by one company account
5. internships        - owned by one company profile
6. applications       - student <-> internship, unique per pair

Enum-like columns are stored as strings; the allowed values live in
internhub.schemas.schemas and are checked before every write.
"""

from sqlalchemy import (
    JSON, Boolean, Column, Date, DateTime, ForeignKey, Index, MetaData, String, Table, Text,
    UniqueConstraint, func, true,
)

metadata = MetaData()


def _timestamps():
    return [
        Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
        Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    ]


accounts = Table(
    "accounts",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(320), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False, server_default="student"),
    Column("is_active", Boolean, nullable=False, server_default=true()),
    *_timestamps(),
)

auth_sessions = Table(
    "auth_sessions",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("account_id", String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("revoked_at", DateTime(timezone=True), nullable=True),
)

student_profiles = Table(
    "student_profiles",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("account_id", String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
    Column("full_name", String(100), nullable=False, server_default=""),
    Column("education_level", String(20), nullable=True),
    Column("skills", JSON, nullable=True),
    Column("interests", JSON, nullable=True),
    Column("bio", Text, nullable=True),
    Column("location", String(200), nullable=True),
    Column("resume_url", String(500), nullable=True),
    Column("avatar_url", String(1000), nullable=True),
    Column("github_url", String(500), nullable=True),
    Column("linkedin_url", String(500), nullable=True),
    Column("twitter_url", String(500), nullable=True),
    Column("portfolio_url", String(500), nullable=True),
    Column("projects", JSON, nullable=True),
    *_timestamps(),
)

company_profiles = Table(
    "company_profiles",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("account_id", String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
    Column("company_name", String(200), nullable=False, server_default=""),
    Column("description", Text, nullable=True),
    Column("industry", String(100), nullable=True),
    Column("location", String(200), nullable=True),
    Column("website", String(500), nullable=True),
    Column("logo_url", String(1000), nullable=True),
    *_timestamps(),
)

internships = Table(
    "internships",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("company_id", String(36), ForeignKey("company_profiles.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("requirements", Text, nullable=True),
    Column("duration", String(50), nullable=True),
    Column("is_paid", Boolean, nullable=True),
    Column("salary_info", String(100), nullable=True),
    Column("location", String(200), nullable=False),
    Column("is_remote", Boolean, nullable=True),
    Column("industry", String(100), nullable=True),
    Column("is_active", Boolean, nullable=True, server_default=true()),
    Column("application_deadline", Date, nullable=True),
    *_timestamps(),
    Index("ix_internships_active_created", "is_active", "created_at"),
)

applications = Table(
    "applications",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("student_id", String(36), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("internship_id", String(36), ForeignKey("internships.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("status", String(20), nullable=False, server_default="applied"),
    Column("cover_letter", Text, nullable=True),
    *_timestamps(),
    UniqueConstraint("student_id", "internship_id", name="uq_applications_student_internship"),
)
