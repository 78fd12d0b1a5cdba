"""
Profile Service - student and company profiles.

Profiles are saved with upsert semantics: the first save for an account
creates the row, later saves overwrite it.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update

from internhub.core.errors import NotFound
from internhub.db.session import get_db_session
from internhub.db.tables import company_profiles, student_profiles
from internhub.schemas.schemas import (
    CompanyProfileResponse, CompanyProfileUpdate, StudentProfileResponse, StudentProfileUpdate,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# STUDENT PROFILES
# ============================================================

def get_student_profile(account_id: str) -> Optional[StudentProfileResponse]:
    with get_db_session() as db:
        row = db.execute(
            select(student_profiles).where(student_profiles.c.account_id == account_id)
        ).mappings().first()
    return StudentProfileResponse(**row) if row else None


def require_student_profile(account_id: str) -> StudentProfileResponse:
    profile = get_student_profile(account_id)
    if profile is None:
        raise NotFound("Student profile not found")
    return profile


def save_student_profile(account_id: str, data: StudentProfileUpdate) -> StudentProfileResponse:
    values = data.model_dump(mode="json")
    now = _now()
    with get_db_session() as db:
        existing = db.execute(
            select(student_profiles.c.id).where(student_profiles.c.account_id == account_id)
        ).scalar()
        if existing:
            db.execute(
                update(student_profiles)
                .where(student_profiles.c.id == existing)
                .values(**values, updated_at=now)
            )
        else:
            db.execute(
                student_profiles.insert().values(
                    id=str(uuid.uuid4()), account_id=account_id, created_at=now, updated_at=now, **values
                )
            )
            logger.info("Student profile created for account %s", account_id)
    return require_student_profile(account_id)


def set_student_resume(account_id: str, resume_url: str) -> StudentProfileResponse:
    """Point the profile at an uploaded resume, creating the profile if needed."""
    profile = get_student_profile(account_id)
    if profile is None:
        return save_student_profile(account_id, StudentProfileUpdate(resume_url=resume_url))
    with get_db_session() as db:
        db.execute(
            update(student_profiles)
            .where(student_profiles.c.account_id == account_id)
            .values(resume_url=resume_url, updated_at=_now())
        )
    return require_student_profile(account_id)


# ============================================================
# COMPANY PROFILES
# ============================================================

def get_company_profile(account_id: str) -> Optional[CompanyProfileResponse]:
    with get_db_session() as db:
        row = db.execute(
            select(company_profiles).where(company_profiles.c.account_id == account_id)
        ).mappings().first()
    return CompanyProfileResponse(**row) if row else None


def require_company_profile(account_id: str) -> CompanyProfileResponse:
    profile = get_company_profile(account_id)
    if profile is None:
        raise NotFound("Company profile not found")
    return profile


def save_company_profile(account_id: str, data: CompanyProfileUpdate) -> CompanyProfileResponse:
    values = data.model_dump()
    now = _now()
    with get_db_session() as db:
        existing = db.execute(
            select(company_profiles.c.id).where(company_profiles.c.account_id == account_id)
        ).scalar()
        if existing:
            db.execute(
                update(company_profiles)
                .where(company_profiles.c.id == existing)
                .values(**values, updated_at=now)
            )
        else:
            db.execute(
                company_profiles.insert().values(
                    id=str(uuid.uuid4()), account_id=account_id, created_at=now, updated_at=now, **values
                )
            )
            logger.info("Company profile created for account %s", account_id)
    return require_company_profile(account_id)


def set_company_logo(account_id: str, logo_url: str) -> CompanyProfileResponse:
    with get_db_session() as db:
        result = db.execute(
            update(company_profiles)
            .where(company_profiles.c.account_id == account_id)
            .values(logo_url=logo_url, updated_at=_now())
        )
        if result.rowcount == 0:
            raise NotFound("Please complete your company profile first")
    return require_company_profile(account_id)
