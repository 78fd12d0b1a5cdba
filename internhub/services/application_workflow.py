"""
Application Workflow - submitting applications and moving them through
applied -> reviewed -> accepted | rejected.

Status changes are company actions. Which changes are allowed is decided by
the configured policy (APPLICATION_STATUS_POLICY):

- lenient:      any status may be set at any time (corrections allowed)
- forward_only: no step backwards; accepted and rejected are terminal

No history of earlier statuses is kept and nothing is sent to the student;
the new status is visible on their next fetch.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from internhub.core.config import get_settings
from internhub.core.errors import DuplicateApplication, IllegalStatusTransition, InternHubError, NotFound
from internhub.db.session import get_db_session
from internhub.db.tables import applications, company_profiles, internships, student_profiles
from internhub.schemas.schemas import (
    ApplicantSummary, ApplicationCreate, ApplicationResponse, ApplicationStatus, StatusCounts,
)

logger = logging.getLogger(__name__)

S = ApplicationStatus

FORWARD_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    S.applied: frozenset({S.reviewed, S.accepted, S.rejected}),
    S.reviewed: frozenset({S.accepted, S.rejected}),
    S.accepted: frozenset(),
    S.rejected: frozenset(),
}

LENIENT = "lenient"
FORWARD_ONLY = "forward_only"

APPLICANT_COLUMNS = [
    student_profiles.c.full_name, student_profiles.c.education_level, student_profiles.c.skills,
    student_profiles.c.location, student_profiles.c.bio, student_profiles.c.resume_url,
    student_profiles.c.avatar_url, student_profiles.c.github_url, student_profiles.c.linkedin_url,
    student_profiles.c.twitter_url, student_profiles.c.portfolio_url, student_profiles.c.projects,
]


def is_transition_allowed(current: ApplicationStatus, new: ApplicationStatus, policy: Optional[str] = None) -> bool:
    policy = policy or get_settings().application_status_policy
    if policy == LENIENT or current == new:
        return True
    return new in FORWARD_TRANSITIONS[current]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _application_query(with_applicant: bool = False):
    columns = [
        applications,
        internships.c.title.label("internship_title"),
        company_profiles.c.company_name,
        company_profiles.c.logo_url.label("company_logo_url"),
    ]
    query = (
        select(*columns)
        .join(internships, applications.c.internship_id == internships.c.id)
        .join(company_profiles, internships.c.company_id == company_profiles.c.id)
    )
    if with_applicant:
        query = query.add_columns(*APPLICANT_COLUMNS).join(
            student_profiles, applications.c.student_id == student_profiles.c.id
        )
    return query


def _to_response(row, with_applicant: bool = False) -> ApplicationResponse:
    data = dict(row)
    student = None
    if with_applicant:
        student = ApplicantSummary(id=data["student_id"], **{c.name: data.pop(c.name) for c in APPLICANT_COLUMNS})
    return ApplicationResponse(**data, student=student)


# ============================================================
# STUDENT SIDE
# ============================================================

def submit_application(student_id: str, data: ApplicationCreate) -> ApplicationResponse:
    """
    Create an application in `applied`.

    The (student, internship) unique constraint is the source of truth for
    duplicates: a second insert fails and is reported as DuplicateApplication.
    """
    with get_db_session() as db:
        row = db.execute(
            select(internships.c.id, internships.c.is_active).where(internships.c.id == data.internship_id)
        ).first()
    if not row:
        raise NotFound("Internship not found")
    if not row.is_active:
        raise InternHubError("This internship is not accepting applications", code="INTERNSHIP_CLOSED")

    application_id = str(uuid.uuid4())
    now = _now()
    try:
        with get_db_session() as db:
            db.execute(
                applications.insert().values(
                    id=application_id, student_id=student_id, internship_id=data.internship_id,
                    status=S.applied.value, cover_letter=data.cover_letter,
                    created_at=now, updated_at=now,
                )
            )
    except IntegrityError as e:
        logger.info("Duplicate application student=%s internship=%s", student_id, data.internship_id)
        raise DuplicateApplication(context={"internship_id": data.internship_id}) from e

    logger.info("Application %s submitted by student %s", application_id, student_id)
    return get_application(application_id)


def get_application(application_id: str) -> ApplicationResponse:
    with get_db_session() as db:
        row = db.execute(
            _application_query().where(applications.c.id == application_id)
        ).mappings().first()
    if not row:
        raise NotFound("Application not found")
    return _to_response(row)


def has_applied(student_id: str, internship_id: str) -> bool:
    with get_db_session() as db:
        count = db.execute(
            select(func.count()).select_from(applications).where(
                applications.c.student_id == student_id, applications.c.internship_id == internship_id
            )
        ).scalar()
    return count > 0


def list_student_applications(student_id: str, limit: Optional[int] = None) -> List[ApplicationResponse]:
    query = (
        _application_query()
        .where(applications.c.student_id == student_id)
        .order_by(applications.c.created_at.desc())
    )
    if limit:
        query = query.limit(limit)
    with get_db_session() as db:
        rows = db.execute(query).mappings().all()
    return [_to_response(r) for r in rows]


def count_student_applications(student_id: str) -> StatusCounts:
    with get_db_session() as db:
        rows = db.execute(
            select(applications.c.status, func.count())
            .where(applications.c.student_id == student_id)
            .group_by(applications.c.status)
        ).all()
    counts = {status: n for status, n in rows}
    return StatusCounts(**counts, total=sum(counts.values()))


# ============================================================
# COMPANY SIDE
# ============================================================

def list_company_applications(
    company_id: str,
    internship_id: Optional[str] = None,
    status: Optional[ApplicationStatus] = None,
    limit: Optional[int] = None,
) -> List[ApplicationResponse]:
    """Applications to the company's postings, with applicant profiles."""
    query = _application_query(with_applicant=True).where(internships.c.company_id == company_id)
    if internship_id:
        query = query.where(applications.c.internship_id == internship_id)
    if status:
        query = query.where(applications.c.status == status.value)
    query = query.order_by(applications.c.created_at.desc())
    if limit:
        query = query.limit(limit)

    with get_db_session() as db:
        rows = db.execute(query).mappings().all()
    return [_to_response(r, with_applicant=True) for r in rows]


def count_company_applications(company_id: str, status: Optional[ApplicationStatus] = None) -> int:
    query = (
        select(func.count())
        .select_from(applications.join(internships, applications.c.internship_id == internships.c.id))
        .where(internships.c.company_id == company_id)
    )
    if status:
        query = query.where(applications.c.status == status.value)
    with get_db_session() as db:
        return db.execute(query).scalar()


def get_company_application(company_id: str, application_id: str) -> ApplicationResponse:
    with get_db_session() as db:
        row = db.execute(
            _application_query(with_applicant=True).where(
                applications.c.id == application_id, internships.c.company_id == company_id
            )
        ).mappings().first()
    if not row:
        raise NotFound("Application not found")
    return _to_response(row, with_applicant=True)


def update_status(company_id: str, application_id: str, new_status: ApplicationStatus) -> ApplicationResponse:
    """Set the status of an application to one of the company's postings."""
    with get_db_session() as db:
        current = db.execute(
            select(applications.c.status)
            .join(internships, applications.c.internship_id == internships.c.id)
            .where(applications.c.id == application_id, internships.c.company_id == company_id)
        ).scalar()
        if current is None:
            raise NotFound("Application not found")

        current = ApplicationStatus(current)
        if not is_transition_allowed(current, new_status):
            raise IllegalStatusTransition(
                f"Cannot change status from '{current.value}' to '{new_status.value}'",
                context={"application_id": application_id},
            )

        db.execute(
            update(applications)
            .where(applications.c.id == application_id)
            .values(status=new_status.value, updated_at=_now())
        )

    logger.info("Application %s status %s -> %s", application_id, current.value, new_status.value)
    return get_company_application(company_id, application_id)
