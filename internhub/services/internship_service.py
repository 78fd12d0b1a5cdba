"""
Internship Service - create, search, read, update and delete postings.

Only the owning company may edit or delete a posting; admins may delete any.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, func, select, update

from internhub.core.errors import AccessDenied, NotFound
from internhub.core.session import SessionContext
from internhub.db.session import get_db_session
from internhub.db.tables import applications, internships
from internhub.schemas.schemas import (
    InternshipCreate, InternshipFilter, InternshipResponse, InternshipUpdate, UserRole, validate,
)
from internhub.services.filter_composer import (
    base_listing_query, compose_internship_query, to_internship_response,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = list(InternshipCreate.model_fields)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_internship(company_id: str, data: InternshipCreate) -> InternshipResponse:
    """Insert a validated posting for `company_id`. New postings start active."""
    internship_id = str(uuid.uuid4())
    now = utcnow()
    with get_db_session() as db:
        db.execute(
            internships.insert().values(
                id=internship_id, company_id=company_id, is_active=True,
                created_at=now, updated_at=now, **data.model_dump(),
            )
        )
    logger.info("Internship %s created by company %s", internship_id, company_id)
    return get_internship(internship_id)


def search_internships(filters: Optional[InternshipFilter] = None) -> List[InternshipResponse]:
    """Active postings matching `filters`, newest first. No pagination."""
    with get_db_session() as db:
        rows = db.execute(compose_internship_query(filters)).mappings().all()
    return [to_internship_response(r) for r in rows]


def get_internship(internship_id: str) -> InternshipResponse:
    with get_db_session() as db:
        row = db.execute(
            base_listing_query().where(internships.c.id == internship_id)
        ).mappings().first()
    if not row:
        raise NotFound("Internship not found")
    return to_internship_response(row, include_company_details=True)


def list_company_internships(company_id: str) -> List[InternshipResponse]:
    """All postings of one company, active or not."""
    with get_db_session() as db:
        rows = db.execute(
            base_listing_query()
            .where(internships.c.company_id == company_id)
            .order_by(internships.c.created_at.desc())
        ).mappings().all()
    return [to_internship_response(r) for r in rows]


def list_all_internships() -> List[InternshipResponse]:
    """Every posting (admin moderation view)."""
    with get_db_session() as db:
        rows = db.execute(
            base_listing_query().order_by(internships.c.created_at.desc())
        ).mappings().all()
    return [to_internship_response(r) for r in rows]


def _owned_row(db, internship_id: str, company_id: str):
    row = db.execute(select(internships).where(internships.c.id == internship_id)).mappings().first()
    if not row:
        raise NotFound("Internship not found")
    if row["company_id"] != company_id:
        raise AccessDenied("Internship not found or access denied")
    return row


def update_internship(internship_id: str, company_id: str, changes: InternshipUpdate) -> InternshipResponse:
    """
    Apply a partial update. The merged posting is validated as a whole so the
    location/remote rule holds for the stored record, not just the patch.
    """
    patch = changes.model_dump(exclude_unset=True)
    is_active = patch.pop("is_active", None)

    with get_db_session() as db:
        current = _owned_row(db, internship_id, company_id)
        merged = {field: current[field] for field in EDITABLE_FIELDS}
        merged.update(patch)
        validated = validate(InternshipCreate, merged)

        values = validated.model_dump()
        if is_active is not None:
            values["is_active"] = is_active
        db.execute(
            update(internships)
            .where(internships.c.id == internship_id)
            .values(**values, updated_at=utcnow())
        )
    logger.info("Internship %s updated", internship_id)
    return get_internship(internship_id)


def delete_internship(internship_id: str, session: SessionContext, company_id: Optional[str] = None) -> None:
    """Owners delete their own postings; admins delete any. Applications go with it."""
    with get_db_session() as db:
        if session.role == UserRole.admin:
            exists = db.execute(
                select(func.count()).select_from(internships).where(internships.c.id == internship_id)
            ).scalar()
            if not exists:
                raise NotFound("Internship not found")
        else:
            _owned_row(db, internship_id, company_id)

        db.execute(delete(applications).where(applications.c.internship_id == internship_id))
        db.execute(delete(internships).where(internships.c.id == internship_id))
    logger.info("Internship %s deleted by account %s", internship_id, session.account_id)
