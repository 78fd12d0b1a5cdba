"""
Account Service - signup, signin, signout and admin account views.

Signing in opens a row in auth_sessions and issues a JWT that names it;
signing out stamps revoked_at, after which the token is refused.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from internhub.core.auth import create_access_token, hash_password, landing_path, verify_password
from internhub.core.errors import AccessDenied, AuthenticationFailed, DuplicateAccount, NotFound
from internhub.core.session import AuthEvent, AuthEventBus, SessionContext
from internhub.db.session import get_db_session
from internhub.db.tables import accounts, applications, auth_sessions, company_profiles, internships, student_profiles
from internhub.schemas.schemas import (
    AccountResponse, AdminStatsResponse, SigninRequest, SignupRequest, TokenResponse, UserRole,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _insert_account(db, email: str, password: str, role: UserRole) -> str:
    account_id = str(uuid.uuid4())
    now = _now()
    db.execute(
        accounts.insert().values(
            id=account_id, email=email.lower(), password_hash=hash_password(password),
            role=role.value, is_active=True, created_at=now, updated_at=now,
        )
    )
    return account_id


def create_account(email: str, password: str, role: UserRole) -> str:
    """Insert an account row; duplicate email -> DuplicateAccount."""
    try:
        with get_db_session() as db:
            return _insert_account(db, email, password, role)
    except IntegrityError as e:
        raise DuplicateAccount() from e


def signup(request: SignupRequest, events: Optional[AuthEventBus] = None) -> TokenResponse:
    """Create the account and its profile in one transaction, then sign it in."""
    now = _now()
    try:
        with get_db_session() as db:
            account_id = _insert_account(db, request.email, request.password, request.role)
            if request.role == UserRole.student:
                db.execute(student_profiles.insert().values(
                    id=str(uuid.uuid4()), account_id=account_id, full_name=request.full_name,
                    skills=[], interests=[], projects=[], created_at=now, updated_at=now,
                ))
            else:
                db.execute(company_profiles.insert().values(
                    id=str(uuid.uuid4()), account_id=account_id, company_name=request.company_name,
                    created_at=now, updated_at=now,
                ))
    except IntegrityError as e:
        raise DuplicateAccount() from e
    logger.info("Account %s signed up as %s", account_id, request.role.value)
    return open_session(account_id, request.email.lower(), request.role, events)


def open_session(account_id: str, email: str, role: UserRole, events: Optional[AuthEventBus] = None) -> TokenResponse:
    session_id = str(uuid.uuid4())
    with get_db_session() as db:
        db.execute(auth_sessions.insert().values(id=session_id, account_id=account_id, created_at=_now()))

    token = create_access_token(data={"sub": account_id, "sid": session_id, "role": role.value})
    if events is not None:
        events.publish(
            AuthEvent.SIGNED_IN,
            SessionContext(session_id=session_id, account_id=account_id, email=email, role=role),
        )
    return TokenResponse(access_token=token, account_id=account_id, role=role, redirect_to=landing_path(role))


def signin(request: SigninRequest, events: Optional[AuthEventBus] = None) -> TokenResponse:
    with get_db_session() as db:
        row = db.execute(
            select(accounts).where(accounts.c.email == request.email.lower())
        ).mappings().first()

    if not row or not verify_password(request.password, row["password_hash"]):
        raise AuthenticationFailed()
    if not row["is_active"]:
        raise AccessDenied("Account deactivated")

    return open_session(row["id"], row["email"], UserRole(row["role"]), events)


def signout(session: SessionContext, events: Optional[AuthEventBus] = None) -> None:
    with get_db_session() as db:
        db.execute(
            update(auth_sessions)
            .where(auth_sessions.c.id == session.session_id, auth_sessions.c.revoked_at.is_(None))
            .values(revoked_at=_now())
        )
    if events is not None:
        events.publish(AuthEvent.SIGNED_OUT, session)


def get_account(account_id: str) -> AccountResponse:
    with get_db_session() as db:
        row = db.execute(
            select(accounts.c.id, accounts.c.email, accounts.c.role, accounts.c.is_active, accounts.c.created_at)
            .where(accounts.c.id == account_id)
        ).mappings().first()
    if not row:
        raise NotFound("Account not found")
    return AccountResponse(**row)


# ============================================================
# ADMIN
# ============================================================

def list_accounts() -> List[AccountResponse]:
    with get_db_session() as db:
        rows = db.execute(
            select(accounts.c.id, accounts.c.email, accounts.c.role, accounts.c.is_active, accounts.c.created_at)
            .order_by(accounts.c.created_at.desc())
        ).mappings().all()
    return [AccountResponse(**r) for r in rows]


def admin_stats() -> AdminStatsResponse:
    with get_db_session() as db:
        role_counts = dict(db.execute(
            select(accounts.c.role, func.count()).group_by(accounts.c.role)
        ).all())
        total_internships = db.execute(select(func.count()).select_from(internships)).scalar()
        total_applications = db.execute(select(func.count()).select_from(applications)).scalar()

    return AdminStatsResponse(
        total_users=sum(role_counts.values()),
        total_students=role_counts.get(UserRole.student.value, 0),
        total_companies=role_counts.get(UserRole.company.value, 0),
        total_internships=total_internships,
        total_applications=total_applications,
    )
