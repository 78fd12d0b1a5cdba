"""
Authentication Utility - JWT, password handling and role guards.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (token carries the auth session id)
- FastAPI dependencies that resolve the request's SessionContext
- Role guards for student / company / admin areas

The guards only shape navigation. Ownership of rows is checked again in the
services before any read or write of another account's data.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select

from internhub.core.config import get_settings
from internhub.core.session import SessionContext
from internhub.db.session import get_db_session
from internhub.db.tables import accounts, auth_sessions, company_profiles, student_profiles
from internhub.schemas.schemas import UserRole

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; a missing header is answered by get_current_session
bearer_scheme = HTTPBearer(auto_error=False)

SIGN_IN_PATH = "/auth?mode=signin"
HOME_PATH = "/"

LANDING_PATHS = {
    UserRole.student: "/student/dashboard",
    UserRole.company: "/company/dashboard",
    UserRole.admin: "/admin/dashboard",
}

ROLE_DENIED_MESSAGES = {
    UserRole.student: "Students only",
    UserRole.company: "Companies only",
    UserRole.admin: "Access denied. Admin only.",
}


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def landing_path(role: UserRole) -> str:
    """Where a freshly signed-in account is sent."""
    return LANDING_PATHS.get(role, HOME_PATH)


# ============================================================
# VIEW GUARDS
# ============================================================

@dataclass(frozen=True)
class ViewAccess:
    allowed: bool
    redirect_to: Optional[str] = None
    status_code: int = status.HTTP_200_OK


def resolve_view_access(session: Optional[SessionContext], required_role: UserRole) -> ViewAccess:
    """
    Decide what happens when `session` enters an area scoped to `required_role`.

    Not signed in -> sign-in page. Signed in with another role -> home.
    """
    if session is None:
        return ViewAccess(False, SIGN_IN_PATH, status.HTTP_401_UNAUTHORIZED)
    if session.role != required_role:
        return ViewAccess(False, HOME_PATH, status.HTTP_403_FORBIDDEN)
    return ViewAccess(True)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer", "Location": SIGN_IN_PATH},
    )


def load_session(token: str) -> Optional[SessionContext]:
    """Resolve a bearer token to its live session, or None."""
    payload = decode_token(token)
    if not payload or not payload.get("sub") or not payload.get("sid"):
        return None

    with get_db_session() as db:
        row = db.execute(
            select(
                auth_sessions.c.id, auth_sessions.c.revoked_at,
                accounts.c.id.label("account_id"), accounts.c.email, accounts.c.role, accounts.c.is_active,
            )
            .join(accounts, auth_sessions.c.account_id == accounts.c.id)
            .where(auth_sessions.c.id == payload["sid"], accounts.c.id == payload["sub"])
        ).mappings().first()

    if not row or row["revoked_at"] is not None:
        return None
    if not row["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return SessionContext(
        session_id=row["id"], account_id=row["account_id"], email=row["email"], role=UserRole(row["role"])
    )


async def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[SessionContext]:
    """Dependency - SessionContext when a valid token is present, else None."""
    if credentials is None:
        return None
    return load_session(credentials.credentials)


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionContext:
    """
    FastAPI dependency - Get current authenticated session.

    Usage:
        @app.get("/protected")
        async def route(session: SessionContext = Depends(get_current_session)):
            return session
    """
    if credentials is None:
        raise _credentials_exception()
    session = load_session(credentials.credentials)
    if session is None:
        raise _credentials_exception()
    return session


def require_role(role: UserRole):
    """Build a dependency that lets only `role` through."""

    async def guard(session: Optional[SessionContext] = Depends(get_optional_session)) -> SessionContext:
        access = resolve_view_access(session, role)
        if access.allowed:
            return session
        if access.status_code == status.HTTP_401_UNAUTHORIZED:
            raise _credentials_exception()
        raise HTTPException(
            status_code=access.status_code,
            detail=ROLE_DENIED_MESSAGES[role],
            headers={"Location": access.redirect_to},
        )

    return guard


require_student = require_role(UserRole.student)
require_company = require_role(UserRole.company)
require_admin = require_role(UserRole.admin)


class StudentSession(SessionContext):
    student_id: str


class CompanySession(SessionContext):
    company_id: str


async def get_current_student(session: SessionContext = Depends(require_student)) -> StudentSession:
    """Dependency - Require student role and an existing student profile."""
    with get_db_session() as db:
        student_id = db.execute(
            select(student_profiles.c.id).where(student_profiles.c.account_id == session.account_id)
        ).scalar()

    if not student_id:
        raise HTTPException(status_code=404, detail="Please complete your profile first")

    return StudentSession(**session.model_dump(), student_id=student_id)


async def get_current_company(session: SessionContext = Depends(require_company)) -> CompanySession:
    """Dependency - Require company role and an existing company profile."""
    with get_db_session() as db:
        company_id = db.execute(
            select(company_profiles.c.id).where(company_profiles.c.account_id == session.account_id)
        ).scalar()

    if not company_id:
        raise HTTPException(status_code=404, detail="Please complete your company profile first")

    return CompanySession(**session.model_dump(), company_id=company_id)
