"""
Authentication Routes

POST /auth/signup  - Create account + profile, returns token
POST /auth/signin  - Sign in and get JWT token
POST /auth/signout - Revoke the current token
GET  /auth/me      - Get current account info
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from internhub.core.auth import get_current_session
from internhub.core.session import AuthEventBus, SessionContext
from internhub.services import account_service
from internhub.schemas.schemas import (
    SignupRequest, SigninRequest, TokenResponse, AccountResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_events(request: Request) -> Optional[AuthEventBus]:
    """The application's auth event bus (created at startup)."""
    return getattr(request.app.state, "auth_events", None)


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(request: SignupRequest, events: Optional[AuthEventBus] = Depends(get_auth_events)):
    """
    Register a new student or company account.

    The matching profile is created from full_name / company_name and the
    new account is signed in straight away.
    """
    return account_service.signup(request, events)


@router.post("/signin", response_model=TokenResponse)
async def signin(request: SigninRequest, events: Optional[AuthEventBus] = Depends(get_auth_events)):
    """
    Sign in and receive a JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    return account_service.signin(request, events)


@router.post("/signout", response_model=MessageResponse)
async def signout(
    session: SessionContext = Depends(get_current_session),
    events: Optional[AuthEventBus] = Depends(get_auth_events),
):
    """Revoke the token used for this request."""
    account_service.signout(session, events)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=AccountResponse)
async def get_me(session: SessionContext = Depends(get_current_session)):
    """Get current authenticated account's info."""
    return account_service.get_account(session.account_id)
