"""
Session context and auth-state events.

A SessionContext is resolved per request from the bearer token and handed to
services explicitly. There is no process-wide "current user".

AuthEventBus carries SIGNED_IN / SIGNED_OUT notifications. One bus is created
when the application starts (app.state.auth_events) and disposed on shutdown.
"""

import logging
from enum import Enum
from typing import Callable, List

from pydantic import BaseModel

from internhub.schemas.schemas import UserRole

logger = logging.getLogger(__name__)


class SessionContext(BaseModel):
    session_id: str
    account_id: str
    email: str
    role: UserRole


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


AuthListener = Callable[[AuthEvent, SessionContext], None]


class AuthEventBus:
    def __init__(self):
        self._listeners: List[AuthListener] = []
        self._disposed = False

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        if self._disposed:
            raise RuntimeError("AuthEventBus already disposed")
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: AuthEvent, session: SessionContext) -> None:
        if self._disposed:
            return
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed for %s", event.value)

    def dispose(self) -> None:
        self._listeners.clear()
        self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


def log_auth_event(event: AuthEvent, session: SessionContext) -> None:
    logger.info("%s account=%s role=%s", event.value, session.account_id, session.role.value)
