"""Session store - current user identity on top of the auth provider"""

import logging
from typing import Callable, List, Optional

from ride_ledger.domain.exceptions import NotAuthenticatedError, ValidationError
from ride_ledger.domain.models import AuthSession, SignUpResult, UserIdentity
from ride_ledger.infrastructure.clients.auth import AuthClient

MIN_PASSWORD_LENGTH = 6

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
SESSION_RESTORED = "SESSION_RESTORED"

SessionListener = Callable[[str, Optional[AuthSession]], None]

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SessionStore:
    """
    Holds the session for one client and gates protected operations.

    Listeners registered with subscribe() are called with (event, session)
    whenever the session changes.
    """

    def __init__(self, auth_client: AuthClient):
        self.auth_client = auth_client
        self.current: Optional[AuthSession] = None
        self._listeners: List[SessionListener] = []

    @property
    def user(self) -> Optional[UserIdentity]:
        return self.current.user if self.current else None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a session-changed listener; returns a callable that removes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, event: str, session: Optional[AuthSession]) -> None:
        self.current = session
        logger.info(
            "Auth state changed",
            extra={"step": "auth_state", "event": event, "user_id": session.user.id if session else None},
        )
        for listener in list(self._listeners):
            listener(event, session)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        if not email or not email.strip() or not password:
            raise ValidationError("Please fill in all fields", fields=["email", "password"])

        session = await self.auth_client.sign_in(normalize_email(email), password)
        self._set_session(SIGNED_IN, session)
        return session

    async def sign_up(self, email: str, password: str, confirm_password: str) -> SignUpResult:
        if not email or not email.strip() or not password or not confirm_password:
            raise ValidationError("Please fill in all fields", fields=["email", "password", "confirm_password"])
        if password != confirm_password:
            raise ValidationError("Passwords do not match", fields=["confirm_password"])
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", fields=["password"]
            )

        return await self.auth_client.sign_up(normalize_email(email), password)

    async def sign_out(self) -> None:
        if self.current is None:
            raise NotAuthenticatedError("Not signed in")

        await self.auth_client.sign_out(self.current.access_token)
        self._set_session(SIGNED_OUT, None)

    async def restore(self, access_token: str) -> AuthSession:
        """Rebuild the session from a bearer token issued earlier by sign_in"""
        if not access_token:
            raise NotAuthenticatedError("Missing access token")

        user = await self.auth_client.get_user(access_token)
        session = AuthSession(access_token=access_token, user=user)
        self._set_session(SESSION_RESTORED, session)
        return session

    def require_user(self) -> UserIdentity:
        if self.current is None:
            raise NotAuthenticatedError("Not signed in")
        return self.current.user
