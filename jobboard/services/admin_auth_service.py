"""Admin login and session checks."""

import hmac
import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from jobboard.constants import ADMIN_SESSION_KEY_PREFIX
from jobboard.errors import AuthenticationError
from jobboard.models import AdminSession
from jobboard.utils.session_storage import SessionStorage

logger = logging.getLogger(__name__)

CredentialCheck = Callable[[str, str], bool]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _session_key(token: str) -> str:
    return f"{ADMIN_SESSION_KEY_PREFIX}:{token}"


def static_credential_check(admin_email: str, admin_password: str) -> CredentialCheck:
    """Credential check against a single configured email/password pair.

    An empty configured email or password rejects every login.
    """
    def check(email: str, password: str) -> bool:
        if not admin_email or not admin_password:
            return False
        email_matches = hmac.compare_digest(email.encode(), admin_email.encode())
        password_matches = hmac.compare_digest(password.encode(), admin_password.encode())
        return email_matches and password_matches

    return check


class AdminAuthPolicy:
    """Single-admin login with fixed-length, per-client sessions.

    Every login mints a new random bearer token and stores the session
    record under it. A request is admin only if it presents a token whose
    record is present, parses, has not expired and belongs to the admin
    email. Any other stored record is cleared when checked.

    Attributes:
        credential_check: Decides whether an email/password pair may log in.
        storage: Where session records are kept.
        admin_email: The only email a session may belong to.
        session_ttl: Validity window of a new session.
        clock: Returns the current time (timezone-aware).
    """

    def __init__(
        self,
        credential_check: CredentialCheck,
        storage: SessionStorage,
        admin_email: str,
        session_ttl: timedelta = timedelta(hours=24),
        clock: Clock = _utc_now
    ):
        self.credential_check = credential_check
        self.storage = storage
        self.admin_email = admin_email
        self.session_ttl = session_ttl
        self.clock = clock

    def login(self, email: str, password: str) -> AdminSession:
        """Start a session.

        Returns:
            The new session; its `token` must be sent as a bearer token.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        if email != self.admin_email or not self.credential_check(email, password):
            logger.warning(f"Rejected admin login for {email}")
            raise AuthenticationError("Invalid credentials. Please try again.")

        now = self.clock()
        session = AdminSession(
            token=secrets.token_urlsafe(32),
            email=email,
            login_time=now,
            expires_at=now + self.session_ttl
        )

        self.storage.set_item(_session_key(session.token), session.model_dump_json(by_alias=True))
        logger.info(f"Admin {email} logged in until {session.expires_at.isoformat()}")
        return session

    def current_session(self, token: Optional[str]) -> Optional[AdminSession]:
        """Return the session behind a token if it is valid, clearing it otherwise."""
        if not token:
            return None

        raw_session = self.storage.get_item(_session_key(token))
        if not raw_session:
            return None

        try:
            session = AdminSession.model_validate(json.loads(raw_session))
        except (ValueError, PydanticValidationError):
            logger.warning("Discarding unreadable admin session")
            self.logout(token)
            return None

        expires_at = session.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        if self.clock() >= expires_at or session.email != self.admin_email:
            logger.info("Admin session expired")
            self.logout(token)
            return None

        session.token = token
        return session

    def is_authenticated(self, token: Optional[str]) -> bool:
        return self.current_session(token) is not None

    def require_session(self, token: Optional[str]) -> AdminSession:
        """Return the valid session for a token or raise.

        Raises:
            AuthenticationError: If the token has no valid session.
        """
        session = self.current_session(token)
        if session is None:
            raise AuthenticationError("Admin session missing or expired")
        return session

    def logout(self, token: str) -> None:
        """End the session of one token; other sessions stay valid."""
        self.storage.remove_item(_session_key(token))
