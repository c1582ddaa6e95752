"""Authentication of candidates through Supabase Auth."""

import logging
from typing import Callable, Optional, Protocol

from supabase import Client

from jobboard.errors import RemoteOperationError
from jobboard.models import AuthenticatedUser, AuthSession

logger = logging.getLogger(__name__)

AuthStateCallback = Callable[[Optional[AuthenticatedUser]], None]


class IdentityProvider(Protocol):
    """Sign-in/sign-up/sign-out interface of the identity provider."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    def sign_up(self, email: str, password: str) -> AuthSession:
        ...

    def sign_out(self, access_token: str) -> None:
        ...

    def get_user(self, access_token: str) -> Optional[AuthenticatedUser]:
        ...

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        ...


def _to_user(user) -> Optional[AuthenticatedUser]:
    if user is None:
        return None
    return AuthenticatedUser(id=str(user.id), email=user.email or "")


def _to_session(response) -> AuthSession:
    user = _to_user(response.user)
    if user is None:
        raise RemoteOperationError("auth", "user", "no user in response")

    access_token = response.session.access_token if response.session else ""
    return AuthSession(user=user, access_token=access_token)


class SupabaseIdentityProvider:
    """IdentityProvider backed by Supabase Auth (email + password).

    Failures keep the provider error code (e.g. "invalid_credentials",
    "user_already_exists") on the raised RemoteOperationError so the HTTP
    layer can show a matching message.
    """

    def __init__(self, auth_client: Client):
        """Initialize the provider.

        Args:
            auth_client: Supabase client dedicated to auth calls (see
                `get_auth_client`); its session state is never read.
        """
        self.auth_client = auth_client

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self.auth_client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as error:
            raise RemoteOperationError(
                "sign_in", "auth", str(error), getattr(error, "code", None)
            ) from error
        return _to_session(response)

    def sign_up(self, email: str, password: str) -> AuthSession:
        try:
            response = self.auth_client.auth.sign_up({"email": email, "password": password})
        except Exception as error:
            raise RemoteOperationError(
                "sign_up", "auth", str(error), getattr(error, "code", None)
            ) from error
        return _to_session(response)

    def sign_out(self, access_token: str) -> None:
        """Revoke the given access token and the refresh tokens issued with it."""
        try:
            self.auth_client.auth.admin.sign_out(access_token)
        except Exception as error:
            raise RemoteOperationError(
                "sign_out", "auth", str(error), getattr(error, "code", None)
            ) from error

    def get_user(self, access_token: str) -> Optional[AuthenticatedUser]:
        """Resolve the user behind an access token, None if it is not valid."""
        try:
            response = self.auth_client.auth.get_user(access_token)
        except Exception as error:
            logger.info(f"Rejected access token: {error}")
            return None

        if response is None:
            return None
        return _to_user(response.user)

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        """Call `callback` with the user (or None when signed out) on every auth change.

        Returns:
            Function that removes the listener.
        """
        def listener(event, session) -> None:
            callback(_to_user(session.user) if session else None)

        subscription = self.auth_client.auth.on_auth_state_change(listener)
        return subscription.unsubscribe
