"""
Identity and Auth Session.

The auth provider issues session access tokens (JWTs). This module turns a
token into an explicit Identity that callers pass to every data-access and
export operation; nothing in the core reads an ambient "current user".
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from jose import JWTError, jwt

from projecthub.backend.core.config import get_app_config, get_settings
from projecthub.backend.core.exceptions import AuthenticationError
from projecthub.backend.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller. user_id is the ownership key for every record."""

    user_id: str
    email: str | None = None


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session access token.

    Raises:
        AuthenticationError: If the token is invalid, expired, or no
            verification secret is configured
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    if not settings.session_jwt_secret:
        raise AuthenticationError("Session verification secret is not configured")
    try:
        return jwt.decode(
            token,
            settings.session_jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")


def decode_access_token(token: str) -> Identity:
    """
    Verify a session access token and return the Identity it carries.

    Raises:
        AuthenticationError: If the token is invalid or has no subject
    """
    payload = decode_token(token)
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Token has no subject")
    return Identity(user_id=str(subject), email=payload.get("email"))


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


AuthListener = Callable[[AuthEvent, Identity | None], None]


class AuthSession:
    """
    Holds the signed-in identity and notifies subscribers when it changes.

    Usage:
        session = AuthSession()
        unsubscribe = session.subscribe(lambda event, identity: ...)
        session.sign_in_with_token(token)
        await ProjectService(db).list_projects(session.current_identity())
    """

    def __init__(self) -> None:
        self._identity: Identity | None = None
        self._listeners: list[AuthListener] = []

    def current_identity(self) -> Identity | None:
        return self._identity

    def sign_in(self, identity: Identity) -> None:
        self._identity = identity
        logger.info("Signed in", extra={"user_id": identity.user_id})
        self._notify(AuthEvent.SIGNED_IN)

    def sign_in_with_token(self, token: str) -> Identity:
        """
        Verify a session token and make its identity current.

        Raises:
            AuthenticationError: If the token cannot be verified
        """
        identity = decode_access_token(token)
        self.sign_in(identity)
        return identity

    def sign_out(self) -> None:
        if self._identity is None:
            return
        logger.info("Signed out", extra={"user_id": self._identity.user_id})
        self._identity = None
        self._notify(AuthEvent.SIGNED_OUT)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self._identity)
