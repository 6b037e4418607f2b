"""Auth provider port (abstract interface).

Sign-up, sign-in and session lookup are delegated to a hosted auth service.
The storefront only depends on this contract, so the in-memory provider
(dev/test) and the hosted provider (production) are interchangeable.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AuthError(Exception):
    """The auth provider rejected a request or could not be reached."""


class AuthEvent(Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class AuthUser:
    """A user as known to the auth provider."""

    id: str
    email: str
    full_name: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """An issued session: the bearer token plus the user it identifies."""

    access_token: str
    user: AuthUser
    expires_at: datetime | None = None


SessionListener = Callable[[AuthEvent, AuthSession | None], None]


class AuthProvider(ABC):
    """Abstract auth provider interface."""

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a session-change listener. Returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: AuthEvent, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    @abstractmethod
    def sign_up(self, email: str, password: str, full_name: str | None = None) -> AuthUser:
        """Create a user account."""
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session."""
        ...

    @abstractmethod
    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user behind a bearer token, or None if the token is not valid."""
        ...

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        """Revoke a session."""
        ...

    @abstractmethod
    def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        """Dispatch a password reset email."""
        ...
