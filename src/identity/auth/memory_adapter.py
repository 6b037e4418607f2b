"""In-memory auth provider for development and testing.

Keeps users and issued tokens in dictionaries. Password reset requests are
recorded instead of emailed so tests can assert on them.
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from identity.auth.port import AuthError, AuthEvent, AuthProvider, AuthSession, AuthUser

SESSION_LIFETIME = timedelta(hours=1)


def _hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), 100_000).hex()


class InMemoryAuthProvider(AuthProvider):
    def __init__(self) -> None:
        super().__init__()
        self._users: dict[str, dict] = {}  # keyed by lower-cased email
        self._sessions: dict[str, AuthSession] = {}
        self.reset_requests: list[dict] = []

    def sign_up(self, email: str, password: str, full_name: str | None = None) -> AuthUser:
        key = email.strip().lower()
        if key in self._users:
            raise AuthError("User already registered")

        salt = secrets.token_hex(8)
        user = AuthUser(id=str(uuid4()), email=key, full_name=full_name)
        self._users[key] = {
            "user": user,
            "salt": salt,
            "password_hash": _hash_password(password, salt),
        }
        return user

    def sign_in(self, email: str, password: str) -> AuthSession:
        record = self._users.get(email.strip().lower())
        if record is None or record["password_hash"] != _hash_password(password, record["salt"]):
            raise AuthError("Invalid login credentials")

        session = AuthSession(
            access_token=secrets.token_urlsafe(32),
            user=record["user"],
            expires_at=datetime.now(UTC) + SESSION_LIFETIME,
        )
        self._sessions[session.access_token] = session
        self._notify(AuthEvent.SIGNED_IN, session)
        return session

    def get_user(self, access_token: str) -> AuthUser | None:
        session = self._sessions.get(access_token)
        if session is None:
            return None
        if session.expires_at and session.expires_at <= datetime.now(UTC):
            self._sessions.pop(access_token, None)
            return None
        return session.user

    def sign_out(self, access_token: str) -> None:
        if self._sessions.pop(access_token, None) is not None:
            self._notify(AuthEvent.SIGNED_OUT, None)

    def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        # Unknown addresses are accepted silently so the endpoint does not reveal who is registered
        self.reset_requests.append({"email": email.strip().lower(), "redirect_to": redirect_to})
