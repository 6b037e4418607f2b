"""Hosted auth provider adapter.

Talks to a GoTrue-compatible auth REST API (the hosted backend's auth
service) with ``requests``. Every call carries the project API key; calls made
on behalf of a user also carry the user's bearer token.
"""

from datetime import UTC, datetime, timedelta

import requests
import structlog

from identity.auth.port import AuthError, AuthEvent, AuthProvider, AuthSession, AuthUser

logger = structlog.get_logger(__name__)

REQUEST_TIMEOUT = 10


class HostedAuthProvider(AuthProvider):
    def __init__(self, base_url: str, api_key: str) -> None:
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def _headers(self, access_token: str | None = None) -> dict:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    @staticmethod
    def _raise_for_error(response: requests.Response) -> None:
        if response.ok:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("msg") or body.get("error_description") or body.get("message") or response.text
        logger.warning("Auth service rejected request", status_code=response.status_code, reason=message)
        raise AuthError(message or f"Auth service returned {response.status_code}")

    @staticmethod
    def _to_user(payload: dict) -> AuthUser:
        metadata = payload.get("user_metadata") or {}
        return AuthUser(id=payload["id"], email=payload.get("email", ""), full_name=metadata.get("full_name"))

    def sign_up(self, email: str, password: str, full_name: str | None = None) -> AuthUser:
        try:
            response = requests.post(
                f"{self.base_url}/auth/v1/signup",
                json={"email": email, "password": password, "data": {"full_name": full_name}},
                headers=self._headers(),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise AuthError(str(exc)) from exc
        self._raise_for_error(response)
        body = response.json()
        return self._to_user(body.get("user") or body)

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = requests.post(
                f"{self.base_url}/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers=self._headers(),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise AuthError(str(exc)) from exc
        self._raise_for_error(response)
        body = response.json()

        expires_in = body.get("expires_in")
        session = AuthSession(
            access_token=body["access_token"],
            user=self._to_user(body["user"]),
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in) if expires_in else None,
        )
        self._notify(AuthEvent.SIGNED_IN, session)
        return session

    def get_user(self, access_token: str) -> AuthUser | None:
        try:
            response = requests.get(
                f"{self.base_url}/auth/v1/user",
                headers=self._headers(access_token),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise AuthError(str(exc)) from exc
        if response.status_code in (401, 403):
            return None
        self._raise_for_error(response)
        return self._to_user(response.json())

    def sign_out(self, access_token: str) -> None:
        try:
            response = requests.post(
                f"{self.base_url}/auth/v1/logout",
                headers=self._headers(access_token),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise AuthError(str(exc)) from exc
        self._raise_for_error(response)
        self._notify(AuthEvent.SIGNED_OUT, None)

    def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        try:
            response = requests.post(
                f"{self.base_url}/auth/v1/recover",
                params={"redirect_to": redirect_to} if redirect_to else None,
                json={"email": email},
                headers=self._headers(),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise AuthError(str(exc)) from exc
        self._raise_for_error(response)
