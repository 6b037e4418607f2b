"""Auth provider factory.

Provides get_auth_provider() / set_auth_provider() to swap implementations:
- InMemoryAuthProvider for development and testing
- HostedAuthProvider when AUTH_URL is configured
"""

import os

from identity.auth.hosted_adapter import HostedAuthProvider
from identity.auth.memory_adapter import InMemoryAuthProvider
from identity.auth.port import AuthProvider

_current_provider: AuthProvider | None = None


def get_auth_provider() -> AuthProvider:
    """Return the current auth provider, building it from the environment on first use."""
    global _current_provider
    if _current_provider is None:
        auth_url = os.environ.get("AUTH_URL")
        if auth_url:
            _current_provider = HostedAuthProvider(auth_url, os.environ.get("AUTH_API_KEY", ""))
        else:
            _current_provider = InMemoryAuthProvider()
    return _current_provider


def set_auth_provider(provider: AuthProvider) -> None:
    """Override the active auth provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_auth_provider() -> None:
    """Reset to the default provider."""
    global _current_provider
    _current_provider = None
