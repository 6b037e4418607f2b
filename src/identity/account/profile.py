"""UserProfile aggregate — the storefront's view of an authenticated user.

Credentials live with the auth provider; the profile keeps what the
storefront displays (email and full name) under the provider's user id.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from identity.account.events import UserRegistered
from identity.domain import identity
from identity.shared.email import EmailAddress


@identity.aggregate
class UserProfile:
    user_id: Identifier(identifier=True, required=True)
    email: String(required=True, max_length=254)
    full_name: String(max_length=255)
    created_at: DateTime()

    @classmethod
    def register(cls, user_id, email, full_name=None):
        normalized = EmailAddress(address=email.strip()).address.lower()
        now = datetime.now(UTC)

        profile = cls(
            user_id=user_id,
            email=normalized,
            full_name=full_name,
            created_at=now,
        )
        profile.raise_(
            UserRegistered(
                user_id=user_id,
                email=normalized,
                full_name=full_name,
                registered_at=now,
            )
        )
        return profile


@identity.repository(part_of=UserProfile)
class UserProfileRepository:
    def find_by_email(self, email):
        """Return the profile registered under ``email`` (case-insensitive), or None."""
        results = self._dao.query.filter(email=email.strip().lower()).all()
        return results.first if results.items else None
