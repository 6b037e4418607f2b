"""UserRole aggregate — one row per (user, role) grant.

The presence of an ``admin`` row is the only signal the storefront uses to
decide whether a user may enter the back office.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from identity.account.events import AdminRoleGranted
from identity.domain import identity


class Role(Enum):
    ADMIN = "admin"


@identity.aggregate
class UserRole:
    user_id: Identifier(required=True)
    role: String(choices=Role, required=True)
    created_at: DateTime()

    @classmethod
    def grant_admin(cls, user_id):
        now = datetime.now(UTC)
        role = cls(user_id=user_id, role=Role.ADMIN.value, created_at=now)
        role.raise_(
            AdminRoleGranted(
                role_id=str(role.id),
                user_id=str(user_id),
                granted_at=now,
            )
        )
        return role


@identity.repository(part_of=UserRole)
class UserRoleRepository:
    def find_grant(self, user_id, role):
        results = self._dao.query.filter(user_id=str(user_id), role=role.value).all()
        return results.first if results.items else None

    def holders_of(self, role):
        return self._dao.query.filter(role=role.value).limit(None).all().items
