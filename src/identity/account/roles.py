"""Admin role management — granting the admin role and answering
"is this user an admin?" for the request guard and the back office.
"""

from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from identity.account.profile import UserProfile
from identity.account.role import Role, UserRole
from identity.domain import identity, logger

_EPOCH = datetime.min.replace(tzinfo=UTC)


@identity.command(part_of="UserRole")
class GrantAdminRole:
    """Grant the admin role to the user registered under ``email``."""

    email: String(required=True, max_length=254)


@identity.command_handler(part_of=UserRole)
class GrantAdminRoleHandler:
    @handle(GrantAdminRole)
    def grant_admin_role(self, command):
        profile = current_domain.repository_for(UserProfile).find_by_email(command.email)
        if profile is None:
            raise ValidationError({"email": [f"Could not grant admin role to {command.email}. User may not exist."]})

        repo = current_domain.repository_for(UserRole)
        existing = repo.find_grant(profile.user_id, Role.ADMIN)
        if existing is not None:
            return str(existing.id)

        role = UserRole.grant_admin(profile.user_id)
        repo.add(role)
        logger.info("Admin role granted", user_id=str(profile.user_id), email=profile.email)
        return str(role.id)


def is_admin(user_id) -> bool:
    """True when ``user_id`` holds an admin grant. Must run inside the identity domain context."""
    if not user_id:
        return False
    return current_domain.repository_for(UserRole).find_grant(user_id, Role.ADMIN) is not None


def list_admins() -> list[dict]:
    """Every admin grant joined with the holder's profile, newest first."""
    profiles = current_domain.repository_for(UserProfile)
    admins = []
    for grant in current_domain.repository_for(UserRole).holders_of(Role.ADMIN):
        try:
            profile = profiles.get(grant.user_id)
        except ObjectNotFoundError:
            profile = None
        admins.append(
            {
                "id": str(grant.id),
                "user_id": str(grant.user_id),
                "email": profile.email if profile else None,
                "full_name": profile.full_name if profile else None,
                "created_at": grant.created_at,
            }
        )
    admins.sort(key=lambda a: a["created_at"] or _EPOCH, reverse=True)
    return admins
