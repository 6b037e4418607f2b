"""Domain events for user accounts and roles."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="UserProfile")
class UserRegistered:
    """A new user signed up and their profile was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    full_name: String()
    registered_at: DateTime(required=True)


@identity.event(part_of="UserRole")
class AdminRoleGranted:
    """A user was given access to the admin back office."""

    __version__ = 1

    role_id: Identifier(required=True)
    user_id: Identifier(required=True)
    granted_at: DateTime(required=True)
