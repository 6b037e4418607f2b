"""User registration — credential checks, the auth provider call, and the
RegisterUser command that records the storefront profile.

The password never enters a command: it goes straight to the auth provider,
and only the provider-issued user id travels through the domain.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.account.profile import UserProfile
from identity.auth import get_auth_provider
from identity.auth.port import AuthError
from identity.domain import identity, logger
from identity.shared.email import EmailAddress

MIN_PASSWORD_LENGTH = 6


def validate_credentials(email, password):
    """Reject malformed sign-up input before it reaches the auth provider."""
    EmailAddress(address=(email or "").strip())
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})


@identity.command(part_of="UserProfile")
class RegisterUser:
    """Record the storefront profile for a user the auth provider has just created."""

    user_id: Identifier(required=True)
    email: String(required=True, max_length=254)
    full_name: String(max_length=255)


@identity.command_handler(part_of=UserProfile)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(UserProfile)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        profile = UserProfile.register(
            user_id=command.user_id,
            email=command.email,
            full_name=command.full_name,
        )
        repo.add(profile)
        return str(profile.user_id)


def register_user(email, password, full_name=None):
    """Create the auth account, then the profile. Returns the new user id."""
    validate_credentials(email, password)

    try:
        auth_user = get_auth_provider().sign_up(email.strip(), password, full_name)
    except AuthError as exc:
        logger.warning("Sign-up rejected by auth provider", email=email, reason=str(exc))
        raise ValidationError({"email": [str(exc)]}) from exc

    return current_domain.process(
        RegisterUser(user_id=auth_user.id, email=auth_user.email or email, full_name=full_name),
        asynchronous=False,
    )
