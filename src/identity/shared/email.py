"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity

_FORBIDDEN_CHARACTERS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@identity.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one @, non-empty local and domain parts, a dotted domain, no
    whitespace, no consecutive dots and none of the characters mail servers
    reject.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address or ""
        invalid = ValidationError({"email": ["Invalid email address"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid

        if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid

        if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
            raise invalid

        if ".." in email or any(ch in email for ch in _FORBIDDEN_CHARACTERS):
            raise invalid
