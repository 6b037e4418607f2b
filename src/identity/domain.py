"""Identity bounded context: shopper accounts, sessions and admin roles.

Credentials live with the auth provider (see ``identity.auth``); this domain
keeps the profile and role records the rest of the store reads.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

identity = Domain(name="identity")
