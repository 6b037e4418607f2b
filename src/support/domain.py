"""Support bounded context: customer conversations relayed to store admins."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

support = Domain(name="support")
