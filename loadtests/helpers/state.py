"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks tokens and IDs returned by earlier requests so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks a single simulated shopper from sign-up to checkout."""

    email: str | None = None
    password: str | None = None
    user_id: str | None = None
    access_token: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_product_ids: list[str] = field(default_factory=list)
    session_id: str | None = None

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"} if self.access_token else {}


@dataclass
class ChatState:
    """Tracks a customer's support conversation."""

    access_token: str | None = None
    conversation_id: str | None = None
    messages_sent: int = 0

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"} if self.access_token else {}


@dataclass
class AdminState:
    """Tracks products and orders an admin touches during a session."""

    access_token: str | None = None
    product_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"} if self.access_token else {}
