"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from store.domain import store


@store.event(part_of="Order")
class OrderPlaced:
    """A paid checkout session became an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    checkout_session_id = String(required=True)
    status = String(required=True)
    payment_status = String(required=True)
    total_amount = Float(required=True)
    paid_amount = Float(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@store.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@store.event(part_of="Order")
class OrderApproved:
    """An admin approved the order, which moves it into processing."""

    __version__ = 1

    order_id = Identifier(required=True)
    approved = Boolean(default=True)
    status = String(required=True)
    approved_at = DateTime(required=True)
