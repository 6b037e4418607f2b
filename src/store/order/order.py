"""Order aggregate — a paid purchase awaiting fulfilment.

Orders are only ever created by payment verification, from a paid
checkout session and the customer's cart. Amounts and line items are
snapshots taken at that moment and never change afterwards; only the
fulfilment status and the approval flag move.

State Machine:
    pending → processing → shipped → delivered
    pending / processing → cancelled
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from store.domain import store
from store.order.events import OrderApproved, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PARTIAL = "partial"
    FULL = "full"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def order_number_for(order_id) -> str:
    return str(order_id)[:8].upper()


@store.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order goes, captured at checkout and never edited."""

    street_address = String(required=True, max_length=255)
    apartment_suite = String(max_length=100)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    delivery_notes = Text()


@store.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    weight_kg = Float(default=0.0)


@store.aggregate
class Order:
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, required=True)
    total_amount = Float(required=True, min_value=0.0)
    paid_amount = Float(required=True, min_value=0.0)
    delivery_address = ValueObject(DeliveryAddress)
    items = HasMany(OrderItem)
    approved = Boolean(default=False)
    checkout_session_id = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def order_number(self) -> str:
        return order_number_for(self.id)

    @classmethod
    def place(cls, customer_id, checkout_session_id, payment_status, total_amount, paid_amount, delivery_address, lines):
        """Create an order from a verified payment.

        Args:
            lines: Dicts with product_id, product_name, quantity, price, weight_kg.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            payment_status=payment_status,
            total_amount=total_amount,
            paid_amount=paid_amount,
            delivery_address=delivery_address,
            approved=False,
            checkout_session_id=checkout_session_id,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(OrderItem(**line))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                checkout_session_id=checkout_session_id,
                status=order.status,
                payment_status=payment_status,
                total_amount=total_amount,
                paid_amount=paid_amount,
                item_count=len(lines),
                placed_at=now,
            )
        )
        return order

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def update_status(self, new_status):
        target = OrderStatus(new_status)
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    def approve(self):
        if self.approved:
            raise ValidationError({"approved": ["Order is already approved"]})
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": ["Only pending orders can be approved"]})
        if PaymentStatus(self.payment_status) != PaymentStatus.PARTIAL:
            raise ValidationError({"payment_status": ["Only half-paid orders need approval"]})

        now = datetime.now(UTC)
        self.approved = True
        self.status = OrderStatus.PROCESSING.value
        self.updated_at = now

        self.raise_(
            OrderApproved(
                order_id=str(self.id),
                approved=True,
                status=self.status,
                approved_at=now,
            )
        )


@store.repository(part_of=Order)
class OrderRepository:
    def for_checkout_session(self, session_id):
        results = self._dao.query.filter(checkout_session_id=session_id).all()
        return results.first if results.items else None

    def newest_first(self, customer_id=None):
        query = self._dao.query
        if customer_id:
            query = query.filter(customer_id=str(customer_id))
        orders = query.limit(None).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def count(self) -> int:
        return self._dao.query.all().total
