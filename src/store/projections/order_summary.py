"""Order summary — one row per order for dashboards and the back office."""

from protean.core.projector import on
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from store.domain import store
from store.order.events import OrderApproved, OrderPlaced, OrderStatusChanged
from store.order.order import Order


@store.projection
class OrderSummary:
    order_id: Identifier(identifier=True, required=True)
    order_number: String(required=True)
    customer_id: Identifier(required=True)
    status: String(required=True)
    payment_status: String(required=True)
    total_amount: Float(required=True)
    paid_amount: Float(required=True)
    item_count: Integer(default=0)
    approved: Boolean(default=False)
    placed_at: DateTime()
    updated_at: DateTime()


@store.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                order_number=event.order_number,
                customer_id=event.customer_id,
                status=event.status,
                payment_status=event.payment_status,
                total_amount=event.total_amount,
                paid_amount=event.paid_amount,
                item_count=event.item_count,
                approved=False,
                placed_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderStatusChanged)
    def on_status_changed(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.status = event.new_status
        summary.updated_at = event.changed_at
        repo.add(summary)

    @on(OrderApproved)
    def on_order_approved(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.approved = True
        summary.status = event.status
        summary.updated_at = event.approved_at
        repo.add(summary)


def recent_orders(customer_id=None, limit=5):
    """Most recent order summaries, optionally for one customer."""
    query = current_domain.repository_for(OrderSummary)._dao.query
    if customer_id:
        query = query.filter(customer_id=str(customer_id))
    summaries = sorted(query.limit(None).all().items, key=lambda s: s.placed_at, reverse=True)
    return summaries[:limit] if limit else summaries
