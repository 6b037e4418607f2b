"""Publishes committed product and order changes to the shared change feed.

Event handlers run after the unit of work commits, so subscribers only
ever see rows that were actually written.
"""

import structlog
from protean.utils.mixins import handle

from shared.change_feed import ChangeEvent, ChangeType, get_change_feed
from store.domain import store
from store.order.events import OrderApproved, OrderPlaced, OrderStatusChanged
from store.order.order import Order
from store.product.events import ProductAdded, ProductDetailsUpdated, StockAdjusted
from store.product.product import Product

logger = structlog.get_logger(__name__)

PRODUCTS_TABLE = "products"
ORDERS_TABLE = "orders"


def _publish(table, change_type, new, old=None):
    delivered = get_change_feed().publish(ChangeEvent(table=table, change_type=change_type, new=new, old=old or {}))
    logger.debug("Change published", table=table, change_type=change_type.value, delivered=delivered)


@store.event_handler(part_of=Product)
class ProductFeedEventHandler:
    @handle(ProductAdded)
    def on_product_added(self, event: ProductAdded) -> None:
        _publish(
            PRODUCTS_TABLE,
            ChangeType.INSERT,
            {"id": event.product_id, "name": event.name, "stock_quantity": event.stock_quantity},
        )

    @handle(ProductDetailsUpdated)
    def on_details_updated(self, event: ProductDetailsUpdated) -> None:
        _publish(
            PRODUCTS_TABLE,
            ChangeType.UPDATE,
            {"id": event.product_id, "name": event.name, "stock_quantity": event.stock_quantity},
            {"id": event.product_id, "name": event.name, "stock_quantity": event.previous_stock},
        )

    @handle(StockAdjusted)
    def on_stock_adjusted(self, event: StockAdjusted) -> None:
        _publish(
            PRODUCTS_TABLE,
            ChangeType.UPDATE,
            {"id": event.product_id, "name": event.name, "stock_quantity": event.stock_quantity},
            {"id": event.product_id, "name": event.name, "stock_quantity": event.previous_stock},
        )


@store.event_handler(part_of=Order)
class OrderFeedEventHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        _publish(
            ORDERS_TABLE,
            ChangeType.INSERT,
            {
                "id": event.order_id,
                "user_id": event.customer_id,
                "status": event.status,
                "payment_status": event.payment_status,
                "total_amount": event.total_amount,
                "paid_amount": event.paid_amount,
            },
        )

    @handle(OrderStatusChanged)
    def on_status_changed(self, event: OrderStatusChanged) -> None:
        _publish(
            ORDERS_TABLE,
            ChangeType.UPDATE,
            {"id": event.order_id, "status": event.new_status},
            {"id": event.order_id, "status": event.previous_status},
        )

    @handle(OrderApproved)
    def on_order_approved(self, event: OrderApproved) -> None:
        _publish(
            ORDERS_TABLE,
            ChangeType.UPDATE,
            {"id": event.order_id, "status": event.status, "approved": True},
        )
