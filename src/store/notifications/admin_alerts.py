"""Back-office alerts derived from the change feed.

``AdminAlerts`` subscribes to product and order changes and turns them
into short messages for the admin dashboard: stock movements and newly
placed orders. Close it (or use it as a context manager) when the
dashboard goes away.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from shared.change_feed import ChangeEvent, ChangeType, get_change_feed
from store.notifications.feed import ORDERS_TABLE, PRODUCTS_TABLE


@dataclass(frozen=True)
class Alert:
    kind: str  # "stock" or "order"
    message: str
    row_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


def stock_alert_message(event: ChangeEvent) -> str | None:
    """Describe a stock movement, or None when the stock level did not change."""
    old_stock = event.old.get("stock_quantity")
    new_stock = event.new.get("stock_quantity")
    if old_stock is None or new_stock is None or old_stock == new_stock:
        return None

    change = new_stock - old_stock
    change_text = f"decreased by {abs(change)}" if change < 0 else f"increased by {change}"
    return f"Stock Alert: {event.new.get('name')} stock {change_text}. Remaining: {new_stock} units"


def new_order_message(event: ChangeEvent) -> str:
    total = Decimal(str(event.new.get("total_amount") or 0))
    return f"New Order Received! Order #{str(event.new['id'])[:8]} - Total: ${total:.2f}"


class AdminAlerts:
    def __init__(self, on_alert: Callable[[Alert], None] | None = None) -> None:
        self.alerts: list[Alert] = []
        self._on_alert = on_alert
        feed = get_change_feed()
        self._subscriptions = [
            feed.subscribe(PRODUCTS_TABLE, self._on_product_change, change_types={ChangeType.UPDATE}),
            feed.subscribe(ORDERS_TABLE, self._on_order_change, change_types={ChangeType.INSERT}),
        ]

    def _emit(self, alert: Alert) -> None:
        self.alerts.append(alert)
        if self._on_alert is not None:
            self._on_alert(alert)

    def _on_product_change(self, event: ChangeEvent) -> None:
        message = stock_alert_message(event)
        if message:
            self._emit(Alert(kind="stock", message=message, row_id=str(event.new.get("id"))))

    def _on_order_change(self, event: ChangeEvent) -> None:
        self._emit(Alert(kind="order", message=new_order_message(event), row_id=str(event.new.get("id"))))

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    def __enter__(self) -> "AdminAlerts":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
