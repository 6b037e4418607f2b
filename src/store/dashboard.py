"""Read-side helpers for the admin and customer dashboards."""

from decimal import Decimal

from protean.utils.globals import current_domain

from store.order.order import Order
from store.product.product import LOW_STOCK_THRESHOLD, Product
from store.projections.order_summary import recent_orders


def inventory_stats():
    """Stock totals across the catalogue, with products ordered by stock (lowest first)."""
    products = sorted(
        current_domain.repository_for(Product).everything(),
        key=lambda p: p.stock_quantity or 0,
    )

    total_value = Decimal("0")
    total_weight = Decimal("0")
    for product in products:
        stock = product.stock_quantity or 0
        total_value += Decimal(str(product.price)) * stock
        total_weight += Decimal(str(product.weight_kg or 0)) * stock

    return {
        "total_products": len(products),
        "total_value": float(total_value),
        "total_weight": float(total_weight),
        "total_stock": sum(p.stock_quantity or 0 for p in products),
        "low_stock_items": sum(1 for p in products if p.is_low_stock),
        "low_stock_threshold": LOW_STOCK_THRESHOLD,
        "total_orders": current_domain.repository_for(Order).count(),
        "products": [
            {
                "id": str(p.id),
                "name": p.name,
                "category": p.category,
                "price": p.price,
                "weight_kg": p.weight_kg,
                "stock_quantity": p.stock_quantity,
                "low_stock": p.is_low_stock,
            }
            for p in products
        ],
    }


def customer_orders(customer_id, limit=5):
    """The customer's most recent orders, newest first."""
    return recent_orders(customer_id=customer_id, limit=limit)
