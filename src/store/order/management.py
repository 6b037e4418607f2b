"""Back-office order management — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from store.domain import logger, store
from store.order.order import Order, OrderStatus


@store.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(choices=OrderStatus, required=True)


@store.command(part_of="Order")
class ApproveOrder:
    order_id = Identifier(required=True)


@store.command_handler(part_of=Order)
class ManageOrdersHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_status(command.status)
        repo.add(order)
        logger.info("Order status updated", order_id=str(order.id), status=order.status)

    @handle(ApproveOrder)
    def approve(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.approve()
        repo.add(order)
        logger.info("Order approved", order_id=str(order.id))
