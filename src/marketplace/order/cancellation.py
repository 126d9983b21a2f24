"""Order cancellation: command, handler, and the stock-restoring domain service."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.order.order import Order
from marketplace.product.product import Product
from marketplace.shared.persistence import persist


@marketplace.domain_service(part_of=[Order, Product])
class OrderCancellationService:
    """Cancel an order and put every item's quantity back on its product."""

    def __init__(self, order, products):
        super().__init__(order, *products.values())
        self.order = order
        self.products = products

    def cancel(self, cancelled_by=None, reason=None):
        self.order.cancel(cancelled_by=cancelled_by, reason=reason)
        for item in self.order.items:
            self.products[str(item.product_id)].restock(item.quantity, self.order.id)


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id: Identifier(required=True)
    cancelled_by: Identifier()
    reason: String(max_length=500)


@marketplace.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)

        catalog = current_domain.repository_for(Product)
        products = {}
        for item in order.items:
            product_id = str(item.product_id)
            if product_id not in products:
                products[product_id] = catalog.get(product_id)

        OrderCancellationService(order, products).cancel(cancelled_by=command.cancelled_by, reason=command.reason)
        persist(order, *products.values())

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            cancelled_by=str(command.cancelled_by) if command.cancelled_by else None,
            restored_products=len(products),
        )
