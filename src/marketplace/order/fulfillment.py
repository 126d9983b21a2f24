"""Order fulfillment: confirm, pack, ship and deliver commands with their handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.order.order import Order
from marketplace.shared.principal import Role
from marketplace.user.user import User


def _require_distributor(distributor_id):
    try:
        user = current_domain.repository_for(User).get(distributor_id)
    except ObjectNotFoundError:
        raise ValidationError({"distributor_id": [f"Distributor {distributor_id} is not registered"]}) from None
    if user.role != Role.DISTRIBUTOR.value:
        raise ValidationError({"distributor_id": [f"User {distributor_id} is not a distributor"]})


@marketplace.command(part_of="Order")
class ConfirmOrder:
    order_id: Identifier(required=True)


@marketplace.command(part_of="Order")
class PackOrder:
    order_id: Identifier(required=True)
    distributor_id: Identifier()


@marketplace.command(part_of="Order")
class ShipOrder:
    order_id: Identifier(required=True)


@marketplace.command(part_of="Order")
class DeliverOrder:
    order_id: Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm()
        repo.add(order)
        logger.info("Order confirmed", order_id=str(order.id))

    @handle(PackOrder)
    def pack_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.pack(command.distributor_id)
        _require_distributor(command.distributor_id)
        repo.add(order)
        logger.info("Order packed", order_id=str(order.id), distributor_id=str(order.distributor_id))

    @handle(ShipOrder)
    def ship_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.ship()
        repo.add(order)
        logger.info("Order shipped", order_id=str(order.id))

    @handle(DeliverOrder)
    def deliver_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.deliver()
        repo.add(order)
        logger.info("Order delivered", order_id=str(order.id))
