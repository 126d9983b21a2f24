"""Retailer reassignment: command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.assignment.resolver import require_retailer
from marketplace.domain import logger, marketplace
from marketplace.product.product import Product


@marketplace.command(part_of="Product")
class ReassignRetailer:
    product_id: Identifier(required=True)
    retailer_id: Identifier(required=True)
    reassigned_by: Identifier()


@marketplace.command_handler(part_of=Product)
class ReassignRetailerHandler:
    @handle(ReassignRetailer)
    def reassign_retailer(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        retailer = require_retailer(command.retailer_id)

        previous = product.retailer_id
        product.reassign_retailer(str(retailer.id), reassigned_by=command.reassigned_by)
        repo.add(product)

        logger.info(
            "Product reassigned to retailer",
            product_id=str(product.id),
            previous_retailer_id=str(previous) if previous else None,
            retailer_id=str(retailer.id),
            reassigned_by=str(command.reassigned_by) if command.reassigned_by else None,
        )
