"""Product listing: command and handler.

A farmer lists produce; the product is routed to a retailer at listing
time, either the one named on the command or one picked by the retailer
assignment resolver.
"""

from protean import handle
from protean.fields import Date, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.assignment.resolver import require_retailer, resolve_retailer
from marketplace.domain import logger, marketplace
from marketplace.product.product import Product


@marketplace.command(part_of="Product")
class ListProduct:
    producer_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    crop_type: String(required=True, max_length=100)
    price: Float(min_value=0.0)
    quantity: Integer(min_value=0, default=0)
    retailer_id: Identifier()
    soil_type: String(max_length=100)
    pesticides: String(max_length=255)
    harvest_date: Date()
    latitude: Float(min_value=-90.0, max_value=90.0)
    longitude: Float(min_value=-180.0, max_value=180.0)
    image_url: String(max_length=500)


@marketplace.command_handler(part_of=Product)
class ListProductHandler:
    @handle(ListProduct)
    def list_product(self, command):
        if command.retailer_id:
            retailer_id = str(require_retailer(command.retailer_id).id)
        else:
            retailer_id = resolve_retailer(command.producer_id, command.crop_type)

        product = Product.create(
            name=command.name,
            crop_type=command.crop_type,
            producer_id=command.producer_id,
            retailer_id=retailer_id,
            price=command.price,
            quantity=command.quantity,
            soil_type=command.soil_type,
            pesticides=command.pesticides,
            harvest_date=command.harvest_date,
            latitude=command.latitude,
            longitude=command.longitude,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "Product listed",
            product_id=str(product.id),
            producer_id=str(command.producer_id),
            retailer_id=retailer_id,
        )
        return str(product.id)
