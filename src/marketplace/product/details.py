"""Farmer-side product edits: commands and handler."""

from protean import handle
from protean.fields import Date, Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.product.product import Product, ProductStatus


@marketplace.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    crop_type: String(max_length=100)
    soil_type: String(max_length=100)
    pesticides: String(max_length=255)
    harvest_date: Date()
    latitude: Float(min_value=-90.0, max_value=90.0)
    longitude: Float(min_value=-180.0, max_value=180.0)
    image_url: String(max_length=500)
    status: String(choices=ProductStatus)


@marketplace.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True)


@marketplace.command_handler(part_of=Product)
class ProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            crop_type=command.crop_type,
            soil_type=command.soil_type,
            pesticides=command.pesticides,
            harvest_date=command.harvest_date,
            latitude=command.latitude,
            longitude=command.longitude,
            image_url=command.image_url,
            status=command.status,
        )
        repo.add(product)

    @handle(ChangeProductPrice)
    def change_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price)
        repo.add(product)
