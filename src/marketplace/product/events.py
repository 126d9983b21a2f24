"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A farmer listed produce and it was routed to a retailer."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    crop_type: String(required=True)
    producer_id: Identifier(required=True)
    retailer_id: Identifier(required=True)
    price: Float()
    quantity: Integer(required=True)
    listed_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class RetailerReassigned:
    """Audit record of a product moving to a different retailer."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_retailer_id: Identifier()
    retailer_id: Identifier(required=True)
    reassigned_by: Identifier()
    reassigned_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductPriceChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float()
    new_price: Float(required=True)


@marketplace.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: String(required=True)


@marketplace.event(part_of="Product")
class StockDeducted:
    """Units left stock because an order was placed."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@marketplace.event(part_of="Product")
class StockRestored:
    """Units returned to stock because an order was cancelled."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
