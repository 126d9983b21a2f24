"""Product aggregate: a farmer's listed produce and its stock level."""

from datetime import date, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.shared import money
from marketplace.shared.errors import InsufficientStockError


class ProductStatus(Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


def _check_price(price):
    if price <= 0:
        raise ValidationError({"price": ["Price must be greater than zero"]})
    if not money.is_whole_cents(price):
        raise ValidationError({"price": [f"Price {price} must be a whole number of cents"]})


# Attributes the owning farmer may edit after listing
_EDITABLE_DETAILS = (
    "name",
    "crop_type",
    "soil_type",
    "pesticides",
    "harvest_date",
    "latitude",
    "longitude",
    "image_url",
    "status",
)


@marketplace.aggregate
class Product:
    """Product aggregate root.

    `quantity` is the inventory ledger for this product. Only
    `deduct_stock` (checkout) and `restock` (cancellation) change it.
    """

    name: String(required=True, max_length=255)
    crop_type: String(required=True, max_length=100)
    price: Float(min_value=0.0)
    quantity: Integer(min_value=0, default=0)
    producer_id: Identifier()
    retailer_id: Identifier()
    status: String(choices=ProductStatus, default=ProductStatus.AVAILABLE.value)
    soil_type: String(max_length=100)
    pesticides: String(max_length=255)
    harvest_date: Date()
    latitude: Float(min_value=-90.0, max_value=90.0)
    longitude: Float(min_value=-180.0, max_value=180.0)
    image_url: String(max_length=500)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def stock_can_never_go_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Stock quantity cannot be negative"]})

    @classmethod
    def create(
        cls,
        name,
        crop_type,
        producer_id,
        retailer_id,
        price=None,
        quantity=0,
        soil_type=None,
        pesticides=None,
        harvest_date=None,
        latitude=None,
        longitude=None,
        image_url=None,
    ):
        from marketplace.product.events import ProductListed

        if price is not None:
            _check_price(price)

        now = datetime.now()
        product = cls(
            name=name,
            crop_type=crop_type,
            price=price,
            quantity=quantity,
            producer_id=producer_id,
            retailer_id=retailer_id,
            soil_type=soil_type,
            pesticides=pesticides,
            harvest_date=harvest_date,
            latitude=latitude,
            longitude=longitude,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=product.id,
                name=name,
                crop_type=crop_type,
                producer_id=producer_id,
                retailer_id=retailer_id,
                price=price,
                quantity=product.quantity,
                listed_at=now,
            )
        )
        return product

    @property
    def is_assigned(self) -> bool:
        return bool(self.producer_id) and bool(self.retailer_id)

    @property
    def is_purchasable(self) -> bool:
        return (
            self.status == ProductStatus.AVAILABLE.value
            and self.is_assigned
            and (self.quantity or 0) > 0
            and self.price is not None
            and self.price > 0
        )

    def reassign_retailer(self, retailer_id, reassigned_by=None):
        from marketplace.product.events import RetailerReassigned

        previous = self.retailer_id
        self.retailer_id = retailer_id
        self.updated_at = datetime.now()

        self.raise_(
            RetailerReassigned(
                product_id=self.id,
                previous_retailer_id=previous,
                retailer_id=retailer_id,
                reassigned_by=reassigned_by,
                reassigned_at=self.updated_at,
            )
        )

    def change_price(self, price):
        from marketplace.product.events import ProductPriceChanged

        if price is None:
            raise ValidationError({"price": ["Price must be greater than zero"]})
        _check_price(price)

        previous = self.price
        self.price = price
        self.updated_at = datetime.now()

        self.raise_(ProductPriceChanged(product_id=self.id, previous_price=previous, new_price=price))

    def update_details(self, **details):
        from marketplace.product.events import ProductDetailsUpdated

        unknown = set(details) - set(_EDITABLE_DETAILS)
        if unknown:
            raise ValidationError({"details": [f"Cannot update {', '.join(sorted(unknown))}"]})

        changed = []
        for attribute, value in details.items():
            if value is None:
                continue
            if attribute == "harvest_date" and isinstance(value, str):
                value = date.fromisoformat(value)
            setattr(self, attribute, value)
            changed.append(attribute)

        if not changed:
            return

        self.updated_at = datetime.now()
        self.raise_(ProductDetailsUpdated(product_id=self.id, changed_fields=", ".join(changed)))

    def deduct_stock(self, quantity: int, order_id):
        """Take `quantity` units out of stock for `order_id`."""
        from marketplace.product.events import StockDeducted

        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity to deduct must be positive"]})
        available = self.quantity or 0
        if available <= 0 or available < quantity:
            raise InsufficientStockError(self.id, available, quantity)

        self.quantity = available - quantity
        self.updated_at = datetime.now()

        self.raise_(
            StockDeducted(product_id=self.id, order_id=order_id, quantity=quantity, remaining=self.quantity)
        )

    def restock(self, quantity: int, order_id):
        """Return `quantity` units of a cancelled order to stock."""
        from marketplace.product.events import StockRestored

        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity to restore must be positive"]})

        self.quantity = (self.quantity or 0) + quantity
        self.updated_at = datetime.now()

        self.raise_(
            StockRestored(product_id=self.id, order_id=order_id, quantity=quantity, remaining=self.quantity)
        )
