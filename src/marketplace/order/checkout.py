"""Checkout: the PlaceOrder command, its handler, and the CheckoutService.

Checkout validates every cart line before touching anything, then places
the order and deducts stock. The handler runs inside one unit of work,
so a failure at any point leaves no order and no stock change behind.
"""

import json
from typing import NamedTuple

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.order.order import Order
from marketplace.product.product import Product
from marketplace.shared.errors import InsufficientStockError
from marketplace.shared.persistence import persist

DEFAULT_MAX_CART_ITEMS = 100


class CartLine(NamedTuple):
    product_id: str
    quantity: int


def max_cart_items() -> int:
    custom = current_domain.config.get("custom") or {}
    return int(custom.get("MAX_CART_ITEMS", DEFAULT_MAX_CART_ITEMS))


def parse_cart(raw, max_items: int = DEFAULT_MAX_CART_ITEMS) -> list[CartLine]:
    """Turn the command's JSON cart into `CartLine`s, rejecting malformed carts."""
    try:
        entries = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({"items": ["Cart must be a JSON list of items"]}) from None

    if not isinstance(entries, list):
        raise ValidationError({"items": ["Cart must be a list of items"]})
    if not entries:
        raise ValidationError({"items": ["Cart cannot be empty"]})
    if len(entries) > max_items:
        raise ValidationError({"items": [f"Cart cannot contain more than {max_items} items"]})

    lines = []
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict) or not entry.get("product_id"):
            raise ValidationError({"items": [f"Item {position} must name a product"]})
        quantity = entry.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"items": [f"Item {position} quantity must be a positive whole number"]})
        lines.append(CartLine(product_id=str(entry["product_id"]), quantity=quantity))
    return lines


@marketplace.domain_service(part_of=[Order, Product])
class CheckoutService:
    """Convert a cart into a placed Order and the matching stock deductions.

    `products` maps product id to the loaded Product. A cart line whose id
    is missing from the map refers to a product that does not exist.
    """

    def __init__(self, customer_id, cart, products):
        super().__init__(*products.values())
        self.customer_id = customer_id
        self.cart = cart
        self.products = products

    def place_order(self) -> Order:
        self._validate()

        order = Order.place(
            self.customer_id,
            [(self.products[line.product_id], line.quantity) for line in self.cart],
        )
        for line in self.cart:
            self.products[line.product_id].deduct_stock(line.quantity, order.id)
        return order

    def _validate(self):
        """Check every line in cart order; the first failure wins."""
        requested = {}
        for line in self.cart:
            product = self.products.get(line.product_id)
            if product is None:
                raise ObjectNotFoundError({"product_id": [f"Product {line.product_id} does not exist"]})

            if not product.is_assigned:
                raise ValidationError(
                    {"product_id": [f"Product {product.id} is not assigned to both a producer and a retailer"]}
                )

            # Repeated lines for one product draw on the same stock
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
            available = product.quantity or 0
            if available <= 0 or available < requested[line.product_id]:
                raise InsufficientStockError(product.id, available, requested[line.product_id])

            if product.price is None or product.price <= 0:
                raise ValidationError({"price": [f"Product {product.id} has no valid price"]})


@marketplace.command(part_of="Order")
class PlaceOrder:
    customer_id: Identifier(required=True)
    items: Text(required=True)  # JSON: [{"product_id": ..., "quantity": ...}]


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = parse_cart(command.items, max_cart_items())

        catalog = current_domain.repository_for(Product)
        products = {}
        for line in cart:
            if line.product_id in products:
                continue
            try:
                products[line.product_id] = catalog.get(line.product_id)
            except ObjectNotFoundError:
                continue

        order = CheckoutService(command.customer_id, cart, products).place_order()
        persist(order, *products.values())

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total_amount=str(order.amount),
            item_count=len(order.items),
        )
        return str(order.id)
