"""Core marketplace operations.

Every state change goes through `dispatch`, which processes the command
synchronously inside its own unit of work under the marketplace write
lock. Operations that act on behalf of someone take the authenticated
`Principal` explicitly; identity is never read from request payloads.
"""

import json

from protean.utils.globals import current_domain

from marketplace.assignment.resolver import require_retailer
from marketplace.order.cancellation import CancelOrder
from marketplace.order.checkout import PlaceOrder
from marketplace.order.fulfillment import ConfirmOrder, DeliverOrder, PackOrder, ShipOrder
from marketplace.order.order import Order
from marketplace.product.details import ChangeProductPrice, UpdateProductDetails
from marketplace.product.listing import ListProduct
from marketplace.product.product import Product
from marketplace.product.reassignment import ReassignRetailer
from marketplace.shared.errors import NotAuthorizedError
from marketplace.shared.persistence import dispatch
from marketplace.shared.principal import Principal, Role
from marketplace.user.registration import RegisterUser
from marketplace.user.user import User


def _orders():
    return current_domain.repository_for(Order)


def _products():
    return current_domain.repository_for(Product)


def _ensure_producer(principal: Principal, product: Product):
    """Only the farmer who listed a product, or an admin, may edit it."""
    if principal.has_role(Role.ADMIN):
        return
    if str(product.producer_id) != str(principal.user_id):
        raise NotAuthorizedError({"product_id": [f"Product {product.id} was not listed by user {principal.user_id}"]})


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
def register_user(name: str, email: str, role: str) -> User:
    user_id = dispatch(RegisterUser(name=name, email=email, role=role))
    return current_domain.repository_for(User).get(user_id)


def get_user(user_id) -> User:
    return current_domain.repository_for(User).get(user_id)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
def list_product(principal: Principal, name: str, crop_type: str, retailer_id=None, **details) -> Product:
    """List produce for the principal, routed to `retailer_id` or to a resolved retailer."""
    product_id = dispatch(
        ListProduct(
            producer_id=principal.user_id,
            name=name,
            crop_type=crop_type,
            retailer_id=retailer_id,
            **details,
        )
    )
    return _products().get(product_id)


def reassign_retailer(principal: Principal, product_id, retailer_id) -> Product:
    dispatch(ReassignRetailer(product_id=product_id, retailer_id=retailer_id, reassigned_by=principal.user_id))
    return _products().get(product_id)


def update_product_details(principal: Principal, product_id, **details) -> Product:
    _ensure_producer(principal, _products().get(product_id))
    dispatch(UpdateProductDetails(product_id=product_id, **details))
    return _products().get(product_id)


def change_product_price(principal: Principal, product_id, price: float) -> Product:
    _ensure_producer(principal, _products().get(product_id))
    dispatch(ChangeProductPrice(product_id=product_id, price=price))
    return _products().get(product_id)


def get_product(product_id) -> Product:
    return _products().get(product_id)


def list_available_products() -> list[Product]:
    return _products().available()


def list_products_by_producer(producer_id) -> list[Product]:
    return _products().listed_by(producer_id)


def list_products_by_retailer(retailer_id) -> list[Product]:
    require_retailer(retailer_id)
    return _products().assigned_to(retailer_id)


# ---------------------------------------------------------------------------
# Checkout and order queries
# ---------------------------------------------------------------------------
def place_order(principal: Principal, items) -> Order:
    """Check out `items` (`[{"product_id": ..., "quantity": ...}]`) for the principal."""
    order_id = dispatch(PlaceOrder(customer_id=principal.user_id, items=json.dumps(list(items))))
    return _orders().get(order_id)


def get_order(order_id) -> Order:
    return _orders().get(order_id)


def list_orders_by_customer(customer_id) -> list[Order]:
    return _orders().placed_by(customer_id)


def list_orders_by_retailer(retailer_id) -> list[Order]:
    return _orders().for_retailer(retailer_id)


def list_pending_orders_for_retailer(retailer_id) -> list[Order]:
    return _orders().pending_for_retailer(retailer_id)


def list_orders_by_farmer(producer_id) -> list[Order]:
    return _orders().for_farmer(producer_id)


def list_orders_by_distributor(distributor_id) -> list[Order]:
    return _orders().for_distributor(distributor_id)


def list_orders_awaiting_packing() -> list[Order]:
    return _orders().awaiting_packing()


def list_orders_ready_to_ship() -> list[Order]:
    return _orders().ready_to_ship()


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
def confirm_order(order_id) -> Order:
    dispatch(ConfirmOrder(order_id=order_id))
    return _orders().get(order_id)


def pack_order(order_id, distributor_id) -> Order:
    dispatch(PackOrder(order_id=order_id, distributor_id=distributor_id))
    return _orders().get(order_id)


def ship_order(order_id) -> Order:
    dispatch(ShipOrder(order_id=order_id))
    return _orders().get(order_id)


def deliver_order(order_id) -> Order:
    dispatch(DeliverOrder(order_id=order_id))
    return _orders().get(order_id)


def cancel_order(principal: Principal, order_id, reason: str | None = None) -> Order:
    """Cancel the order and restore its items to stock, recording who cancelled.

    Customers may only cancel their own orders; operators may cancel any.
    """
    order = _orders().get(order_id)
    if not principal.is_operator and str(order.customer_id) != str(principal.user_id):
        raise NotAuthorizedError({"order_id": [f"Order {order_id} does not belong to user {principal.user_id}"]})

    dispatch(CancelOrder(order_id=order_id, cancelled_by=principal.user_id, reason=reason))
    return _orders().get(order_id)
