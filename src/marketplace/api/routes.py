"""FastAPI endpoints for the marketplace."""

from fastapi import APIRouter, Depends

from marketplace import operations
from marketplace.api.auth import current_principal, require_roles
from marketplace.api.schemas import (
    CancelOrderRequest,
    ChangePriceRequest,
    CheckoutRequest,
    ListProductRequest,
    OrderItemResponse,
    OrderResponse,
    PackOrderRequest,
    ProductResponse,
    ReassignRetailerRequest,
    RegisterUserRequest,
    UpdateProductDetailsRequest,
    UserResponse,
)
from marketplace.order.order import Order
from marketplace.product.product import Product
from marketplace.shared.principal import OPERATOR_ROLES, Principal, Role
from marketplace.user.user import User

user_router = APIRouter(prefix="/users", tags=["users"])
product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])

_CANCELLERS = (Role.CUSTOMER, *sorted(OPERATOR_ROLES, key=lambda role: role.value))


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        user_id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        registered_at=user.registered_at,
    )


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        crop_type=product.crop_type,
        price=product.price,
        quantity=product.quantity or 0,
        producer_id=str(product.producer_id) if product.producer_id else None,
        retailer_id=str(product.retailer_id) if product.retailer_id else None,
        status=product.status,
        soil_type=product.soil_type,
        pesticides=product.pesticides,
        harvest_date=product.harvest_date,
        latitude=product.latitude,
        longitude=product.longitude,
        image_url=product.image_url,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        distributor_id=str(order.distributor_id) if order.distributor_id else None,
        status=order.status,
        total_amount=float(order.amount),
        items=[
            OrderItemResponse(
                item_id=str(item.id),
                product_id=str(item.product_id),
                producer_id=str(item.producer_id),
                retailer_id=str(item.retailer_id),
                quantity=item.quantity,
                price_at_purchase=item.price_at_purchase,
                line_total=float(item.line_total),
            )
            for item in order.items
        ],
        cancelled_by=str(order.cancelled_by) if order.cancelled_by else None,
        cancellation_reason=order.cancellation_reason,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# --- User endpoints ---


@user_router.post("", status_code=201, response_model=UserResponse)
async def register_user(body: RegisterUserRequest) -> UserResponse:
    user = operations.register_user(name=body.name, email=body.email, role=body.role.lower())
    return _user_response(user)


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str) -> UserResponse:
    return _user_response(operations.get_user(user_id))


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductResponse)
async def list_product(
    body: ListProductRequest,
    principal: Principal = Depends(require_roles(Role.FARMER)),
) -> ProductResponse:
    product = operations.list_product(
        principal,
        name=body.name,
        crop_type=body.crop_type,
        retailer_id=body.retailer_id,
        price=body.price,
        quantity=body.quantity,
        soil_type=body.soil_type,
        pesticides=body.pesticides,
        harvest_date=body.harvest_date,
        latitude=body.latitude,
        longitude=body.longitude,
        image_url=body.image_url,
    )
    return _product_response(product)


@product_router.get("", response_model=list[ProductResponse])
async def list_available_products() -> list[ProductResponse]:
    return [_product_response(product) for product in operations.list_available_products()]


@product_router.get("/mine", response_model=list[ProductResponse])
async def list_my_products(
    principal: Principal = Depends(require_roles(Role.FARMER, Role.RETAILER)),
) -> list[ProductResponse]:
    if principal.has_role(Role.RETAILER):
        products = operations.list_products_by_retailer(principal.user_id)
    else:
        products = operations.list_products_by_producer(principal.user_id)
    return [_product_response(product) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(operations.get_product(product_id))


@product_router.put("/{product_id}/details", response_model=ProductResponse)
async def update_product_details(
    product_id: str,
    body: UpdateProductDetailsRequest,
    principal: Principal = Depends(require_roles(Role.FARMER, Role.ADMIN)),
) -> ProductResponse:
    product = operations.update_product_details(principal, product_id, **body.model_dump(exclude_none=True))
    return _product_response(product)


@product_router.put("/{product_id}/price", response_model=ProductResponse)
async def change_product_price(
    product_id: str,
    body: ChangePriceRequest,
    principal: Principal = Depends(require_roles(Role.FARMER, Role.ADMIN)),
) -> ProductResponse:
    return _product_response(operations.change_product_price(principal, product_id, body.price))


@product_router.put("/{product_id}/retailer", response_model=ProductResponse)
async def reassign_retailer(
    product_id: str,
    body: ReassignRetailerRequest,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
) -> ProductResponse:
    return _product_response(operations.reassign_retailer(principal, product_id, body.retailer_id))


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def checkout(
    body: CheckoutRequest,
    principal: Principal = Depends(require_roles(Role.CUSTOMER)),
) -> OrderResponse:
    order = operations.place_order(principal, [item.model_dump() for item in body.items])
    return _order_response(order)


@order_router.get("/mine", response_model=list[OrderResponse])
async def list_my_orders(principal: Principal = Depends(current_principal)) -> list[OrderResponse]:
    """Orders visible to the caller: placed, sold, grown or carried by them."""
    queries = {
        Role.CUSTOMER: operations.list_orders_by_customer,
        Role.RETAILER: operations.list_orders_by_retailer,
        Role.FARMER: operations.list_orders_by_farmer,
        Role.DISTRIBUTOR: operations.list_orders_by_distributor,
    }
    query = queries.get(Role(principal.role))
    orders = query(principal.user_id) if query else []
    return [_order_response(order) for order in orders]


@order_router.get("/pending", response_model=list[OrderResponse])
async def list_pending_orders(
    principal: Principal = Depends(require_roles(Role.RETAILER)),
) -> list[OrderResponse]:
    return [_order_response(order) for order in operations.list_pending_orders_for_retailer(principal.user_id)]


@order_router.get("/awaiting-packing", response_model=list[OrderResponse])
async def list_orders_awaiting_packing(
    principal: Principal = Depends(require_roles(Role.ADMIN)),
) -> list[OrderResponse]:
    return [_order_response(order) for order in operations.list_orders_awaiting_packing()]


@order_router.get("/ready-to-ship", response_model=list[OrderResponse])
async def list_orders_ready_to_ship(
    principal: Principal = Depends(require_roles(Role.DISTRIBUTOR, Role.ADMIN)),
) -> list[OrderResponse]:
    return [_order_response(order) for order in operations.list_orders_ready_to_ship()]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    return _order_response(operations.get_order(order_id))


@order_router.put("/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(
    order_id: str,
    principal: Principal = Depends(require_roles(Role.RETAILER)),
) -> OrderResponse:
    return _order_response(operations.confirm_order(order_id))


@order_router.put("/{order_id}/pack", response_model=OrderResponse)
async def pack_order(
    order_id: str,
    body: PackOrderRequest,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
) -> OrderResponse:
    return _order_response(operations.pack_order(order_id, body.distributor_id))


@order_router.put("/{order_id}/ship", response_model=OrderResponse)
async def ship_order(
    order_id: str,
    principal: Principal = Depends(require_roles(Role.DISTRIBUTOR)),
) -> OrderResponse:
    return _order_response(operations.ship_order(order_id))


@order_router.put("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(
    order_id: str,
    principal: Principal = Depends(require_roles(Role.DISTRIBUTOR)),
) -> OrderResponse:
    return _order_response(operations.deliver_order(order_id))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    principal: Principal = Depends(require_roles(*_CANCELLERS)),
) -> OrderResponse:
    reason = body.reason if body else None
    return _order_response(operations.cancel_order(principal, order_id, reason=reason))
