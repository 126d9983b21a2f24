"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out: prices locked, stock deducted."""

    __version__ = 1

    order_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    total_amount: Float(required=True)
    item_count: Integer(required=True)
    placed_at: DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderConfirmed:
    """The retailer accepted the order."""

    __version__ = 1

    order_id: Identifier(required=True)
    confirmed_at: DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderPacked:
    """The order was packed and handed to a distributor."""

    __version__ = 1

    order_id: Identifier(required=True)
    distributor_id: Identifier(required=True)
    packed_at: DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id: Identifier(required=True)
    distributor_id: Identifier(required=True)
    shipped_at: DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id: Identifier(required=True)
    distributor_id: Identifier(required=True)
    delivered_at: DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its items returned to stock."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    cancelled_by: Identifier()
    reason: String()
    cancelled_at: DateTime(required=True)
