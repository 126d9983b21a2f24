"""Order aggregate root with OrderItem entity and the fulfillment state machine."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.shared.errors import InvalidStateTransitionError
from marketplace.shared import money


class OrderStatus(Enum):
    """Enumeration of order lifecycle states."""

    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PACKED = "PACKED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# State machine: valid transitions from each status
_VALID_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PACKED, OrderStatus.CANCELLED},
    OrderStatus.PACKED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)

# States in which a distributor must be on record
_DISTRIBUTED_STATES = frozenset({OrderStatus.PACKED, OrderStatus.SHIPPED, OrderStatus.DELIVERED})


@marketplace.entity(part_of="Order")
class OrderItem:
    """A purchased line with its price locked at checkout.

    Producer and retailer are copied from the product so the line keeps
    its provenance after the product is reassigned. None of the fields
    have mutators: an item is written once, by `Order.place`.
    """

    product_id: Identifier(required=True)
    producer_id: Identifier(required=True)
    retailer_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    price_at_purchase: Float(required=True, min_value=0.01)
    created_at: DateTime(default=datetime.now)

    @property
    def line_total(self) -> Decimal:
        return money.line_total(self.price_at_purchase, self.quantity)


@marketplace.aggregate
class Order:
    """Order aggregate root.

    Items and prices are fixed at placement. Everything afterwards is a
    status change through `_VALID_TRANSITIONS`.
    """

    customer_id: Identifier(required=True)
    distributor_id: Identifier()
    status: String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    total_amount: Float(required=True, min_value=0.0)
    items: HasMany(OrderItem)
    cancelled_by: Identifier()
    cancellation_reason: String(max_length=500)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def total_must_equal_sum_of_line_totals(self):
        if not self.items:
            return
        expected = money.total_of(item.line_total for item in self.items)
        actual = money.to_amount(self.total_amount)
        if actual != expected:
            raise ValidationError({"total_amount": [f"Order total {actual} does not match line totals {expected}"]})

    @invariant.post
    def distributor_required_once_packed(self):
        if OrderStatus(self.status) in _DISTRIBUTED_STATES and not self.distributor_id:
            raise ValidationError({"distributor_id": ["A packed order must have a distributor"]})

    @classmethod
    def place(cls, customer_id, lines):
        """Create a PLACED order.

        `lines` is a sequence of `(product, quantity)` pairs whose products
        have already passed checkout validation. Each item snapshots the
        product's current price and provenance.
        """
        from marketplace.order.events import OrderPlaced

        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now()
        items = [
            OrderItem(
                product_id=product.id,
                producer_id=product.producer_id,
                retailer_id=product.retailer_id,
                quantity=quantity,
                price_at_purchase=product.price,
                created_at=now,
            )
            for product, quantity in lines
        ]
        total = money.total_of(item.line_total for item in items)

        order = cls(
            customer_id=customer_id,
            status=OrderStatus.PLACED.value,
            total_amount=float(total),
            items=items,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                customer_id=customer_id,
                total_amount=float(total),
                item_count=len(items),
                placed_at=now,
            )
        )
        return order

    @property
    def amount(self) -> Decimal:
        """The order total as a two-place Decimal."""
        return money.to_amount(self.total_amount)

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATES

    def can_transition_to(self, target_status: OrderStatus) -> bool:
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    def _assert_can_transition(self, target_status: OrderStatus):
        """Raise if the state machine does not allow moving to `target_status`."""
        if not self.can_transition_to(target_status):
            raise InvalidStateTransitionError(OrderStatus(self.status).value, target_status.value)

    def _move_to(self, target_status: OrderStatus):
        self.status = target_status.value
        self.updated_at = datetime.now()

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def confirm(self):
        from marketplace.order.events import OrderConfirmed

        self._assert_can_transition(OrderStatus.CONFIRMED)
        self._move_to(OrderStatus.CONFIRMED)
        self.raise_(OrderConfirmed(order_id=self.id, confirmed_at=self.updated_at))

    def pack(self, distributor_id):
        from marketplace.order.events import OrderPacked

        self._assert_can_transition(OrderStatus.PACKED)
        if not distributor_id or not str(distributor_id).strip():
            raise ValidationError({"distributor_id": ["A valid distributor is required to pack an order"]})

        self.distributor_id = distributor_id
        self._move_to(OrderStatus.PACKED)
        self.raise_(OrderPacked(order_id=self.id, distributor_id=distributor_id, packed_at=self.updated_at))

    def ship(self):
        from marketplace.order.events import OrderShipped

        self._assert_can_transition(OrderStatus.SHIPPED)
        self._move_to(OrderStatus.SHIPPED)
        self.raise_(
            OrderShipped(order_id=self.id, distributor_id=self.distributor_id, shipped_at=self.updated_at)
        )

    def deliver(self):
        from marketplace.order.events import OrderDelivered

        self._assert_can_transition(OrderStatus.DELIVERED)
        self._move_to(OrderStatus.DELIVERED)
        self.raise_(
            OrderDelivered(order_id=self.id, distributor_id=self.distributor_id, delivered_at=self.updated_at)
        )

    def cancel(self, cancelled_by=None, reason=None):
        """Cancel the order. Restoring stock is the caller's half of the job."""
        from marketplace.order.events import OrderCancelled

        self._assert_can_transition(OrderStatus.CANCELLED)
        previous = self.status
        self.cancelled_by = cancelled_by
        self.cancellation_reason = reason
        self._move_to(OrderStatus.CANCELLED)
        self.raise_(
            OrderCancelled(
                order_id=self.id,
                previous_status=previous,
                cancelled_by=cancelled_by,
                reason=reason,
                cancelled_at=self.updated_at,
            )
        )
