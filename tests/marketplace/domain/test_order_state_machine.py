"""Tests for the Order state machine: valid transitions and invalid transition guards."""

import pytest
from marketplace.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPacked,
    OrderShipped,
)
from marketplace.order.order import TERMINAL_STATES, Order, OrderStatus
from marketplace.product.product import Product
from marketplace.shared.errors import InvalidStateTransitionError
from protean.exceptions import ValidationError


def _make_order():
    product = Product.create(
        name="Organic Tomatoes",
        crop_type="Tomatoes",
        producer_id="farmer-1",
        retailer_id="ret-1",
        price=10.0,
        quantity=5,
    )
    return Order.place("cust-1", [(product, 2)])


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = _make_order()
    order._events.clear()

    if target_status == OrderStatus.PLACED:
        return order

    if target_status == OrderStatus.CANCELLED:
        order.cancel(cancelled_by="cust-1")
        order._events.clear()
        return order

    order.confirm()
    if target_status == OrderStatus.CONFIRMED:
        order._events.clear()
        return order

    order.pack("dist-1")
    if target_status == OrderStatus.PACKED:
        order._events.clear()
        return order

    order.ship()
    if target_status == OrderStatus.SHIPPED:
        order._events.clear()
        return order

    order.deliver()
    order._events.clear()
    return order


def _transition(order, name):
    if name == "pack":
        order.pack("dist-1")
    else:
        getattr(order, name)()


_ALL_TRANSITIONS = ["confirm", "pack", "ship", "deliver", "cancel"]

_ALLOWED = {
    OrderStatus.PLACED: {"confirm", "cancel"},
    OrderStatus.CONFIRMED: {"pack", "cancel"},
    OrderStatus.PACKED: {"ship", "cancel"},
    OrderStatus.SHIPPED: {"deliver", "cancel"},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

_INVALID = [(state, name) for state, allowed in _ALLOWED.items() for name in _ALL_TRANSITIONS if name not in allowed]


class TestValidTransitions:
    def test_confirm(self):
        order = _order_at_state(OrderStatus.PLACED)
        order.confirm()
        assert order.status == OrderStatus.CONFIRMED.value
        assert isinstance(order._events[-1], OrderConfirmed)

    def test_pack_assigns_distributor(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.pack("dist-7")
        assert order.status == OrderStatus.PACKED.value
        assert order.distributor_id == "dist-7"
        assert order._events[-1].distributor_id == "dist-7"
        assert isinstance(order._events[-1], OrderPacked)

    def test_ship(self):
        order = _order_at_state(OrderStatus.PACKED)
        order.ship()
        assert order.status == OrderStatus.SHIPPED.value
        assert isinstance(order._events[-1], OrderShipped)

    def test_deliver(self):
        order = _order_at_state(OrderStatus.SHIPPED)
        order.deliver()
        assert order.status == OrderStatus.DELIVERED.value
        assert isinstance(order._events[-1], OrderDelivered)

    @pytest.mark.parametrize(
        "state",
        [OrderStatus.PLACED, OrderStatus.CONFIRMED, OrderStatus.PACKED, OrderStatus.SHIPPED],
    )
    def test_cancel_from_non_terminal_states(self, state):
        order = _order_at_state(state)
        order.cancel(cancelled_by="cust-1", reason="Changed my mind")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_by == "cust-1"
        assert order.cancellation_reason == "Changed my mind"
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == state.value

    def test_full_path(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.is_terminal


class TestInvalidTransitions:
    @pytest.mark.parametrize("state,transition", _INVALID, ids=[f"{s.value}-{t}" for s, t in _INVALID])
    def test_rejected_and_order_unchanged(self, state, transition):
        order = _order_at_state(state)
        before = (order.status, order.distributor_id, order.updated_at)

        with pytest.raises(InvalidStateTransitionError) as exc:
            _transition(order, transition)

        assert (order.status, order.distributor_id, order.updated_at) == before
        assert exc.value.current == state.value
        assert order._events == []

    def test_ship_from_placed_names_both_states(self):
        order = _order_at_state(OrderStatus.PLACED)
        with pytest.raises(InvalidStateTransitionError) as exc:
            order.ship()
        assert exc.value.messages == {"status": ["Cannot transition from PLACED to SHIPPED"]}

    @pytest.mark.parametrize("state", sorted(TERMINAL_STATES, key=lambda s: s.value))
    @pytest.mark.parametrize("transition", _ALL_TRANSITIONS)
    def test_terminal_states_are_sticky(self, state, transition):
        order = _order_at_state(state)
        with pytest.raises(InvalidStateTransitionError):
            _transition(order, transition)
        assert order.status == state.value


class TestPackRequiresDistributor:
    @pytest.mark.parametrize("distributor_id", [None, "", "   "])
    def test_missing_distributor(self, distributor_id):
        order = _order_at_state(OrderStatus.CONFIRMED)
        with pytest.raises(ValidationError) as exc:
            order.pack(distributor_id)
        assert "distributor_id" in exc.value.messages
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.distributor_id is None

    def test_state_is_checked_before_distributor(self):
        order = _order_at_state(OrderStatus.PLACED)
        with pytest.raises(InvalidStateTransitionError):
            order.pack(None)
