"""Order lifecycle through the core operations."""

import pytest
from marketplace import operations
from marketplace.order.order import OrderStatus
from marketplace.shared.errors import InvalidStateTransitionError
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def order(customer, list_produce):
    tomatoes = list_produce(price=10.0, quantity=5)
    return operations.place_order(customer, [{"product_id": tomatoes.id, "quantity": 2}])


class TestFulfillmentPath:
    def test_confirm(self, order):
        assert operations.confirm_order(order.id).status == OrderStatus.CONFIRMED.value

    def test_pack_records_distributor(self, order, distributor):
        operations.confirm_order(order.id)
        packed = operations.pack_order(order.id, distributor.user_id)
        assert packed.status == OrderStatus.PACKED.value
        assert packed.distributor_id == distributor.user_id

    def test_through_to_delivery(self, order, distributor):
        operations.confirm_order(order.id)
        operations.pack_order(order.id, distributor.user_id)
        operations.ship_order(order.id)
        delivered = operations.deliver_order(order.id)

        assert delivered.status == OrderStatus.DELIVERED.value
        assert delivered.updated_at >= delivered.created_at

    def test_items_are_untouched_by_transitions(self, order, distributor):
        before = sorted((item.id, item.quantity, item.price_at_purchase) for item in order.items)
        operations.confirm_order(order.id)
        operations.pack_order(order.id, distributor.user_id)
        after = operations.ship_order(order.id)
        assert sorted((item.id, item.quantity, item.price_at_purchase) for item in after.items) == before
        assert after.total_amount == order.total_amount


class TestIllegalTransitions:
    def test_ship_placed_order(self, order):
        with pytest.raises(InvalidStateTransitionError):
            operations.ship_order(order.id)
        assert operations.get_order(order.id).status == OrderStatus.PLACED.value

    def test_deliver_confirmed_order(self, order):
        operations.confirm_order(order.id)
        with pytest.raises(InvalidStateTransitionError):
            operations.deliver_order(order.id)
        assert operations.get_order(order.id).status == OrderStatus.CONFIRMED.value

    def test_confirm_twice(self, order):
        operations.confirm_order(order.id)
        with pytest.raises(InvalidStateTransitionError):
            operations.confirm_order(order.id)

    def test_delivered_order_is_final(self, order, customer, distributor):
        operations.confirm_order(order.id)
        operations.pack_order(order.id, distributor.user_id)
        operations.ship_order(order.id)
        operations.deliver_order(order.id)

        for attempt in (
            lambda: operations.confirm_order(order.id),
            lambda: operations.pack_order(order.id, distributor.user_id),
            lambda: operations.ship_order(order.id),
            lambda: operations.deliver_order(order.id),
            lambda: operations.cancel_order(customer, order.id),
        ):
            with pytest.raises(InvalidStateTransitionError):
                attempt()
        assert operations.get_order(order.id).status == OrderStatus.DELIVERED.value

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            operations.confirm_order("no-such-order")


class TestPackingDistributor:
    def test_distributor_required(self, order):
        operations.confirm_order(order.id)
        with pytest.raises(ValidationError):
            operations.pack_order(order.id, None)
        reloaded = operations.get_order(order.id)
        assert reloaded.status == OrderStatus.CONFIRMED.value
        assert reloaded.distributor_id is None

    def test_distributor_must_be_registered(self, order):
        operations.confirm_order(order.id)
        with pytest.raises(ValidationError):
            operations.pack_order(order.id, "ghost-distributor")
        assert operations.get_order(order.id).status == OrderStatus.CONFIRMED.value

    def test_distributor_must_hold_distributor_role(self, order, retailer):
        operations.confirm_order(order.id)
        with pytest.raises(ValidationError):
            operations.pack_order(order.id, retailer.user_id)
        assert operations.get_order(order.id).distributor_id is None
