"""Role-scoped order queries."""

import pytest
from marketplace import operations
from marketplace.assignment.resolver import retailer_candidates


@pytest.fixture()
def second_farmer():
    return operations.register_user(name="Ravi Singh", email="ravi@riverbend.example", role="farmer").principal


@pytest.fixture()
def tomatoes(list_produce):
    return list_produce(name="Organic Tomatoes", crop_type="Tomatoes", price=2.5, quantity=50)


@pytest.fixture()
def oranges(second_farmer, retailer):
    return operations.list_product(second_farmer, name="Juicy Oranges", crop_type="Oranges", price=3.5, quantity=50)


def _buy(principal, *products):
    return operations.place_order(principal, [{"product_id": product.id, "quantity": 1} for product in products])


def _ids(orders):
    return [order.id for order in orders]


class TestCustomerOrders:
    def test_only_own_orders_newest_first(self, customer, second_customer, tomatoes):
        first = _buy(customer, tomatoes)
        _buy(second_customer, tomatoes)
        latest = _buy(customer, tomatoes)

        assert _ids(operations.list_orders_by_customer(customer.user_id)) == [latest.id, first.id]

    def test_no_orders(self, customer):
        assert operations.list_orders_by_customer(customer.user_id) == []


class TestRetailerOrders:
    def test_orders_with_any_item_from_retailer(self, customer, retailer, tomatoes, oranges):
        mixed = _buy(customer, tomatoes, oranges)
        only_oranges = _buy(customer, oranges)

        assert set(_ids(operations.list_orders_by_retailer(retailer.user_id))) == {mixed.id, only_oranges.id}

    def test_pending_orders_exclude_packed_and_cancelled(self, customer, retailer, distributor, tomatoes):
        placed = _buy(customer, tomatoes)
        confirmed = _buy(customer, tomatoes)
        operations.confirm_order(confirmed.id)
        packed = _buy(customer, tomatoes)
        operations.confirm_order(packed.id)
        operations.pack_order(packed.id, distributor.user_id)
        cancelled = _buy(customer, tomatoes)
        operations.cancel_order(customer, cancelled.id)

        pending = _ids(operations.list_pending_orders_for_retailer(retailer.user_id))
        assert set(pending) == {placed.id, confirmed.id}

    def test_reassignment_does_not_move_existing_orders(self, customer, admin, retailer, tomatoes):
        order = _buy(customer, tomatoes)
        newcomer = operations.register_user(name="Corner Grocer", email="hi@cornergrocer.example", role="retailer")
        operations.reassign_retailer(admin, tomatoes.id, newcomer.id)

        assert _ids(operations.list_orders_by_retailer(retailer.user_id)) == [order.id]
        assert operations.list_orders_by_retailer(newcomer.id) == []


class TestFarmerOrders:
    def test_orders_containing_farmers_produce(self, customer, farmer, second_farmer, tomatoes, oranges):
        with_tomatoes = _buy(customer, tomatoes, oranges)
        oranges_only = _buy(customer, oranges)

        assert _ids(operations.list_orders_by_farmer(farmer.user_id)) == [with_tomatoes.id]
        assert set(_ids(operations.list_orders_by_farmer(second_farmer.user_id))) == {
            with_tomatoes.id,
            oranges_only.id,
        }


class TestDistributorOrders:
    def test_packed_shipped_and_delivered(self, customer, distributor, tomatoes):
        orders = [_buy(customer, tomatoes) for _ in range(4)]
        for order in orders:
            operations.confirm_order(order.id)
        for order in orders[1:]:
            operations.pack_order(order.id, distributor.user_id)
        operations.ship_order(orders[2].id)
        operations.ship_order(orders[3].id)
        operations.deliver_order(orders[3].id)

        assert set(_ids(operations.list_orders_by_distributor(distributor.user_id))) == {o.id for o in orders[1:]}

    def test_cancelled_orders_drop_out(self, customer, admin, distributor, tomatoes):
        order = _buy(customer, tomatoes)
        operations.confirm_order(order.id)
        operations.pack_order(order.id, distributor.user_id)
        operations.cancel_order(admin, order.id)

        assert operations.list_orders_by_distributor(distributor.user_id) == []


class TestWarehouseQueues:
    def test_awaiting_packing_and_ready_to_ship(self, customer, distributor, tomatoes):
        placed = _buy(customer, tomatoes)
        confirmed = _buy(customer, tomatoes)
        packed = _buy(customer, tomatoes)
        operations.confirm_order(confirmed.id)
        operations.confirm_order(packed.id)
        operations.pack_order(packed.id, distributor.user_id)

        assert _ids(operations.list_orders_awaiting_packing()) == [confirmed.id]
        assert _ids(operations.list_orders_ready_to_ship()) == [packed.id]
        assert placed.id not in _ids(operations.list_orders_awaiting_packing())


@pytest.mark.slow
class TestLongHistories:
    def test_queries_return_every_order(self, customer, farmer, retailer, distributor, list_produce):
        radishes = list_produce(name="Red Radishes", crop_type="Radishes", price=0.9, quantity=250)
        orders = [_buy(customer, radishes) for _ in range(120)]
        newest_first = [order.id for order in reversed(orders)]

        assert _ids(operations.list_orders_by_customer(customer.user_id)) == newest_first
        assert _ids(operations.list_orders_by_retailer(retailer.user_id)) == newest_first
        assert _ids(operations.list_orders_by_farmer(farmer.user_id)) == newest_first
        assert len(operations.list_pending_orders_for_retailer(retailer.user_id)) == 120

        for order in orders:
            operations.confirm_order(order.id)
        assert len(operations.list_orders_awaiting_packing()) == 120

        for order in orders:
            operations.pack_order(order.id, distributor.user_id)
        assert len(operations.list_orders_ready_to_ship()) == 120
        assert len(operations.list_orders_by_distributor(distributor.user_id)) == 120

    def test_catalog_queries_return_every_product(self, farmer, retailer, list_produce):
        for number in range(110):
            list_produce(name=f"Heirloom Tomato {number}", crop_type="Tomatoes", price=3.0, quantity=1)

        assert len(operations.list_products_by_producer(farmer.user_id)) == 110
        assert len(operations.list_products_by_retailer(retailer.user_id)) == 110
        assert len(operations.list_available_products()) == 110

    def test_assignment_counts_every_product(self, farmer, retailer, list_produce):
        for number in range(105):
            list_produce(name=f"Snap Pea {number}", crop_type="Peas", price=1.5, quantity=1)

        (candidate,) = retailer_candidates()
        assert candidate.assigned_products == 105
