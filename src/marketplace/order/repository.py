"""Repository for the Order aggregate with the role-scoped order queries."""

from marketplace.domain import marketplace
from marketplace.order.order import Order, OrderStatus

_PENDING_FOR_RETAILER = frozenset({OrderStatus.PLACED.value, OrderStatus.CONFIRMED.value})
_WITH_DISTRIBUTOR = frozenset({OrderStatus.PACKED.value, OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value})


@marketplace.repository(part_of=Order)
class OrderRepository:
    """Order queries. Every list is complete and comes back newest first."""

    def _newest_first(self, **filters) -> list[Order]:
        query = self._dao.query.filter(**filters) if filters else self._dao.query
        return query.order_by("-created_at").limit(None).all().items

    def placed_by(self, customer_id) -> list[Order]:
        return self._newest_first(customer_id=str(customer_id))

    def for_retailer(self, retailer_id) -> list[Order]:
        """Orders holding at least one item sold through `retailer_id`."""
        retailer_id = str(retailer_id)
        return [
            order
            for order in self._newest_first()
            if any(str(item.retailer_id) == retailer_id for item in order.items)
        ]

    def pending_for_retailer(self, retailer_id) -> list[Order]:
        return [order for order in self.for_retailer(retailer_id) if order.status in _PENDING_FOR_RETAILER]

    def for_farmer(self, producer_id) -> list[Order]:
        """Orders holding at least one item grown by `producer_id`."""
        producer_id = str(producer_id)
        return [
            order
            for order in self._newest_first()
            if any(str(item.producer_id) == producer_id for item in order.items)
        ]

    def for_distributor(self, distributor_id) -> list[Order]:
        orders = self._newest_first(distributor_id=str(distributor_id))
        return [order for order in orders if order.status in _WITH_DISTRIBUTOR]

    def awaiting_packing(self) -> list[Order]:
        """Confirmed orders that no distributor has picked up yet."""
        return [order for order in self._newest_first(status=OrderStatus.CONFIRMED.value) if not order.distributor_id]

    def ready_to_ship(self) -> list[Order]:
        return self._newest_first(status=OrderStatus.PACKED.value)
