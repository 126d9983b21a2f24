"""Repository for the Product aggregate."""

from marketplace.domain import marketplace
from marketplace.product.product import Product, ProductStatus


@marketplace.repository(part_of=Product)
class ProductRepository:
    """Catalog queries. Every list is complete and comes back newest first."""

    def _newest_first(self, **filters) -> list[Product]:
        return self._dao.query.filter(**filters).order_by("-created_at").limit(None).all().items

    def available(self) -> list[Product]:
        """Products a customer can put in a cart right now."""
        return [p for p in self._newest_first(status=ProductStatus.AVAILABLE.value) if p.is_purchasable]

    def listed_by(self, producer_id) -> list[Product]:
        return self._newest_first(producer_id=str(producer_id))

    def assigned_to(self, retailer_id) -> list[Product]:
        return self._newest_first(retailer_id=str(retailer_id))
