"""Repository for the Product aggregate."""

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace


@marketplace.repository(part_of=Product)
class ProductRepository:
    def find_by_id(self, product_id) -> Product | None:
        """Find a product without raising when it is unknown."""
        results = self._dao.query.filter(id=str(product_id)).all().items
        return results[0] if results else None
