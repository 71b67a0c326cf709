"""Repository for the Order aggregate."""

from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.repository(part_of=Order)
class OrderRepository:
    """Adds short-code lookups on top of the standard CRUD operations."""

    def find_by_short_code(self, short_code: str) -> Order | None:
        """Find an order by its tracking code, or None."""
        results = self._dao.query.filter(short_code=short_code).all().items
        return results[0] if results else None

    def find_by_reference(self, reference: str) -> Order | None:
        """Find an order by short code first, then by id."""
        order = self.find_by_short_code(reference)
        if order is not None:
            return order
        results = self._dao.query.filter(id=reference).all().items
        return results[0] if results else None

    def short_code_taken(self, short_code: str) -> bool:
        return self.find_by_short_code(short_code) is not None
