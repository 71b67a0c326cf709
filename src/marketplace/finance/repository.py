"""Repository for the FinancialTransaction aggregate."""

from marketplace.domain import marketplace
from marketplace.finance.transaction import FinancialTransaction, RecordStatus


@marketplace.repository(part_of=FinancialTransaction)
class FinancialTransactionRepository:
    def find_by_order(self, order_id) -> FinancialTransaction | None:
        """The settlement record of ``order_id``, or None if it was never settled."""
        results = self._dao.query.filter(order_id=str(order_id)).all().items
        return results[0] if results else None

    def list_all(self) -> list[FinancialTransaction]:
        """Every record, newest settlement first."""
        records = self._dao.query.all().items
        return sorted(records, key=lambda record: record.settled_at, reverse=True)

    def list_active(self) -> list[FinancialTransaction]:
        return self._dao.query.filter(status=RecordStatus.ACTIVE.value).all().items
