"""FinancialTransaction aggregate — the settlement record of one delivered order.

Created exactly once per order when it first reaches DELIVERED and never
recomputed. The only later change is archival, which is how a business-level
reversal (for example an accepted return) is recorded.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String, ValueObject

from marketplace.domain import marketplace
from marketplace.finance.events import FinancialRecordStatusToggled, OrderSettled


class RecordStatus(Enum):
    ACTIVE = "Active"
    ARCHIVED = "Archived"


@marketplace.value_object(part_of="FinancialTransaction")
class Distribution:
    """Gross profit split between the four parties, each share rounded on its own."""

    supplier = Float(default=0.0)
    vat = Float(default=0.0)
    partner = Float(default=0.0)
    operator = Float(default=0.0)

    @property
    def total(self):
        return self.supplier + self.vat + self.partner + self.operator


@marketplace.aggregate
class FinancialTransaction:
    order_id = Identifier(required=True, unique=True)
    order_short_code = String(required=True, max_length=6)
    settled_at = DateTime(required=True)
    total_sales = Float(required=True, min_value=0.0)
    total_capital = Float(required=True, min_value=0.0)
    gross_profit = Float(required=True, min_value=0.0)
    distribution = ValueObject(Distribution, required=True)
    status = String(choices=RecordStatus, default=RecordStatus.ACTIVE.value)

    @classmethod
    def record(cls, order_id, order_short_code, total_sales, total_capital, gross_profit, distribution):
        now = datetime.now(UTC)
        transaction = cls(
            order_id=order_id,
            order_short_code=order_short_code,
            settled_at=now,
            total_sales=total_sales,
            total_capital=total_capital,
            gross_profit=gross_profit,
            distribution=Distribution(**distribution),
            status=RecordStatus.ACTIVE.value,
        )
        transaction.raise_(
            OrderSettled(
                transaction_id=str(transaction.id),
                order_id=str(order_id),
                order_short_code=order_short_code,
                total_sales=total_sales,
                total_capital=total_capital,
                gross_profit=gross_profit,
                settled_at=now,
            )
        )
        return transaction

    @property
    def is_active(self):
        return self.status == RecordStatus.ACTIVE.value

    def toggle_status(self):
        """Flip between ACTIVE and ARCHIVED."""
        if self.is_active:
            self.status = RecordStatus.ARCHIVED.value
        else:
            self.status = RecordStatus.ACTIVE.value

        self.raise_(
            FinancialRecordStatusToggled(
                transaction_id=str(self.id),
                order_id=str(self.order_id),
                status=self.status,
                toggled_at=datetime.now(UTC),
            )
        )

