"""Domain events for the FinancialTransaction aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="FinancialTransaction")
class OrderSettled:
    """Gross profit of a delivered order was computed and distributed."""

    __version__ = 1

    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_short_code = String(required=True)
    total_sales = Float(required=True)
    total_capital = Float(required=True)
    gross_profit = Float(required=True)
    settled_at = DateTime(required=True)


@marketplace.event(part_of="FinancialTransaction")
class FinancialRecordStatusToggled:
    """A settlement record was archived or brought back to active."""

    __version__ = 1

    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True)
    toggled_at = DateTime(required=True)
