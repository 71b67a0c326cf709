"""Financial settlement — splits an order's gross profit once it is delivered.

    total_sales   = sum(unit_price * quantity)
    total_capital = sum(product.capital * quantity)
    gross_profit  = max(0, total_sales - total_capital)

The gross profit is distributed by fixed ratios and each share is rounded
half-up to a whole franc on its own, so the shares may not add back up to
the gross profit exactly.

Settlement happens at most once per order. The ``financial_processed`` flag
on the order is the guard; a transaction that already exists for the order
(a retry after the order write was lost) also stops a second computation
and just repairs the flag.
"""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.finance.transaction import FinancialTransaction

logger = structlog.get_logger(__name__)

DISTRIBUTION_RATIOS = {
    "supplier": Decimal("0.30"),
    "vat": Decimal("0.18"),
    "partner": Decimal("0.17"),
    "operator": Decimal("0.35"),
}


def round_franc(amount) -> float:
    return float(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_distribution(gross_profit) -> dict:
    profit = Decimal(str(gross_profit))
    return {share: round_franc(profit * ratio) for share, ratio in DISTRIBUTION_RATIOS.items()}


def compute_totals(order) -> tuple[float, float]:
    """Sales and capital of the order's line items.

    A product missing from the catalogue, or without a recorded capital,
    contributes nothing to the capital total.
    """
    product_repo = current_domain.repository_for(Product)
    total_sales = 0.0
    total_capital = 0.0
    for item in order.items:
        total_sales += item.unit_price * item.quantity
        product = product_repo.find_by_id(item.product_id)
        if product is not None and product.capital:
            total_capital += product.capital * item.quantity
    return total_sales, total_capital


def settle(order) -> FinancialTransaction | None:
    """Settle ``order`` if it has not been settled yet.

    Persists the FinancialTransaction and flips the order's flag. The caller
    persists the order itself. Returns the new transaction, or None when
    nothing was done.
    """
    if order.financial_processed:
        logger.debug("Order already settled", order_id=str(order.id))
        return None

    repo = current_domain.repository_for(FinancialTransaction)
    if repo.find_by_order(order.id) is not None:
        logger.warning("Settlement record found for unflagged order", order_id=str(order.id))
        order.mark_financial_processed()
        return None

    total_sales, total_capital = compute_totals(order)
    gross_profit = max(0.0, total_sales - total_capital)

    transaction = FinancialTransaction.record(
        order_id=str(order.id),
        order_short_code=order.short_code,
        total_sales=total_sales,
        total_capital=total_capital,
        gross_profit=gross_profit,
        distribution=compute_distribution(gross_profit),
    )
    repo.add(transaction)
    order.mark_financial_processed()

    logger.info(
        "Order settled",
        order_id=str(order.id),
        short_code=order.short_code,
        total_sales=total_sales,
        total_capital=total_capital,
        gross_profit=gross_profit,
    )
    return transaction
