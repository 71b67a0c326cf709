"""Read-side helpers over settlement records."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from marketplace.finance.transaction import FinancialTransaction


@dataclass
class FinancialSummary:
    record_count: int = 0
    total_sales: float = 0.0
    total_capital: float = 0.0
    gross_profit: float = 0.0
    supplier: float = 0.0
    vat: float = 0.0
    partner: float = 0.0
    operator: float = 0.0


def financial_summary() -> FinancialSummary:
    """Totals over ACTIVE records only; archived records are reversed business."""
    summary = FinancialSummary()
    for record in current_domain.repository_for(FinancialTransaction).list_active():
        summary.record_count += 1
        summary.total_sales += record.total_sales
        summary.total_capital += record.total_capital
        summary.gross_profit += record.gross_profit
        summary.supplier += record.distribution.supplier
        summary.vat += record.distribution.vat
        summary.partner += record.distribution.partner
        summary.operator += record.distribution.operator
    return summary
