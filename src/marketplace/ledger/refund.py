"""Refund vouchers — commands and handler.

A completed return is refunded as store credit, never cash: the order gets a
``REF-XXXXXX`` code worth its total and a matching single-use Voucher is
created. Issuance happens at most once per order; a second request is
skipped because the order already carries its refund code.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ledger.voucher import Voucher
from marketplace.order.order import Order
from marketplace.shared.codes import generate_refund_code

logger = structlog.get_logger(__name__)


def _unique_refund_code(voucher_repo) -> str:
    while True:
        code = generate_refund_code()
        if voucher_repo.find_by_code(code) is None:
            return code


def issue_refund(order) -> Voucher | None:
    """Issue the refund voucher for ``order``. The caller persists the order."""
    if order.refund_coupon_code:
        logger.info("Refund already issued", order_id=str(order.id), refund_code=order.refund_coupon_code)
        return None

    voucher_repo = current_domain.repository_for(Voucher)
    code = _unique_refund_code(voucher_repo)
    order.issue_refund(code)

    voucher = Voucher.issue(code=code, value=order.refund_coupon_value, linked_order_id=str(order.id))
    voucher_repo.add(voucher)

    logger.info("Refund voucher issued", order_id=str(order.id), refund_code=code, value=voucher.value)
    return voucher


@marketplace.command(part_of="Order")
class IssueRefund:
    order_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class RedeemRefundVoucher:
    """The customer collected their refund voucher in person."""

    order_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class RefundHandler:
    @handle(IssueRefund)
    def issue(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        issue_refund(order)
        repo.add(order)
        return order.refund_coupon_code

    @handle(RedeemRefundVoucher)
    def redeem(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.redeem_refund_voucher()
        repo.add(order)
