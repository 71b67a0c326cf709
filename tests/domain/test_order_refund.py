"""Tests for receipt confirmation and the refund voucher on the Order aggregate."""

import pytest
from marketplace.order.events import ReceiptConfirmed, RefundIssued, RefundVoucherRedeemed
from marketplace.order.order import Order, OrderStatus
from marketplace.shared.exceptions import IllegalTransitionError
from protean.exceptions import ValidationError


def _order(*statuses):
    order = Order.place(
        short_code="RET001",
        customer={"full_name": "Awa Kone", "phone": "0700000001", "city": "Abidjan"},
        items_data=[{"product_id": "prod-001", "name": "Wax fabric", "quantity": 1, "unit_price": 10000.0}],
        pricing={"subtotal": 10000.0, "delivery_fee": 1000.0, "total": 11000.0},
    )
    for status in statuses:
        order.transition(status)
    order._events.clear()
    return order


_TO_RETURN_PROCESSING = (
    OrderStatus.PROCESSING,
    OrderStatus.IN_TRANSIT,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
    OrderStatus.RETURN_REQUESTED,
    OrderStatus.RETURN_ACCEPTED,
    OrderStatus.RETURN_PROCESSING,
)


class TestConfirmReceipt:
    def test_delivered_order_records_review(self):
        order = _order(*_TO_RETURN_PROCESSING[:4])
        order.confirm_receipt("Great fabric", service_opinion="Fast", store_rating=5, delivery_rating=4)

        assert order.customer_confirmed_receipt is True
        assert order.review.product_opinion == "Great fabric"
        assert order.review.store_rating == 5
        assert order.review.submitted_at is not None
        assert isinstance(order._events[-1], ReceiptConfirmed)

    def test_undelivered_order_cannot_be_confirmed(self):
        order = _order(OrderStatus.PROCESSING)
        with pytest.raises(ValidationError):
            order.confirm_receipt("Nothing arrived")
        assert order.customer_confirmed_receipt is False


class TestIssueRefund:
    def test_refund_carries_order_total(self):
        order = _order(*_TO_RETURN_PROCESSING)
        order.issue_refund("REF-ABC123")

        assert order.refund_coupon_code == "REF-ABC123"
        assert order.refund_coupon_value == 11000.0
        assert order.status == OrderStatus.REFUNDED.value
        assert order.latest_status_entry.note == "Refund voucher REF-ABC123 issued"

    def test_refund_raises_status_change_then_refund_issued(self):
        order = _order(*_TO_RETURN_PROCESSING)
        order.issue_refund("REF-ABC123")

        event_types = [type(event).__name__ for event in order._events]
        assert event_types == ["OrderStatusChanged", "RefundIssued"]
        refund = order._events[-1]
        assert isinstance(refund, RefundIssued)
        assert refund.refund_value == 11000.0

    def test_refund_only_from_return_processing(self):
        order = _order(*_TO_RETURN_PROCESSING[:6])
        with pytest.raises(IllegalTransitionError):
            order.issue_refund("REF-ABC123")
        assert order.refund_coupon_code is None
        assert order.refund_coupon_value is None

    def test_second_refund_is_refused(self):
        order = _order(*_TO_RETURN_PROCESSING)
        order.issue_refund("REF-ABC123")
        with pytest.raises(ValidationError):
            order.issue_refund("REF-XYZ789")
        assert order.refund_coupon_code == "REF-ABC123"


class TestRedeemRefundVoucher:
    def test_redeem_keeps_historical_total(self):
        order = _order(*_TO_RETURN_PROCESSING)
        order.issue_refund("REF-ABC123")
        order._events.clear()

        order.redeem_refund_voucher()

        assert order.coupon_redeemed is True
        assert order.total == 11000.0
        assert isinstance(order._events[0], RefundVoucherRedeemed)

    def test_redeem_twice_is_harmless(self):
        order = _order(*_TO_RETURN_PROCESSING)
        order.issue_refund("REF-ABC123")
        order.redeem_refund_voucher()
        order._events.clear()

        order.redeem_refund_voucher()

        assert order.coupon_redeemed is True
        assert order._events == []

    def test_order_without_refund_cannot_be_redeemed(self):
        order = _order(*_TO_RETURN_PROCESSING[:4])
        with pytest.raises(ValidationError):
            order.redeem_refund_voucher()


class TestSettlementFlag:
    def test_flag_flips_once(self):
        order = _order()
        order.mark_financial_processed()
        assert order.financial_processed is True
        with pytest.raises(ValidationError):
            order.mark_financial_processed()
