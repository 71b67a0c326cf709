"""Tests for the Voucher and PromoCode aggregates and coupon discounts."""

import pytest
from marketplace.ledger.checkout import compute_discount
from marketplace.ledger.validation import KIND_PROMO, KIND_VOUCHER, CouponValidation
from marketplace.ledger.voucher import DiscountType, PromoCode, Voucher, VoucherStatus
from protean.exceptions import ValidationError


class TestVoucher:
    def test_issued_voucher_is_active(self):
        voucher = Voucher.issue(code="REF-ABC123", value=11000.0, linked_order_id="ord-001")
        assert voucher.is_active
        assert voucher.status == VoucherStatus.ACTIVE.value
        assert voucher.is_manual is False
        assert voucher.generated_at is not None

    def test_mark_used_links_consuming_order(self):
        voucher = Voucher.issue(code="REF-ABC123", value=11000.0)
        voucher.mark_used("ord-002")
        assert voucher.status == VoucherStatus.USED.value
        assert voucher.used_by_order_id == "ord-002"
        assert voucher.used_at is not None

    def test_used_voucher_cannot_be_spent_again(self):
        voucher = Voucher.issue(code="REF-ABC123", value=11000.0)
        voucher.mark_used("ord-002")
        with pytest.raises(ValidationError):
            voucher.mark_used("ord-003")
        assert voucher.used_by_order_id == "ord-002"

    def test_expired_voucher_cannot_be_spent(self):
        voucher = Voucher.issue(code="GIFT-1", value=500.0, is_manual=True)
        voucher.expire()
        assert voucher.status == VoucherStatus.EXPIRED.value
        with pytest.raises(ValidationError):
            voucher.mark_used("ord-002")


class TestPromoCode:
    def test_percentage_above_hundred_is_invalid(self):
        with pytest.raises(ValidationError):
            PromoCode.create(code="TOOMUCH", discount_type=DiscountType.PERCENTAGE.value, value=150)

    def test_usage_and_deactivation(self):
        promo = PromoCode.create(code="TABASKI10", discount_type=DiscountType.PERCENTAGE.value, value=10)
        promo.record_usage()
        promo.record_usage()
        promo.deactivate()
        assert promo.usage_count == 2
        assert promo.active is False


class TestComputeDiscount:
    def test_percentage_of_subtotal(self):
        coupon = CouponValidation(True, 10, "Promo -10%", kind=KIND_PROMO, discount_type=DiscountType.PERCENTAGE.value)
        assert compute_discount(coupon, 20000.0) == 2000.0

    def test_fixed_promo_ignores_subtotal(self):
        coupon = CouponValidation(
            True, 500, "Promo (fixed amount)", kind=KIND_PROMO, discount_type=DiscountType.FIXED.value
        )
        assert compute_discount(coupon, 20000.0) == 500
        assert compute_discount(coupon, 100.0) == 500

    def test_voucher_value(self):
        coupon = CouponValidation(True, 11000.0, "Voucher applied", kind=KIND_VOUCHER)
        assert compute_discount(coupon, 4000.0) == 11000.0
