"""Application tests for coupon validation, checkout pricing and code administration."""

import pytest
from marketplace.ledger.checkout import price_checkout
from marketplace.ledger.management import CreatePromoCode, DeactivatePromoCode, IssueManualVoucher
from marketplace.ledger.validation import INVALID_CODE_MESSAGE, KIND_PROMO, KIND_VOUCHER, validate_code
from marketplace.ledger.voucher import PromoCode
from protean import current_domain
from protean.exceptions import ValidationError


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestValidateCode:
    def test_unknown_code(self):
        result = validate_code("NOPE")
        assert result.is_valid is False
        assert result.value == 0.0
        assert result.message == INVALID_CODE_MESSAGE

    def test_blank_code(self):
        assert validate_code("  ").is_valid is False
        assert validate_code(None).is_valid is False

    def test_voucher(self):
        _process(IssueManualVoucher(code="GIFT500", value=500.0))
        result = validate_code(" gift500 ")

        assert result.is_valid is True
        assert result.kind == KIND_VOUCHER
        assert result.value == 500.0
        assert result.message == "Voucher applied"

    def test_percentage_promo_message(self):
        _process(CreatePromoCode(code="TABASKI10", discount_type="Percentage", value=10))
        result = validate_code("TABASKI10")

        assert result.is_valid is True
        assert result.kind == KIND_PROMO
        assert result.message == "Promo -10%"

    def test_fixed_promo_message(self):
        _process(CreatePromoCode(code="MOINS500", discount_type="Fixed", value=500))
        assert validate_code("MOINS500").message == "Promo (fixed amount)"

    def test_voucher_wins_over_promo_with_same_code(self):
        _process(CreatePromoCode(code="SAME", discount_type="Fixed", value=100))
        _process(IssueManualVoucher(code="SAME", value=900.0))
        result = validate_code("SAME")
        assert result.kind == KIND_VOUCHER
        assert result.value == 900.0

    def test_validation_does_not_spend_the_voucher(self):
        _process(IssueManualVoucher(code="GIFT500", value=500.0))
        validate_code("GIFT500")
        assert validate_code("GIFT500").is_valid is True

    def test_deactivated_promo(self):
        promo_id = _process(CreatePromoCode(code="OLD", discount_type="Fixed", value=100))
        _process(DeactivatePromoCode(promo_code_id=promo_id))
        assert validate_code("OLD").is_valid is False


class TestPriceCheckout:
    def test_no_code(self):
        pricing = price_checkout(10000.0, delivery_fee=1000.0)
        assert pricing.total == 11000.0
        assert pricing.discount == 0.0
        assert pricing.is_paid is False

    def test_total_is_clamped_at_zero(self):
        _process(IssueManualVoucher(code="BIGGIFT", value=50000.0))
        pricing = price_checkout(10000.0, delivery_fee=1000.0, code="BIGGIFT")
        assert pricing.total == 0.0
        assert pricing.is_paid is True

    def test_invalid_code_is_refused(self):
        with pytest.raises(ValidationError) as exc:
            price_checkout(10000.0, code="NOPE")
        assert exc.value.messages == {"coupon_code": [INVALID_CODE_MESSAGE]}

    def test_min_spend_reached_exactly(self):
        _process(CreatePromoCode(code="BIG", discount_type="Fixed", value=1000, min_spend=10000))
        assert price_checkout(10000.0, code="BIG").discount == 1000

    def test_cash_on_delivery_is_never_prepaid(self):
        pricing = price_checkout(10000.0, payment_method="Cash_On_Delivery", payment_validated=True)
        assert pricing.is_paid is False


class TestAdministration:
    def test_codes_are_stored_uppercase(self):
        _process(CreatePromoCode(code=" soldes ", discount_type="Percentage", value=20))
        assert current_domain.repository_for(PromoCode).find_by_code("SOLDES") is not None

    def test_duplicate_promo_code(self):
        _process(CreatePromoCode(code="SOLDES", discount_type="Percentage", value=20))
        with pytest.raises(ValidationError):
            _process(CreatePromoCode(code="soldes", discount_type="Fixed", value=500))

    def test_duplicate_voucher_code(self):
        _process(IssueManualVoucher(code="GIFT500", value=500.0))
        with pytest.raises(ValidationError):
            _process(IssueManualVoucher(code="GIFT500", value=100.0))
