"""Coupon validation — a pure lookup over stored vouchers and promo codes.

Vouchers are checked before promo codes. Nothing is mutated here; a voucher
only stops validating once checkout has spent it.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from marketplace.ledger.voucher import DiscountType, PromoCode, Voucher

logger = structlog.get_logger(__name__)

INVALID_CODE_MESSAGE = "Invalid or expired code"

KIND_VOUCHER = "voucher"
KIND_PROMO = "promo"


@dataclass(frozen=True)
class CouponValidation:
    is_valid: bool
    value: float
    message: str
    code: str | None = None
    kind: str | None = None
    discount_type: str | None = None
    min_spend: float | None = None


def validate_code(code: str | None) -> CouponValidation:
    """Look ``code`` up as an active voucher, then as an active promo code."""
    code = (code or "").strip().upper()
    if not code:
        return CouponValidation(is_valid=False, value=0.0, message=INVALID_CODE_MESSAGE)

    voucher = current_domain.repository_for(Voucher).find_active_by_code(code)
    if voucher is not None:
        return CouponValidation(
            is_valid=True,
            value=voucher.value,
            message="Voucher applied",
            code=voucher.code,
            kind=KIND_VOUCHER,
            discount_type=DiscountType.FIXED.value,
        )

    promo = current_domain.repository_for(PromoCode).find_active_by_code(code)
    if promo is not None:
        if promo.discount_type == DiscountType.PERCENTAGE.value:
            message = f"Promo -{promo.value:g}%"
        else:
            message = "Promo (fixed amount)"
        return CouponValidation(
            is_valid=True,
            value=promo.value,
            message=message,
            code=promo.code,
            kind=KIND_PROMO,
            discount_type=promo.discount_type,
            min_spend=promo.min_spend,
        )

    logger.info("Coupon code rejected", code=code)
    return CouponValidation(is_valid=False, value=0.0, message=INVALID_CODE_MESSAGE)
