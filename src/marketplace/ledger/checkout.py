"""Checkout pricing — applies a coupon to a cart and decides the paid flag.

The client computes the cart subtotal; this module owns the rules that turn
it into an order total:

    total = max(0, subtotal + delivery_fee - discount)

An order whose total comes out at exactly zero is marked paid whatever the
chosen payment method. Otherwise it is paid only when a mobile-money
payment was validated before submitting.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.ledger.validation import KIND_PROMO, KIND_VOUCHER, CouponValidation, validate_code
from marketplace.ledger.voucher import DiscountType, PromoCode, Voucher
from marketplace.order.order import PaymentMethod

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutPricing:
    subtotal: float
    delivery_fee: float
    discount: float
    total: float
    is_paid: bool
    coupon: CouponValidation | None = None


def compute_discount(coupon: CouponValidation, subtotal: float) -> float:
    """Discount granted by a validated coupon on ``subtotal``."""
    if coupon.discount_type == DiscountType.PERCENTAGE.value:
        return subtotal * coupon.value / 100
    return coupon.value


def price_checkout(
    subtotal: float,
    delivery_fee: float = 0.0,
    code: str | None = None,
    payment_method: str | None = None,
    payment_validated: bool = False,
) -> CheckoutPricing:
    """Price a checkout, rejecting unknown codes and unmet minimum spends."""
    coupon = None
    discount = 0.0

    if code:
        coupon = validate_code(code)
        if not coupon.is_valid:
            raise ValidationError({"coupon_code": [coupon.message]})
        if coupon.min_spend and subtotal < coupon.min_spend:
            raise ValidationError({"coupon_code": [f"Minimum spend of {coupon.min_spend:g} F not reached"]})
        discount = compute_discount(coupon, subtotal)

    total = max(0.0, subtotal + delivery_fee - discount)

    # Zero-total orders are settled by the coupon itself
    if total == 0:
        is_paid = True
    else:
        is_paid = payment_method == PaymentMethod.MOBILE_MONEY.value and bool(payment_validated)

    return CheckoutPricing(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        discount=discount,
        total=total,
        is_paid=is_paid,
        coupon=coupon,
    )


def consume_coupon(coupon: CouponValidation | None, order_id: str) -> None:
    """Spend a voucher or count a promo-code use for the order just placed."""
    if coupon is None or not coupon.is_valid:
        return

    if coupon.kind == KIND_VOUCHER:
        repo = current_domain.repository_for(Voucher)
        voucher = repo.find_active_by_code(coupon.code)
        if voucher is None:
            raise ValidationError({"coupon_code": [f"Voucher {coupon.code} is no longer available"]})
        voucher.mark_used(order_id)
        repo.add(voucher)
        logger.info("Voucher spent", code=coupon.code, order_id=order_id)
    elif coupon.kind == KIND_PROMO:
        repo = current_domain.repository_for(PromoCode)
        promo = repo.find_by_code(coupon.code)
        promo.record_usage()
        repo.add(promo)
        logger.info("Promo code used", code=coupon.code, order_id=order_id, usage_count=promo.usage_count)
