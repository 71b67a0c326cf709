"""Voucher and PromoCode aggregates — the value-bearing codes accepted at checkout.

Vouchers are system-issued store credit (mostly refunds) and can be spent
once. Promo codes are operator-issued discounts, reusable until the operator
deactivates them.

Voucher State Machine:
    ACTIVE → USED
    ACTIVE → EXPIRED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


class VoucherStatus(Enum):
    ACTIVE = "Active"
    USED = "Used"
    EXPIRED = "Expired"


class DiscountType(Enum):
    PERCENTAGE = "Percentage"
    FIXED = "Fixed"


@marketplace.aggregate
class Voucher:
    """Single-use store credit identified by its code."""

    code = String(required=True, max_length=20, unique=True)
    value = Float(required=True, min_value=0.0)
    is_manual = Boolean(default=False)
    status = String(choices=VoucherStatus, default=VoucherStatus.ACTIVE.value)
    generated_at = DateTime()
    linked_order_id = Identifier()
    used_by_order_id = Identifier()
    used_at = DateTime()

    @classmethod
    def issue(cls, code, value, linked_order_id=None, is_manual=False):
        return cls(
            code=code,
            value=value,
            is_manual=is_manual,
            status=VoucherStatus.ACTIVE.value,
            generated_at=datetime.now(UTC),
            linked_order_id=linked_order_id,
        )

    @property
    def is_active(self):
        return self.status == VoucherStatus.ACTIVE.value

    def mark_used(self, order_id):
        """Spend the voucher on ``order_id``."""
        if not self.is_active:
            raise ValidationError({"code": [f"Voucher {self.code} is {self.status.lower()}"]})
        self.status = VoucherStatus.USED.value
        self.used_by_order_id = order_id
        self.used_at = datetime.now(UTC)

    def expire(self):
        if not self.is_active:
            raise ValidationError({"code": [f"Voucher {self.code} is {self.status.lower()}"]})
        self.status = VoucherStatus.EXPIRED.value


@marketplace.aggregate
class PromoCode:
    """Operator-issued discount, either a percentage of the subtotal or a fixed amount."""

    code = String(required=True, max_length=30, unique=True)
    discount_type = String(choices=DiscountType, required=True)
    value = Float(required=True, min_value=0.0)
    min_spend = Float(min_value=0.0)
    active = Boolean(default=True)
    usage_count = Integer(default=0)
    created_at = DateTime()

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.value is not None and self.value > 100:
            raise ValidationError({"value": ["Percentage discount cannot exceed 100"]})

    @classmethod
    def create(cls, code, discount_type, value, min_spend=None):
        return cls(
            code=code,
            discount_type=discount_type,
            value=value,
            min_spend=min_spend,
            active=True,
            usage_count=0,
            created_at=datetime.now(UTC),
        )

    def record_usage(self):
        self.usage_count = (self.usage_count or 0) + 1

    def deactivate(self):
        self.active = False
