"""Promo code and manual voucher administration — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ledger.voucher import DiscountType, PromoCode, Voucher

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="PromoCode")
class CreatePromoCode:
    code = String(required=True, max_length=30)
    discount_type = String(choices=DiscountType, required=True)
    value = Float(required=True, min_value=0.0)
    min_spend = Float(min_value=0.0)


@marketplace.command(part_of="PromoCode")
class DeactivatePromoCode:
    promo_code_id = Identifier(required=True)


@marketplace.command(part_of="Voucher")
class IssueManualVoucher:
    """Operator-issued store credit, e.g. a commercial gesture."""

    code = String(required=True, max_length=20)
    value = Float(required=True, min_value=0.0)


def _normalise(code):
    return code.strip().upper()


@marketplace.command_handler(part_of=PromoCode)
class PromoCodeHandler:
    @handle(CreatePromoCode)
    def create_promo_code(self, command):
        code = _normalise(command.code)
        repo = current_domain.repository_for(PromoCode)
        if repo.find_by_code(code) is not None:
            raise ValidationError({"code": [f"Promo code {code} already exists"]})

        promo = PromoCode.create(
            code=code,
            discount_type=command.discount_type,
            value=command.value,
            min_spend=command.min_spend,
        )
        repo.add(promo)
        logger.info("Promo code created", code=code, discount_type=promo.discount_type, value=promo.value)
        return str(promo.id)

    @handle(DeactivatePromoCode)
    def deactivate_promo_code(self, command):
        repo = current_domain.repository_for(PromoCode)
        promo = repo.get(command.promo_code_id)
        promo.deactivate()
        repo.add(promo)


@marketplace.command_handler(part_of=Voucher)
class ManualVoucherHandler:
    @handle(IssueManualVoucher)
    def issue_manual_voucher(self, command):
        code = _normalise(command.code)
        repo = current_domain.repository_for(Voucher)
        if repo.find_by_code(code) is not None:
            raise ValidationError({"code": [f"Voucher {code} already exists"]})

        voucher = Voucher.issue(code=code, value=command.value, is_manual=True)
        repo.add(voucher)
        return str(voucher.id)
