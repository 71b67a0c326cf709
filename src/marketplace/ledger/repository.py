"""Repositories for the Voucher and PromoCode aggregates."""

from marketplace.domain import marketplace
from marketplace.ledger.voucher import PromoCode, Voucher, VoucherStatus


@marketplace.repository(part_of=Voucher)
class VoucherRepository:
    def find_by_code(self, code: str) -> Voucher | None:
        results = self._dao.query.filter(code=code).all().items
        return results[0] if results else None

    def find_active_by_code(self, code: str) -> Voucher | None:
        results = self._dao.query.filter(code=code, status=VoucherStatus.ACTIVE.value).all().items
        return results[0] if results else None


@marketplace.repository(part_of=PromoCode)
class PromoCodeRepository:
    def find_by_code(self, code: str) -> PromoCode | None:
        results = self._dao.query.filter(code=code).all().items
        return results[0] if results else None

    def find_active_by_code(self, code: str) -> PromoCode | None:
        results = self._dao.query.filter(code=code, active=True).all().items
        return results[0] if results else None
