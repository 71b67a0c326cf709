"""Repository for the Dispute aggregate."""

from marketplace.dispute.dispute import Dispute, DisputeStatus
from marketplace.domain import marketplace


@marketplace.repository(part_of=Dispute)
class DisputeRepository:
    def find_by_order(self, order_short_code: str) -> list[Dispute]:
        disputes = self._dao.query.filter(order_short_code=order_short_code).all().items
        return sorted(disputes, key=lambda dispute: dispute.created_at)

    def find_open(self) -> list[Dispute]:
        disputes = self._dao.query.filter(status=DisputeStatus.OPEN.value).all().items
        return sorted(disputes, key=lambda dispute: dispute.created_at, reverse=True)
