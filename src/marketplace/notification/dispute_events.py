"""Event handler — notifies the parties of a dispute."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.dispute.dispute import Dispute
from marketplace.dispute.events import DisputeOpened, DisputeResolved
from marketplace.domain import marketplace
from marketplace.notification.fanout import fan_out
from marketplace.notification.notification import Notification
from marketplace.notification.recipients import customer_ids, operator_ids, partner_ids, supplier_ids
from marketplace.order.order import Order
from marketplace.templates.audience import CUSTOMER, STAFF

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::dispute")
class DisputeEventsHandler:
    @handle(DisputeOpened)
    def on_dispute_opened(self, event: DisputeOpened) -> None:
        """Operator, handling partner and the suppliers of the affected products."""
        dispute = current_domain.repository_for(Dispute).get(event.dispute_id)
        order = current_domain.repository_for(Order).find_by_short_code(event.order_short_code)

        staff = operator_ids() + partner_ids(event.partner_id)
        if order is not None:
            staff += supplier_ids(order, dispute.affected_products)
        else:
            logger.warning("Dispute on unknown order", order_short_code=event.order_short_code)

        fan_out(
            "DisputeOpened",
            context={
                "order_short_code": event.order_short_code,
                "dispute_type": event.dispute_type,
                "description": event.description,
            },
            audiences=[(STAFF, staff)],
            link=f"/disputes/{event.dispute_id}",
        )

    @handle(DisputeResolved)
    def on_dispute_resolved(self, event: DisputeResolved) -> None:
        """Operator and customer."""
        order = current_domain.repository_for(Order).find_by_short_code(event.order_short_code)
        audiences = [(STAFF, operator_ids())]
        if order is not None:
            audiences.append((CUSTOMER, customer_ids(order)))

        fan_out(
            "DisputeResolved",
            context={
                "order_short_code": event.order_short_code,
                "decision": event.decision,
                "resolution_note": event.resolution_note,
            },
            audiences=audiences,
            link=f"/disputes/{event.dispute_id}",
        )
