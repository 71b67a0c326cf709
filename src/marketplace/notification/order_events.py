"""Event handler — fans order events out to everyone involved in the order.

Recipients are resolved from the persisted order rather than the event
payload, so a partner assigned after checkout still hears about later
status changes.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.notification.fanout import fan_out
from marketplace.notification.notification import Notification
from marketplace.notification.recipients import customer_ids, operator_ids, partner_ids, supplier_ids
from marketplace.order.events import OrderCreated, OrderStatusChanged, RefundIssued
from marketplace.order.order import Order
from marketplace.templates.audience import CUSTOMER, STAFF

logger = structlog.get_logger(__name__)


def _load_order(order_id):
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        logger.warning("Notification skipped for unknown order", order_id=str(order_id))
        return None


def _tracking_link(short_code):
    return f"/track/{short_code}"


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::order")
class OrderEventsHandler:
    """Notifies operator, partner, suppliers and customer about their orders."""

    def _everyone(self, order):
        staff = operator_ids() + partner_ids(order.assigned_partner_id) + supplier_ids(order)
        return [(STAFF, staff), (CUSTOMER, customer_ids(order))]

    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        order = _load_order(event.order_id)
        if order is None:
            return
        fan_out(
            "OrderCreated",
            context={
                "short_code": order.short_code,
                "customer_name": order.customer.full_name,
                "total": order.total,
            },
            audiences=self._everyone(order),
            link=_tracking_link(order.short_code),
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        order = _load_order(event.order_id)
        if order is None:
            return
        fan_out(
            "OrderStatusChanged",
            context={
                "short_code": order.short_code,
                "previous_status": event.previous_status,
                "new_status": event.new_status,
                "note": event.note,
            },
            audiences=self._everyone(order),
            link=_tracking_link(order.short_code),
        )

    @handle(RefundIssued)
    def on_refund_issued(self, event: RefundIssued) -> None:
        order = _load_order(event.order_id)
        if order is None:
            return
        fan_out(
            "RefundIssued",
            context={
                "short_code": order.short_code,
                "refund_code": event.refund_code,
                "refund_value": event.refund_value,
            },
            audiences=[(CUSTOMER, customer_ids(order))],
            link=_tracking_link(order.short_code),
        )
