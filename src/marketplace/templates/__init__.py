"""Template registry — maps the triggering event to its template class.

Each template renders a title and message for an audience and carries the
inbox category its notifications are filed under.
"""

from marketplace.templates.dispute_opened import DisputeOpenedTemplate
from marketplace.templates.dispute_resolved import DisputeResolvedTemplate
from marketplace.templates.low_stock_alert import LowStockAlertTemplate
from marketplace.templates.order_created import OrderCreatedTemplate
from marketplace.templates.refund_issued import RefundIssuedTemplate
from marketplace.templates.status_update import StatusUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    "OrderCreated": OrderCreatedTemplate,
    "OrderStatusChanged": StatusUpdateTemplate,
    "DisputeOpened": DisputeOpenedTemplate,
    "DisputeResolved": DisputeResolvedTemplate,
    "RefundIssued": RefundIssuedTemplate,
    "LowStockDetected": LowStockAlertTemplate,
}


def get_template(event_name: str):
    """Look up a template class by the name of the event it announces."""
    template_cls = TEMPLATE_REGISTRY.get(event_name)
    if template_cls is None:
        raise ValueError(f"No template registered for event: {event_name}")
    return template_cls
