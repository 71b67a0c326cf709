"""Event handler — low stock alerts for the operator and the product's supplier."""

from protean.utils.mixins import handle

from marketplace.catalogue.events import LowStockDetected
from marketplace.domain import marketplace
from marketplace.notification.fanout import fan_out
from marketplace.notification.notification import Notification
from marketplace.notification.recipients import operator_ids
from marketplace.templates.audience import STAFF


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::product")
class CatalogueEventsHandler:
    @handle(LowStockDetected)
    def on_low_stock_detected(self, event: LowStockDetected) -> None:
        suppliers = [str(event.supplier_id)] if event.supplier_id else []
        fan_out(
            "LowStockDetected",
            context={
                "name": event.name,
                "stock": event.stock,
                "threshold": event.threshold,
            },
            audiences=[(STAFF, operator_ids() + suppliers)],
            link=f"/products/{event.product_id}",
        )
