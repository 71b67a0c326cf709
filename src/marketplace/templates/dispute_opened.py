"""Dispute opened template — internal only."""

from marketplace.notification.notification import NotificationCategory
from marketplace.templates.audience import status_label


class DisputeOpenedTemplate:
    category = NotificationCategory.ALERT.value

    @staticmethod
    def render(context: dict, audience: str) -> dict:
        short_code = context["order_short_code"]
        description = context.get("description") or "No description given"
        return {
            "title": f"Dispute on order #{short_code}",
            "message": f"A {status_label(context.get('dispute_type'))} dispute was opened: {description}",
        }
