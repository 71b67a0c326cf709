"""Order status update template."""

from marketplace.notification.notification import NotificationCategory
from marketplace.templates.audience import CUSTOMER, status_label


class StatusUpdateTemplate:
    category = NotificationCategory.STATUS.value

    @staticmethod
    def render(context: dict, audience: str) -> dict:
        short_code = context["short_code"]
        new_status = status_label(context["new_status"])
        note = context.get("note")
        if audience == CUSTOMER:
            message = f"Your order #{short_code} is now {new_status}."
        else:
            message = (
                f"Order #{short_code} moved from {status_label(context.get('previous_status'))} to {new_status}."
            )
        if note:
            message = f"{message} {note}"
        return {"title": f"Order #{short_code}: {new_status}", "message": message}
