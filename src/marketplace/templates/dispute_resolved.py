"""Dispute resolved template."""

from marketplace.notification.notification import NotificationCategory
from marketplace.templates.audience import CUSTOMER


class DisputeResolvedTemplate:
    category = NotificationCategory.INFO.value

    @staticmethod
    def render(context: dict, audience: str) -> dict:
        short_code = context["order_short_code"]
        accepted = context["decision"] == "Accepted"
        note = context.get("resolution_note")

        if audience == CUSTOMER:
            if accepted:
                message = f"Your return request for order #{short_code} was accepted."
            else:
                message = f"Your return request for order #{short_code} was declined."
        else:
            message = f"Dispute on order #{short_code} {'accepted' if accepted else 'rejected'}."
        if note:
            message = f"{message} {note}"
        return {"title": f"Return request #{short_code}", "message": message}
