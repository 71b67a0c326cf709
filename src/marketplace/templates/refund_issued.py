"""Refund voucher template — customer only."""

from marketplace.notification.notification import NotificationCategory
from marketplace.templates.audience import francs


class RefundIssuedTemplate:
    category = NotificationCategory.COUPON.value

    @staticmethod
    def render(context: dict, audience: str) -> dict:
        return {
            "title": "Refund voucher available",
            "message": (
                f"Your return of order #{context['short_code']} is complete. Use voucher "
                f"{context['refund_code']} worth {francs(context.get('refund_value'))} on your next order."
            ),
        }
