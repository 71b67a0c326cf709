"""New order template — staff get a work item, the customer a confirmation."""

from marketplace.notification.notification import NotificationCategory
from marketplace.templates.audience import CUSTOMER, francs


class OrderCreatedTemplate:
    category = NotificationCategory.ORDER.value

    @staticmethod
    def render(context: dict, audience: str) -> dict:
        short_code = context["short_code"]
        if audience == CUSTOMER:
            return {
                "title": f"Order #{short_code} confirmed",
                "message": (
                    f"Thank you {context.get('customer_name', '')}! Your order of {francs(context.get('total'))} "
                    f"is recorded. Track it with code {short_code}."
                ),
            }
        return {
            "title": f"New order #{short_code}",
            "message": (
                f"{context.get('customer_name', 'A customer')} placed an order of {francs(context.get('total'))}."
            ),
        }
