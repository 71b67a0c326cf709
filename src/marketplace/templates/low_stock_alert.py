"""Low stock alert template — operator and supplier."""

from marketplace.notification.notification import NotificationCategory


class LowStockAlertTemplate:
    category = NotificationCategory.ALERT.value

    @staticmethod
    def render(context: dict, audience: str) -> dict:
        name = context.get("name", "A product")
        return {
            "title": f"Low stock: {name}",
            "message": (
                f"{name} has {context.get('stock', 0)} unit(s) left "
                f"(threshold {context.get('threshold', 0)}). Please restock."
            ),
        }
