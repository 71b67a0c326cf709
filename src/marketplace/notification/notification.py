"""Notification aggregate — one inbox row for one recipient.

Rows are created by the fan-out handlers when order, dispute, refund or
stock events happen. Nothing is batched: every recipient of an event gets
their own row, and the only later change is marking it read.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String, Text

from marketplace.domain import marketplace
from marketplace.notification.events import NotificationCreated, NotificationRead


class NotificationCategory(Enum):
    ORDER = "Order"
    STATUS = "Status"
    INFO = "Info"
    ALERT = "Alert"
    COUPON = "Coupon"


@marketplace.aggregate
class Notification:
    # Account ids, the fallback operator id, or guest_<shortCode>
    recipient_id: String(required=True, max_length=100)

    title: String(required=True, max_length=255)
    message: Text(required=True)
    category: String(choices=NotificationCategory, default=NotificationCategory.INFO.value)
    link: String(max_length=255)

    read: Boolean(default=False)
    read_at: DateTime()
    created_at: DateTime()

    @classmethod
    def create(cls, recipient_id, title, message, category=NotificationCategory.INFO.value, link=None):
        now = datetime.now(UTC)
        notification = cls(
            recipient_id=recipient_id,
            title=title,
            message=message,
            category=category,
            link=link,
            read=False,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=recipient_id,
                category=category,
                title=title,
                created_at=now,
            )
        )
        return notification

    def mark_read(self):
        """Mark as read. Reading twice is harmless."""
        if self.read:
            return

        now = datetime.now(UTC)
        self.read = True
        self.read_at = now
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=self.recipient_id,
                read_at=now,
            )
        )
