"""Repository for the Notification aggregate."""

from marketplace.domain import marketplace
from marketplace.notification.notification import Notification


@marketplace.repository(part_of=Notification)
class NotificationRepository:
    def find_for_recipient(self, recipient_id: str, unread_only: bool = False) -> list[Notification]:
        """A recipient's notifications, newest first."""
        query = self._dao.query.filter(recipient_id=recipient_id)
        if unread_only:
            query = query.filter(read=False)
        notifications = query.all().items
        return sorted(notifications, key=lambda notification: notification.created_at, reverse=True)
