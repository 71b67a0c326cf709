"""Inbox reading — commands, handler and query."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.notification.notification import Notification


@marketplace.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)


@marketplace.command(part_of="Notification")
class MarkAllNotificationsRead:
    recipient_id = String(required=True, max_length=100)


@marketplace.command_handler(part_of=Notification)
class ReadNotificationsHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.mark_read()
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(Notification)
        unread = repo.find_for_recipient(command.recipient_id, unread_only=True)
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)


def notifications_for(recipient_id: str, unread_only: bool = False) -> list[Notification]:
    """A recipient's inbox, newest first."""
    return current_domain.repository_for(Notification).find_for_recipient(recipient_id, unread_only=unread_only)
