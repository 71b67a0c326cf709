"""Domain events for the Notification aggregate.

Clients that show an inbox (the web app, a push gateway) subscribe to the
notification stream instead of polling.
"""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Notification")
class NotificationCreated:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: String(required=True)
    category: String(required=True)
    title: String(required=True)
    created_at: DateTime(required=True)


@marketplace.event(part_of="Notification")
class NotificationRead:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: String(required=True)
    read_at: DateTime(required=True)
