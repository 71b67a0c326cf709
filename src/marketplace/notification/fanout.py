"""Shared fan-out helper for the notification event handlers.

Renders the event's template once per audience and writes one Notification
row per distinct recipient. A recipient who appears in two audiences (an
operator who is also a supplier) is notified once, as the first audience.
"""

import structlog
from protean.utils.globals import current_domain

from marketplace.notification.notification import Notification
from marketplace.templates import get_template

logger = structlog.get_logger(__name__)


def fan_out(event_name: str, context: dict, audiences: list[tuple[str, list[str]]], link: str | None = None):
    """Notify every recipient in ``audiences``.

    Args:
        event_name: Key of the template in the registry.
        context: Values the template renders from.
        audiences: ``(audience, recipient_ids)`` pairs, in priority order.

    Returns:
        List of the recipient ids notified.
    """
    template_cls = get_template(event_name)
    repo = current_domain.repository_for(Notification)

    notified = []
    for audience, recipient_ids in audiences:
        recipients = [
            recipient_id
            for recipient_id in dict.fromkeys(recipient_ids)
            if recipient_id and recipient_id not in notified
        ]
        if not recipients:
            continue

        rendered = template_cls.render(context, audience)
        for recipient_id in recipients:
            notification = Notification.create(
                recipient_id=recipient_id,
                title=rendered["title"],
                message=rendered["message"],
                category=template_cls.category,
                link=link,
            )
            repo.add(notification)
            notified.append(recipient_id)

    logger.info("Notifications fanned out", event_name=event_name, count=len(notified))
    return notified
