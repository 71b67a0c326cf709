"""Domain events for the Dispute aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Dispute")
class DisputeOpened:
    """A return or problem was raised against a delivered order."""

    __version__ = 1

    dispute_id = Identifier(required=True)
    order_short_code = String(required=True)
    partner_id = Identifier()
    dispute_type = String(required=True)
    description = String()
    opened_at = DateTime(required=True)


@marketplace.event(part_of="Dispute")
class DisputeResolved:
    """The operator accepted or rejected a dispute."""

    __version__ = 1

    dispute_id = Identifier(required=True)
    order_short_code = String(required=True)
    decision = String(required=True)
    resolution_note = String()
    resolved_at = DateTime(required=True)
