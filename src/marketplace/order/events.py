"""Domain events for the Order aggregate.

Events are immutable facts raised by the aggregate and dispatched to event
handlers once the unit of work commits. The notification fan-out subscribes
to the order stream and resolves recipients from the persisted order.
"""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderCreated:
    """A customer checked out and a new order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    short_code = String(required=True)
    customer_name = String(required=True)
    customer_phone = String(required=True)
    status = String(required=True)
    total = Float(required=True)
    assigned_partner_id = Identifier()
    created_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The order moved from one lifecycle status to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    short_code = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = String()
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class ReceiptConfirmed:
    """The customer confirmed receipt of a delivered order and left a review."""

    __version__ = 1

    order_id = Identifier(required=True)
    short_code = String(required=True)
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class RefundIssued:
    """A completed return was refunded as a store-credit voucher."""

    __version__ = 1

    order_id = Identifier(required=True)
    short_code = String(required=True)
    refund_code = String(required=True)
    refund_value = Float(required=True)
    issued_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class RefundVoucherRedeemed:
    """The customer collected the refund voucher; the order is archived."""

    __version__ = 1

    order_id = Identifier(required=True)
    short_code = String(required=True)
    redeemed_at = DateTime(required=True)
