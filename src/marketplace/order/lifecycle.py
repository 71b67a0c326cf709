"""Order lifecycle — status transitions, cancellation and settlement trigger.

Every status change goes through ``apply_transition`` so the rules live in
one place: the transition table is enforced by the aggregate, DELIVERED
always asks settlement to run, and re-asserting DELIVERED on an already
delivered order changes nothing but still gives settlement its (no-op)
chance.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.finance.settlement import settle
from marketplace.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


def apply_transition(order, target_status, note=None, is_paid=None) -> bool:
    """Move ``order`` to ``target_status``. Returns False when nothing changed.

    The caller persists the order.
    """
    target_status = OrderStatus(target_status)

    if target_status == OrderStatus.DELIVERED and order.status == OrderStatus.DELIVERED.value:
        settle(order)
        return False

    previous = order.transition(target_status, note=note, is_paid=is_paid)
    logger.info(
        "Order status changed",
        order_id=str(order.id),
        short_code=order.short_code,
        previous_status=previous,
        new_status=order.status,
    )

    if target_status == OrderStatus.DELIVERED:
        settle(order)
    return True


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(choices=OrderStatus, required=True)
    note = String(max_length=500)
    is_paid = Boolean()


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@marketplace.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        changed = apply_transition(order, command.status, note=command.note, is_paid=command.is_paid)
        repo.add(order)
        return changed

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(reason=command.reason)
        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), reason=command.reason)
