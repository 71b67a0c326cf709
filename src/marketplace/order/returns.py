"""Return progression after a dispute was accepted — command and handler.

The partner confirms they physically received the returned goods, which
moves the order to RETURN_PROCESSING. The refund itself is issued by the
ledger.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.lifecycle import apply_transition
from marketplace.order.order import Order, OrderStatus


@marketplace.command(part_of="Order")
class MarkReturnProcessing:
    order_id = Identifier(required=True)
    note = String(max_length=500, default="Returned item received")


@marketplace.command_handler(part_of=Order)
class ReturnProgressHandler:
    @handle(MarkReturnProcessing)
    def mark_return_processing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        apply_transition(order, OrderStatus.RETURN_PROCESSING, note=command.note)
        repo.add(order)
