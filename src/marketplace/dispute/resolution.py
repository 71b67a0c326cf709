"""Dispute resolution — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.dispute.dispute import Dispute, DisputeDecision
from marketplace.domain import marketplace
from marketplace.order.lifecycle import apply_transition
from marketplace.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)

_ORDER_STATUS_FOR_DECISION = {
    DisputeDecision.ACCEPTED: OrderStatus.RETURN_ACCEPTED,
    DisputeDecision.REJECTED: OrderStatus.DELIVERED,
}


@marketplace.command(part_of="Dispute")
class ResolveDispute:
    dispute_id = Identifier(required=True)
    decision = String(choices=DisputeDecision, required=True)
    note = Text()


@marketplace.command_handler(part_of=Dispute)
class ResolveDisputeHandler:
    @handle(ResolveDispute)
    def resolve_dispute(self, command):
        dispute_repo = current_domain.repository_for(Dispute)
        dispute = dispute_repo.get(command.dispute_id)
        dispute.resolve(command.decision, note=command.note)

        order_repo = current_domain.repository_for(Order)
        order = order_repo.find_by_short_code(dispute.order_short_code)
        if order is None:
            raise ObjectNotFoundError(f"Order {dispute.order_short_code} of dispute {dispute.id} does not exist")

        decision = DisputeDecision(command.decision)
        note = dispute.resolution_note or f"Dispute {decision.value.lower()}"
        apply_transition(order, _ORDER_STATUS_FOR_DECISION[decision], note=note)

        dispute_repo.add(dispute)
        order_repo.add(order)

        logger.info(
            "Dispute resolved",
            dispute_id=str(dispute.id),
            order_id=str(order.id),
            decision=decision.value,
        )
