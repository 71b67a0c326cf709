"""Opening disputes — commands and handler.

A customer asks for a return on a delivered order, or the handling partner
reports a problem with it. Either way the order moves to RETURN_REQUESTED
through the regular lifecycle, so an order that was never delivered cannot
be disputed.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.dispute.dispute import Dispute, DisputeType
from marketplace.domain import marketplace
from marketplace.order.lifecycle import apply_transition
from marketplace.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Dispute")
class OpenDispute:
    """Customer-initiated return request."""

    order_id = Identifier(required=True)
    description = Text(required=True)
    dispute_type = String(choices=DisputeType, default=DisputeType.RETURN.value)
    affected_product_ids = Text()  # JSON: list of product ID strings (optional, all items if omitted)
    photo_url = String(max_length=500)


@marketplace.command(part_of="Dispute")
class ReportPartnerProblem:
    """A partner reports a problem with an order they handle."""

    order_id = Identifier(required=True)
    partner_id = Identifier(required=True)
    description = Text(required=True)
    affected_product_ids = Text()  # JSON: list of product ID strings
    photo_url = String(max_length=500)


def _affected_products(order, raw):
    if not raw:
        return order.product_ids
    product_ids = [str(product_id) for product_id in (json.loads(raw) if isinstance(raw, str) else raw)]
    unknown = [product_id for product_id in product_ids if product_id not in order.product_ids]
    if unknown:
        raise ValidationError({"affected_product_ids": [f"Products not in order: {', '.join(unknown)}"]})
    return product_ids


@marketplace.command_handler(part_of=Dispute)
class OpenDisputeHandler:
    def _open(self, order, partner_id, dispute_type, description, affected_product_ids, photo_url, note):
        order_repo = current_domain.repository_for(Order)
        apply_transition(order, OrderStatus.RETURN_REQUESTED, note=note)

        dispute = Dispute.open(
            order_short_code=order.short_code,
            partner_id=partner_id,
            dispute_type=dispute_type,
            description=description,
            affected_product_ids=affected_product_ids,
            photo_url=photo_url,
        )
        current_domain.repository_for(Dispute).add(dispute)
        order_repo.add(order)

        logger.info(
            "Dispute opened",
            dispute_id=str(dispute.id),
            order_id=str(order.id),
            short_code=order.short_code,
            dispute_type=dispute.dispute_type,
        )
        return str(dispute.id)

    @handle(OpenDispute)
    def open_dispute(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        return self._open(
            order,
            partner_id=order.assigned_partner_id,
            dispute_type=command.dispute_type,
            description=command.description,
            affected_product_ids=_affected_products(order, command.affected_product_ids),
            photo_url=command.photo_url,
            note="Return requested by customer",
        )

    @handle(ReportPartnerProblem)
    def report_partner_problem(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        return self._open(
            order,
            partner_id=command.partner_id,
            dispute_type=DisputeType.OTHER.value,
            description=command.description,
            affected_product_ids=_affected_products(order, command.affected_product_ids),
            photo_url=command.photo_url,
            note="Problem reported by partner",
        )
