"""Pickup collection-code validation — command and handler.

The pickup point types in the four digits the customer shows them. A match
delivers an order waiting at the pickup point (and settles it). An order
already delivered accepts its code again without changes. Anything else,
including an order on the return track, leaves the order exactly as it
was. There is no attempt counter.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.lifecycle import apply_transition
from marketplace.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)

PICKUP_VALIDATED_NOTE = "Pickup validated by code"

COLLECTABLE_STATES = frozenset({OrderStatus.READY.value, OrderStatus.OUT_FOR_DELIVERY.value})


@marketplace.command(part_of="Order")
class ValidateCollectionCode:
    short_code = String(required=True, max_length=6)
    code = String(required=True, max_length=10)


@marketplace.command_handler(part_of=Order)
class CollectionCodeHandler:
    @handle(ValidateCollectionCode)
    def validate(self, command) -> bool:
        repo = current_domain.repository_for(Order)
        order = repo.find_by_short_code(command.short_code)
        if order is None:
            logger.info("Collection code for unknown order", short_code=command.short_code)
            return False

        if not order.matches_collection_code(command.code):
            logger.info("Collection code mismatch", order_id=str(order.id), short_code=order.short_code)
            return False

        if order.status == OrderStatus.DELIVERED.value:
            return True

        if order.status not in COLLECTABLE_STATES:
            logger.info(
                "Collection code for an order that is not awaiting pickup",
                order_id=str(order.id),
                status=order.status,
            )
            return False

        apply_transition(order, OrderStatus.DELIVERED, note=PICKUP_VALIDATED_NOTE)
        repo.add(order)
        return True
