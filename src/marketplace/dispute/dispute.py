"""Dispute aggregate — a return or problem raised against one order.

A dispute only decides the first fork of a return: ACCEPTED sends the order
on to RETURN_ACCEPTED, REJECTED sends it back to DELIVERED. Once resolved it
never changes again; reopening means opening a new dispute.

State Machine:
    OPEN → RESOLVED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from marketplace.dispute.events import DisputeOpened, DisputeResolved
from marketplace.domain import marketplace


class DisputeType(Enum):
    RETURN = "Return"
    WITHDRAWAL_EXCEEDED = "Withdrawal_Exceeded"
    OTHER = "Other"


class DisputeStatus(Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


class DisputeDecision(Enum):
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


@marketplace.aggregate
class Dispute:
    order_short_code = String(required=True, max_length=6)
    partner_id = Identifier()
    dispute_type = String(choices=DisputeType, default=DisputeType.RETURN.value)
    description = Text()
    status = String(choices=DisputeStatus, default=DisputeStatus.OPEN.value)
    decision = String(choices=DisputeDecision)
    resolution_note = Text()
    affected_product_ids = Text()  # JSON: list of product ID strings
    photo_url = String(max_length=500)
    created_at = DateTime()
    resolved_at = DateTime()

    @classmethod
    def open(
        cls,
        order_short_code,
        partner_id=None,
        dispute_type=DisputeType.RETURN.value,
        description=None,
        affected_product_ids=None,
        photo_url=None,
    ):
        now = datetime.now(UTC)
        dispute = cls(
            order_short_code=order_short_code,
            partner_id=partner_id,
            dispute_type=dispute_type,
            description=description,
            status=DisputeStatus.OPEN.value,
            affected_product_ids=json.dumps(list(affected_product_ids or [])),
            photo_url=photo_url,
            created_at=now,
        )
        dispute.raise_(
            DisputeOpened(
                dispute_id=str(dispute.id),
                order_short_code=order_short_code,
                partner_id=partner_id,
                dispute_type=dispute.dispute_type,
                description=description,
                opened_at=now,
            )
        )
        return dispute

    @property
    def is_open(self):
        return self.status == DisputeStatus.OPEN.value

    @property
    def affected_products(self):
        return json.loads(self.affected_product_ids) if self.affected_product_ids else []

    def resolve(self, decision, note=None):
        """Record the operator's decision. A rejection must say why."""
        if not self.is_open:
            raise ValidationError({"status": ["Dispute is already resolved"]})

        decision = DisputeDecision(decision)
        note = (note or "").strip() or None
        if decision == DisputeDecision.REJECTED and not note:
            raise ValidationError({"resolution_note": ["rejection requires a reason"]})

        now = datetime.now(UTC)
        self.status = DisputeStatus.RESOLVED.value
        self.decision = decision.value
        self.resolution_note = note
        self.resolved_at = now

        self.raise_(
            DisputeResolved(
                dispute_id=str(self.id),
                order_short_code=self.order_short_code,
                decision=decision.value,
                resolution_note=note,
                resolved_at=now,
            )
        )
