"""Driver aggregate — delivery staff employed by a partner agency.

Agencies submit their drivers; the operator vets them before they can take
deliveries. Drivers the operator registers directly skip the review.

State Machine:
    PENDING_APPROVAL → ACTIVE / REJECTED
    ACTIVE ↔ BUSY
    ACTIVE/BUSY → INACTIVE → ACTIVE
    any non-archived state → ARCHIVED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from marketplace.domain import marketplace


class DriverStatus(Enum):
    PENDING_APPROVAL = "Pending_Approval"
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    BUSY = "Busy"
    REJECTED = "Rejected"
    ARCHIVED = "Archived"


_VALID_TRANSITIONS = {
    DriverStatus.PENDING_APPROVAL: {DriverStatus.ACTIVE, DriverStatus.REJECTED, DriverStatus.ARCHIVED},
    DriverStatus.ACTIVE: {DriverStatus.BUSY, DriverStatus.INACTIVE, DriverStatus.ARCHIVED},
    DriverStatus.BUSY: {DriverStatus.ACTIVE, DriverStatus.INACTIVE, DriverStatus.ARCHIVED},
    DriverStatus.INACTIVE: {DriverStatus.ACTIVE, DriverStatus.ARCHIVED},
    DriverStatus.REJECTED: {DriverStatus.ARCHIVED},
    DriverStatus.ARCHIVED: set(),  # Terminal
}

# Decisions the operator can take when reviewing a driver
REVIEW_DECISIONS = frozenset({DriverStatus.ACTIVE, DriverStatus.REJECTED, DriverStatus.INACTIVE})


@marketplace.aggregate
class Driver:
    agency_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20)
    zone = String(max_length=100)
    status = String(choices=DriverStatus, default=DriverStatus.PENDING_APPROVAL.value)
    admin_note = Text()
    joined_at = DateTime()

    @classmethod
    def submit(cls, agency_id, name, phone, zone=None, approved=False):
        return cls(
            agency_id=agency_id,
            name=name,
            phone=phone,
            zone=zone,
            status=DriverStatus.ACTIVE.value if approved else DriverStatus.PENDING_APPROVAL.value,
            joined_at=datetime.now(UTC),
        )

    def _assert_can_transition(self, target_status):
        current = DriverStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def review(self, decision, note=None):
        decision = DriverStatus(decision)
        if decision not in REVIEW_DECISIONS:
            raise ValidationError({"status": [f"{decision.value} is not a review decision"]})
        self._assert_can_transition(decision)
        self.status = decision.value
        if note:
            self.admin_note = note

    def archive(self):
        self._assert_can_transition(DriverStatus.ARCHIVED)
        self.status = DriverStatus.ARCHIVED.value
