"""Account aggregate — the people and businesses that act on orders.

Roles:
    ADMIN     platform operator, notified about everything
    PARTNER   delivery agency, store or pickup point handling orders in a zone
    INVESTOR  supplier whose capital backs the products sold
    CLIENT    registered customer
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String

from marketplace.domain import marketplace


class AccountRole(Enum):
    ADMIN = "Admin"
    PARTNER = "Partner"
    INVESTOR = "Investor"
    CLIENT = "Client"


class PartnerType(Enum):
    AGENCY = "Agency"
    STORE = "Store"
    PICKUP = "Pickup"


@marketplace.aggregate
class Account:
    username = String(required=True, max_length=100, unique=True)
    name = String(required=True, max_length=150)
    role = String(choices=AccountRole, required=True)
    is_active = Boolean(default=True)
    assigned_zone = String(max_length=100)
    partner_type = String(choices=PartnerType)
    commission_rate = Float(min_value=0.0)
    created_at = DateTime()

    @classmethod
    def register(cls, username, name, role, assigned_zone=None, partner_type=None, commission_rate=None):
        if role == AccountRole.PARTNER.value and not partner_type:
            partner_type = PartnerType.AGENCY.value
        return cls(
            username=username,
            name=name,
            role=role,
            assigned_zone=assigned_zone,
            partner_type=partner_type,
            commission_rate=commission_rate,
            is_active=True,
            created_at=datetime.now(UTC),
        )

    @property
    def is_partner(self):
        return self.role == AccountRole.PARTNER.value

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": [f"Account {self.username} is already inactive"]})
        self.is_active = False
