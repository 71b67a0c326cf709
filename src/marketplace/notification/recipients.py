"""Recipient resolution for the notification fan-out.

Customers usually order as guests, so every order has a synthetic guest
identity derived from its short code. A registered account is found through
a pluggable ``CustomerResolver``. The default one matches client accounts
whose username is the phone number given at checkout. That match is a
heuristic: two people sharing a phone, or a username that happens to look
like someone else's number, will see each other's order notifications.
Production deployments should install a resolver backed by a real link
between accounts and orders.
"""

from abc import ABC, abstractmethod

from protean.utils.globals import current_domain

from marketplace.identity.account import Account, AccountRole

OPERATOR_FALLBACK_ID = "operator"
GUEST_PREFIX = "guest_"


class CustomerResolver(ABC):
    """Finds the registered accounts behind an order's customer."""

    @abstractmethod
    def resolve(self, order) -> list[str]:
        """Return the account ids to notify, possibly none."""
        ...


class PhoneUsernameResolver(CustomerResolver):
    def resolve(self, order) -> list[str]:
        phone = order.customer.phone if order.customer else None
        if not phone:
            return []
        accounts = current_domain.repository_for(Account).find_clients_by_username(phone)
        return [str(account.id) for account in accounts]


_resolver: CustomerResolver = PhoneUsernameResolver()


def get_customer_resolver() -> CustomerResolver:
    return _resolver


def set_customer_resolver(resolver: CustomerResolver) -> None:
    global _resolver
    _resolver = resolver


def guest_identity(short_code: str) -> str:
    return f"{GUEST_PREFIX}{short_code}"


def operator_ids() -> list[str]:
    """Active admin accounts, or the fallback operator inbox when there are none."""
    admins = current_domain.repository_for(Account).find_active_by_role(AccountRole.ADMIN)
    return [str(admin.id) for admin in admins] or [OPERATOR_FALLBACK_ID]


def customer_ids(order) -> list[str]:
    """The guest identity first, then any registered account."""
    return [guest_identity(order.short_code)] + get_customer_resolver().resolve(order)


def partner_ids(partner_id) -> list[str]:
    return [str(partner_id)] if partner_id else []


def supplier_ids(order, product_ids=None) -> list[str]:
    """Distinct suppliers of the order's lines, optionally limited to some products."""
    if product_ids is None:
        return order.supplier_ids

    wanted = {str(product_id) for product_id in product_ids}
    seen = []
    for item in order.items:
        if str(item.product_id) in wanted and item.supplier_id and str(item.supplier_id) not in seen:
            seen.append(str(item.supplier_id))
    return seen
