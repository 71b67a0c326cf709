"""Public order tracking by short code.

Lookups are cheap and never raise for unknown codes. Once the customer has
collected their refund voucher the order is archived for tracking purposes
and the code stops resolving.
"""

from protean.utils.globals import current_domain

from marketplace.order.order import Order


def track_order(reference: str | None) -> Order | None:
    reference = (reference or "").strip()
    if not reference:
        return None

    repo = current_domain.repository_for(Order)
    order = repo.find_by_short_code(reference.upper()) or repo.find_by_reference(reference)
    if order is None or order.coupon_redeemed:
        return None
    return order
