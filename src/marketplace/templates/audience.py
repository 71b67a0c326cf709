"""Audiences a template can render for."""

STAFF = "staff"
CUSTOMER = "customer"


def status_label(status: str) -> str:
    """``Out_For_Delivery`` → ``out for delivery``."""
    return (status or "").replace("_", " ").lower()


def francs(amount) -> str:
    return f"{amount or 0:,.0f} F".replace(",", " ")
