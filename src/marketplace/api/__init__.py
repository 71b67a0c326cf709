"""Marketplace API package."""

from marketplace.api.back_office import (
    account_router,
    audit_router,
    driver_router,
    finance_router,
    notification_router,
    product_router,
)
from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import coupon_router, dispute_router, order_router, tracking_router

ROUTERS = [
    order_router,
    tracking_router,
    dispute_router,
    coupon_router,
    finance_router,
    notification_router,
    product_router,
    account_router,
    driver_router,
    audit_router,
]

__all__ = ["ROUTERS", "register_error_handlers"]
