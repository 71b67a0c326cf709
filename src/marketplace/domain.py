"""Marketplace bounded context — order pipeline for a multi-actor storefront.

Connects the platform operator, logistics partners (agencies and pickup
points), product suppliers and customers around a single order lifecycle:
checkout, fulfilment, pickup by collection code, returns and refunds,
profit settlement, and notification fan-out to every party involved.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")
