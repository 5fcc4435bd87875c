"""Storefront bounded context — Catalogue, Stock Ledger and Shopping Cart.

Holds the product catalogue with its stock levels and promotional prices,
the single-session cart, and the commands that move units between them.
Discount, loyalty and order-summary rules are pure functions layered on top.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
