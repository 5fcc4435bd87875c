"""Stock Ledger: the only path through which stock levels change.

Cart commands and promotion ticks both go through the ledger, so the
catalogue is never mutated behind the repository's back. Methods operate
inside the caller's unit of work; persistence happens on commit.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product

logger = structlog.get_logger(__name__)


class StockLedger:
    def __init__(self):
        self.repo = current_domain.repository_for(Product)

    def find_product(self, product_id) -> Product:
        """Fetch a product. Raises ``ObjectNotFoundError`` for unknown ids."""
        return self.repo.get(product_id)

    def list_products(self) -> list[Product]:
        """All products in catalogue order."""
        return self.repo._dao.query.order_by("position").all().items

    def check_availability(self, product_id, quantity) -> bool:
        return self.find_product(product_id).has_available(quantity)

    def decrease_stock(self, product_id, quantity) -> bool:
        """Reserve ``quantity`` units. Returns False, changing nothing, when stock is short."""
        product = self.find_product(product_id)
        if not product.has_available(quantity):
            logger.info(
                "Insufficient stock",
                product_id=str(product_id),
                requested=quantity,
                available=product.stock,
            )
            return False

        product.reserve_stock(quantity)
        self.repo.add(product)
        return True

    def increase_stock(self, product_id, quantity) -> None:
        """Return previously reserved units. No upper bound is enforced."""
        product = self.find_product(product_id)
        product.release_stock(quantity)
        self.repo.add(product)
