"""Promotional pricing — commands and handler for flash and suggested sales."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.ledger import StockLedger
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class ApplyFlashSale:
    """Price a product at ``rate`` off its original price."""

    product_id = Identifier(required=True)
    rate = Float(required=True, min_value=0.0, max_value=1.0)


@storefront.command(part_of="Product")
class ApplySuggestedSale:
    """Take a further ``rate`` off a product's current price."""

    product_id = Identifier(required=True)
    rate = Float(required=True, min_value=0.0, max_value=1.0)


@storefront.command(part_of="Product")
class RemoveDiscount:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class RemoveAllDiscounts:
    """Restore every product in the catalogue to its original price."""

    reason = String(max_length=100, default="reset")


@storefront.command_handler(part_of=Product)
class PromotionalPricingHandler:
    @handle(ApplyFlashSale)
    def apply_flash_sale(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.apply_flash_sale(rate=command.rate)
        repo.add(product)

        logger.info(
            "Flash sale applied",
            product_id=str(product.id),
            sale_price=product.current_price,
        )
        return product.current_price

    @handle(ApplySuggestedSale)
    def apply_suggested_sale(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.apply_suggested_sale(rate=command.rate)
        repo.add(product)

        logger.info(
            "Suggested sale applied",
            product_id=str(product.id),
            sale_price=product.current_price,
        )
        return product.current_price

    @handle(RemoveDiscount)
    def remove_discount(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.remove_discount()
        repo.add(product)
        return product.current_price

    @handle(RemoveAllDiscounts)
    def remove_all_discounts(self, command):
        repo = current_domain.repository_for(Product)
        restored = 0
        for product in StockLedger().list_products():
            if product.is_on_sale:
                product.remove_discount()
                repo.add(product)
                restored += 1

        logger.info("All discounts removed", reason=command.reason, restored=restored)
        return restored
