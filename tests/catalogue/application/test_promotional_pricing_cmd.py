"""Application tests for the promotional pricing commands."""

from protean import current_domain
from storefront.catalogue.ledger import StockLedger
from storefront.catalogue.pricing import (
    ApplyFlashSale,
    ApplySuggestedSale,
    RemoveAllDiscounts,
    RemoveDiscount,
)


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestApplyFlashSaleCommand:
    def test_flash_sale_persists(self, seeded_catalogue):
        price = _process(ApplyFlashSale(product_id="p5", rate=0.2))

        assert price == 20000
        speaker = StockLedger().find_product("p5")
        assert speaker.current_price == 20000
        assert speaker.on_flash_sale is True


class TestApplySuggestedSaleCommand:
    def test_suggested_sale_persists(self, seeded_catalogue):
        price = _process(ApplySuggestedSale(product_id="p2", rate=0.05))

        assert price == 19000
        assert StockLedger().find_product("p2").on_suggested_sale is True

    def test_suggested_sale_on_flash_sale_product(self, seeded_catalogue):
        _process(ApplyFlashSale(product_id="p3", rate=0.2))
        price = _process(ApplySuggestedSale(product_id="p3", rate=0.05))

        assert price == 22800


class TestRemoveDiscountCommands:
    def test_remove_discount_restores_price(self, seeded_catalogue):
        _process(ApplyFlashSale(product_id="p1", rate=0.2))
        price = _process(RemoveDiscount(product_id="p1"))

        assert price == 10000
        keyboard = StockLedger().find_product("p1")
        assert keyboard.on_flash_sale is False

    def test_remove_all_discounts(self, seeded_catalogue):
        _process(ApplyFlashSale(product_id="p1", rate=0.2))
        _process(ApplySuggestedSale(product_id="p2", rate=0.05))

        restored = _process(RemoveAllDiscounts())

        assert restored == 2
        for product in StockLedger().list_products():
            assert product.current_price == product.original_price
            assert product.is_on_sale is False

    def test_remove_all_with_nothing_on_sale(self, seeded_catalogue):
        assert _process(RemoveAllDiscounts()) == 0
