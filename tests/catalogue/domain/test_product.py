"""Tests for the Product aggregate — stock reservation and promotional pricing."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import (
    FlashSaleApplied,
    LowStockDetected,
    ProductDiscountRemoved,
    ProductListed,
    StockReleased,
    StockReserved,
    SuggestedSaleApplied,
)
from storefront.catalogue.product import Product, discounted_price, round_price


def _make_product(**overrides):
    defaults = {
        "product_id": "p1",
        "name": "Bug-Free Keyboard",
        "price": 10000,
        "stock": 50,
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_create_sets_prices_and_stock(self):
        product = _make_product()
        assert product.id == "p1"
        assert product.original_price == 10000
        assert product.current_price == 10000
        assert product.stock == 50
        assert product.on_flash_sale is False
        assert product.on_suggested_sale is False

    def test_create_raises_product_listed(self):
        product = _make_product()
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductListed)
        assert event.product_id == "p1"
        assert event.price == 10000
        assert event.stock == 50

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(stock=-1)


class TestStockPredicates:
    def test_out_of_stock_at_zero(self):
        product = _make_product(stock=0)
        assert product.is_out_of_stock is True
        assert product.is_low_stock() is False

    @pytest.mark.parametrize("stock", [1, 4])
    def test_low_stock_below_five(self, stock):
        assert _make_product(stock=stock).is_low_stock() is True

    def test_five_units_is_not_low_stock(self):
        assert _make_product(stock=5).is_low_stock() is False

    def test_has_available(self):
        product = _make_product(stock=3)
        assert product.has_available(3) is True
        assert product.has_available(4) is False
        assert product.has_available(0) is False


class TestReserveStock:
    def test_reserve_decreases_stock(self):
        product = _make_product(stock=50)
        product.reserve_stock(20)
        assert product.stock == 30

    def test_reserve_raises_stock_reserved(self):
        product = _make_product(stock=50)
        product._events.clear()
        product.reserve_stock(20)

        event = product._events[0]
        assert isinstance(event, StockReserved)
        assert event.quantity == 20
        assert event.previous_stock == 50
        assert event.remaining_stock == 30

    def test_reserve_into_low_stock_raises_low_stock_detected(self):
        product = _make_product(stock=6)
        product._events.clear()
        product.reserve_stock(2)

        low = [e for e in product._events if isinstance(e, LowStockDetected)]
        assert len(low) == 1
        assert low[0].remaining_stock == 4

    def test_reserving_everything_is_not_low_stock(self):
        product = _make_product(stock=3)
        product._events.clear()
        product.reserve_stock(3)

        assert product.stock == 0
        assert not any(isinstance(e, LowStockDetected) for e in product._events)

    def test_reserve_fails_with_zero_quantity(self):
        product = _make_product()
        with pytest.raises(ValidationError) as exc_info:
            product.reserve_stock(0)
        assert "quantity" in exc_info.value.messages

    def test_reserve_fails_when_insufficient_stock(self):
        product = _make_product(stock=10)
        with pytest.raises(ValidationError) as exc_info:
            product.reserve_stock(11)
        assert "quantity" in exc_info.value.messages
        assert product.stock == 10


class TestReleaseStock:
    def test_release_increases_stock(self):
        product = _make_product(stock=0)
        product.release_stock(5)
        assert product.stock == 5

    def test_release_raises_stock_released(self):
        product = _make_product(stock=10)
        product._events.clear()
        product.release_stock(4)

        event = product._events[0]
        assert isinstance(event, StockReleased)
        assert event.previous_stock == 10
        assert event.remaining_stock == 14

    def test_release_fails_with_negative_quantity(self):
        with pytest.raises(ValidationError):
            _make_product().release_stock(-1)


class TestPriceRounding:
    def test_halves_round_up(self):
        assert round_price(9509.5) == 9510
        assert round_price(9509.4) == 9509

    def test_discounted_price(self):
        assert discounted_price(25000, 0.2) == 20000
        assert discounted_price(10010, 0.05) == 9510


class TestFlashSale:
    def test_flash_sale_takes_rate_off_original_price(self):
        product = _make_product(price=25000)
        product.apply_flash_sale(0.2)
        assert product.current_price == 20000
        assert product.original_price == 25000
        assert product.on_flash_sale is True

    def test_flash_sale_raises_event(self):
        product = _make_product(price=25000)
        product._events.clear()
        product.apply_flash_sale(0.2)

        event = product._events[0]
        assert isinstance(event, FlashSaleApplied)
        assert event.original_price == 25000
        assert event.sale_price == 20000

    def test_flash_sale_twice_is_rejected(self):
        product = _make_product()
        product.apply_flash_sale(0.2)
        with pytest.raises(ValidationError) as exc_info:
            product.apply_flash_sale(0.2)
        assert "on_flash_sale" in exc_info.value.messages


class TestSuggestedSale:
    def test_suggested_sale_takes_rate_off_current_price(self):
        product = _make_product(price=15000)
        product.apply_suggested_sale(0.05)
        assert product.current_price == 14250
        assert product.on_suggested_sale is True

    def test_suggested_sale_compounds_with_flash_sale(self):
        product = _make_product(price=25000)
        product.apply_flash_sale(0.2)
        product._events.clear()
        product.apply_suggested_sale(0.05)

        assert product.current_price == 19000
        event = product._events[0]
        assert isinstance(event, SuggestedSaleApplied)
        assert event.previous_price == 20000

    def test_suggested_sale_twice_is_rejected(self):
        product = _make_product()
        product.apply_suggested_sale(0.05)
        with pytest.raises(ValidationError) as exc_info:
            product.apply_suggested_sale(0.05)
        assert "on_suggested_sale" in exc_info.value.messages


class TestRemoveDiscount:
    def test_remove_restores_original_price_and_clears_flags(self):
        product = _make_product(price=25000)
        product.apply_flash_sale(0.2)
        product.apply_suggested_sale(0.05)
        product.remove_discount()

        assert product.current_price == 25000
        assert product.on_flash_sale is False
        assert product.on_suggested_sale is False

    def test_remove_raises_event(self):
        product = _make_product(price=25000)
        product.apply_flash_sale(0.2)
        product._events.clear()
        product.remove_discount()

        event = product._events[0]
        assert isinstance(event, ProductDiscountRemoved)
        assert event.previous_price == 20000
        assert event.restored_price == 25000

    def test_remove_without_sale_is_a_no_op(self):
        product = _make_product()
        product._events.clear()
        product.remove_discount()
        assert product._events == []


class TestPriceInvariant:
    def test_price_cannot_drift_without_a_sale_flag(self):
        product = _make_product(price=10000)
        with pytest.raises(ValidationError) as exc_info:
            product.current_price = 9000
        assert "current_price" in exc_info.value.messages
