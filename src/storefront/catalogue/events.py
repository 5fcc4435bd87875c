"""Domain events for the Product aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductListed:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Integer(required=True)
    stock = Integer(required=True)


@storefront.event(part_of="Product")
class StockReserved:
    """Units moved from the catalogue into the cart."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    remaining_stock = Integer(required=True)


@storefront.event(part_of="Product")
class StockReleased:
    """Units moved back from the cart into the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    remaining_stock = Integer(required=True)


@storefront.event(part_of="Product")
class LowStockDetected:
    """Remaining stock dropped below the low-stock threshold."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    remaining_stock = Integer(required=True)


@storefront.event(part_of="Product")
class FlashSaleApplied:
    __version__ = 1

    product_id = Identifier(required=True)
    original_price = Integer(required=True)
    sale_price = Integer(required=True)
    rate = Float(required=True)


@storefront.event(part_of="Product")
class SuggestedSaleApplied:
    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Integer(required=True)
    sale_price = Integer(required=True)
    rate = Float(required=True)


@storefront.event(part_of="Product")
class ProductDiscountRemoved:
    """Promotional pricing was cleared and the original price restored."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Integer(required=True)
    restored_price = Integer(required=True)
