"""Product aggregate — one catalogue entry with its stock level and promotional price.

Stock Model:
    stock: units still on the shelf. Units added to the cart are *reserved*:
           they leave ``stock`` when they enter the cart and come back when
           they leave it, so ``stock + quantity in cart`` is constant.

Price Model:
    original_price: list price, never changed by promotions
    current_price:  price charged now; below original only while a sale flag is set
"""

from decimal import ROUND_HALF_UP, Decimal

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String

from storefront.catalogue.events import (
    FlashSaleApplied,
    LowStockDetected,
    ProductDiscountRemoved,
    ProductListed,
    StockReleased,
    StockReserved,
    SuggestedSaleApplied,
)
from storefront.domain import storefront

LOW_STOCK_THRESHOLD = 5


def round_price(amount) -> int:
    """Round a price to whole currency units, halves rounding up."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def discounted_price(price: int, rate: float) -> int:
    return round_price(Decimal(price) * (Decimal(1) - Decimal(str(rate))))


@storefront.aggregate
class Product:
    """A catalogue product. ``id`` is the stable product code (``p1`` … ``p5``)."""

    id: Identifier(identifier=True)
    name: String(required=True, max_length=100)
    position: Integer(default=0)
    original_price: Integer(required=True, min_value=0)
    current_price: Integer(required=True, min_value=0)
    stock: Integer(default=0, min_value=0)
    on_flash_sale: Boolean(default=False)
    on_suggested_sale: Boolean(default=False)

    @invariant.post
    def current_price_matches_sale_state(self):
        if self.on_flash_sale or self.on_suggested_sale:
            if self.current_price > self.original_price:
                raise ValidationError({"current_price": ["Sale price cannot exceed the original price"]})
        elif self.current_price != self.original_price:
            raise ValidationError({"current_price": ["Price must equal the original price when no sale is active"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, product_id, name, price, stock, position=0):
        product = cls(
            id=product_id,
            name=name,
            position=position,
            original_price=price,
            current_price=price,
            stock=stock,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                name=name,
                price=price,
                stock=stock,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Derived stock predicates
    # -------------------------------------------------------------------
    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    def is_low_stock(self, threshold=LOW_STOCK_THRESHOLD) -> bool:
        return 0 < self.stock < threshold

    def has_available(self, quantity) -> bool:
        return 0 < quantity <= self.stock

    @property
    def is_on_sale(self) -> bool:
        return self.on_flash_sale or self.on_suggested_sale

    # -------------------------------------------------------------------
    # Stock reservation
    # -------------------------------------------------------------------
    def reserve_stock(self, quantity):
        """Move ``quantity`` units from the shelf into the cart. All or nothing."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.stock:
            raise ValidationError({"quantity": [f"Insufficient stock: {self.stock} available, {quantity} requested"]})

        previous = self.stock
        self.stock = previous - quantity

        self.raise_(
            StockReserved(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                remaining_stock=self.stock,
            )
        )
        if self.is_low_stock():
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    name=self.name,
                    remaining_stock=self.stock,
                )
            )

    def release_stock(self, quantity):
        """Return ``quantity`` previously reserved units to the shelf."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock
        self.stock = previous + quantity

        self.raise_(
            StockReleased(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                remaining_stock=self.stock,
            )
        )

    # -------------------------------------------------------------------
    # Promotional pricing
    # -------------------------------------------------------------------
    def apply_flash_sale(self, rate):
        """Price the product at ``rate`` off its original price."""
        if self.on_flash_sale:
            raise ValidationError({"on_flash_sale": ["Product is already on flash sale"]})

        sale_price = discounted_price(self.original_price, rate)
        with atomic_change(self):
            self.current_price = sale_price
            self.on_flash_sale = True

        self.raise_(
            FlashSaleApplied(
                product_id=str(self.id),
                original_price=self.original_price,
                sale_price=sale_price,
                rate=rate,
            )
        )

    def apply_suggested_sale(self, rate):
        """Take a further ``rate`` off whatever price currently holds."""
        if self.on_suggested_sale:
            raise ValidationError({"on_suggested_sale": ["Product is already on suggested sale"]})

        previous = self.current_price
        sale_price = discounted_price(previous, rate)
        with atomic_change(self):
            self.current_price = sale_price
            self.on_suggested_sale = True

        self.raise_(
            SuggestedSaleApplied(
                product_id=str(self.id),
                previous_price=previous,
                sale_price=sale_price,
                rate=rate,
            )
        )

    def remove_discount(self):
        """Restore the original price and clear both sale flags."""
        if not self.is_on_sale and self.current_price == self.original_price:
            return

        previous = self.current_price
        with atomic_change(self):
            self.current_price = self.original_price
            self.on_flash_sale = False
            self.on_suggested_sale = False

        self.raise_(
            ProductDiscountRemoved(
                product_id=str(self.id),
                previous_price=previous,
                restored_price=self.original_price,
            )
        )
