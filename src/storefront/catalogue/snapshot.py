"""Immutable product snapshots handed to the pure pricing, loyalty and summary engines."""

from dataclasses import dataclass

from storefront.catalogue.product import round_price


@dataclass(frozen=True)
class ProductSnapshot:
    """Point-in-time copy of a Product aggregate's catalogue fields."""

    id: str
    name: str
    current_price: int
    original_price: int
    stock: int
    on_flash_sale: bool = False
    on_suggested_sale: bool = False
    position: int = 0

    @classmethod
    def from_product(cls, product) -> "ProductSnapshot":
        return cls(
            id=str(product.id),
            name=product.name,
            current_price=product.current_price,
            original_price=product.original_price,
            stock=product.stock,
            on_flash_sale=bool(product.on_flash_sale),
            on_suggested_sale=bool(product.on_suggested_sale),
            position=product.position or 0,
        )

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    def is_low_stock(self, threshold: int) -> bool:
        return 0 < self.stock < threshold


def format_won(amount) -> str:
    return f"₩{round_price(amount):,}"


def option_label(product: ProductSnapshot) -> str:
    """Selector label reflecting stock and sale state."""
    if product.is_out_of_stock:
        markers = ""
        if product.on_flash_sale:
            markers += " ⚡SALE"
        if product.on_suggested_sale:
            markers += " 💝PICK"
        return f"{product.name} - {format_won(product.current_price)} (out of stock){markers}"

    was_now = f"{format_won(product.original_price)} → {format_won(product.current_price)}"
    if product.on_flash_sale and product.on_suggested_sale:
        return f"⚡💝{product.name} - {was_now} (25% SUPER SALE!)"
    if product.on_flash_sale:
        return f"⚡{product.name} - {was_now} (20% SALE!)"
    if product.on_suggested_sale:
        return f"💝{product.name} - {was_now} (5% pick for you!)"
    return f"{product.name} - {format_won(product.current_price)}"
