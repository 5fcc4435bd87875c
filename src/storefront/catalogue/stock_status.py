"""Derived stock report: low-stock and out-of-stock products across the catalogue."""

from dataclasses import dataclass

from storefront.catalogue.snapshot import ProductSnapshot


@dataclass(frozen=True)
class StockStatus:
    total_stock: int
    low_stock: tuple[str, ...]
    out_of_stock: tuple[str, ...]
    messages: tuple[str, ...]

    @property
    def message(self) -> str:
        return "\n".join(self.messages)


def stock_status(products: list[ProductSnapshot], low_stock_threshold: int) -> StockStatus:
    """Summarise stock levels. Low-stock lines come first, then out-of-stock, each in catalogue order."""
    low = [p for p in products if p.is_low_stock(low_stock_threshold)]
    out = [p for p in products if p.is_out_of_stock]

    messages = [f"{p.name}: low stock ({p.stock} left)" for p in low]
    messages += [f"{p.name}: out of stock" for p in out]

    return StockStatus(
        total_stock=sum(p.stock for p in products),
        low_stock=tuple(p.name for p in low),
        out_of_stock=tuple(p.name for p in out),
        messages=tuple(messages),
    )
