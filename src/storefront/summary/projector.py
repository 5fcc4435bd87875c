"""Order Summary projection — the read model the view layer renders.

Rebuilt from scratch after every cart or catalogue change: line totals
first, then discounts, then points on the discounted total. The
projection is a pure function of product snapshots, cart lines and the
day, so projecting the same state twice gives equal summaries.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from storefront.catalogue.snapshot import ProductSnapshot
from storefront.catalogue.stock_status import StockStatus, stock_status
from storefront.config import StorefrontSettings
from storefront.loyalty.points import PointsCalculation, calculate_total_points, format_points
from storefront.pricing.discounts import DiscountResult, DiscountSummary, PricedLine, summarize_discounts


@dataclass(frozen=True)
class CartLineSnapshot:
    product_id: str
    quantity: int
    sequence: int = 0

    @classmethod
    def from_line(cls, line) -> "CartLineSnapshot":
        return cls(product_id=str(line.product_id), quantity=line.quantity, sequence=line.sequence or 0)


@dataclass(frozen=True)
class OrderLine:
    product: ProductSnapshot
    quantity: int
    line_total: int
    discount: DiscountResult


@dataclass(frozen=True)
class OrderSummary:
    lines: tuple[OrderLine, ...]
    discounts: DiscountSummary
    points: PointsCalculation
    stock_status: StockStatus
    item_count: int

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> float:
        return self.discounts.subtotal

    @property
    def final_total(self) -> float:
        return self.discounts.final_total

    @property
    def savings(self) -> float:
        return self.discounts.savings

    @property
    def savings_rate(self) -> float:
        return self.discounts.discount_rate

    @property
    def points_display(self) -> str:
        return format_points(self.points)


def project_order_summary(
    products: Sequence[ProductSnapshot],
    cart_lines: Sequence[CartLineSnapshot],
    is_tuesday: bool,
    settings: StorefrontSettings | None = None,
) -> OrderSummary:
    """Assemble the order summary for the given catalogue and cart state."""
    settings = settings or StorefrontSettings()
    catalogue = {product.id: product for product in products}
    ordered = sorted(cart_lines, key=lambda line: line.sequence)

    priced = [
        PricedLine(
            product_id=line.product_id,
            name=catalogue[line.product_id].name,
            unit_price=catalogue[line.product_id].current_price,
            quantity=line.quantity,
        )
        for line in ordered
    ]

    discounts = summarize_discounts(priced, is_tuesday, settings.discounts)
    points = calculate_total_points(discounts.final_total, ordered, is_tuesday, settings.loyalty)

    lines = tuple(
        OrderLine(
            product=catalogue[line.product_id],
            quantity=line.quantity,
            line_total=priced_line.line_total,
            discount=result,
        )
        for line, priced_line, result in zip(ordered, priced, discounts.line_results, strict=True)
    )

    return OrderSummary(
        lines=lines,
        discounts=discounts,
        points=points,
        stock_status=stock_status(list(products), settings.low_stock_threshold),
        item_count=discounts.total_quantity,
    )
