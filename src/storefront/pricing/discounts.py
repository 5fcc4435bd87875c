"""Discount Engine — per-line, whole-cart and Tuesday discounts.

Resolution order for one cart:

1. Per-line individual discount: a product-specific rate once a single
   line reaches ``individual_threshold`` units.
2. Whole-cart bulk discount: ``bulk_rate`` off every line once the cart
   holds ``bulk_threshold`` units. This replaces every individual
   discount outright; the two are never compared or added.
3. Tuesday special: ``tuesday_rate`` off whatever total is left, stacking
   on top of either of the above.

Promotional prices are already baked into each line's unit price, so
they compound with all three steps.

Everything here is a pure function of its arguments. Arithmetic runs on
``Decimal`` and results are handed back as floats, the way monetary
fields are stored elsewhere in the domain.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from storefront.config import DiscountPolicy

INDIVIDUAL = "individual"
BULK = "bulk"
NONE = "none"

_DEFAULT_POLICY = DiscountPolicy()


def _decimal(value) -> Decimal:
    return Decimal(str(value))


@dataclass(frozen=True)
class PricedLine:
    """One cart line priced at the product's current price."""

    product_id: str
    name: str
    unit_price: int
    quantity: int

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class DiscountResult:
    """Discount applied to a single line."""

    rate: float
    amount: float
    kind: str = NONE


@dataclass(frozen=True)
class LineDiscount:
    """Display entry for a line that earned its individual discount."""

    name: str
    rate_percent: int


@dataclass(frozen=True)
class DiscountSummary:
    subtotal: float
    total_discount: float
    final_total: float
    per_line_discounts: tuple[LineDiscount, ...]
    is_tuesday: bool
    has_bulk_discount: bool
    total_quantity: int = 0
    line_results: tuple[DiscountResult, ...] = ()
    tuesday_discount: float = 0.0

    @property
    def discount_rate(self) -> float:
        """Share of the subtotal saved overall; 0 for an empty cart."""
        if self.subtotal <= 0:
            return 0.0
        return float((_decimal(self.subtotal) - _decimal(self.final_total)) / _decimal(self.subtotal))

    @property
    def savings(self) -> float:
        return self.subtotal - self.final_total


def individual_discount_rate(product_id, quantity: int, policy: DiscountPolicy = _DEFAULT_POLICY) -> float:
    if quantity < policy.individual_threshold:
        return 0.0
    return policy.individual_rates.get(str(product_id), 0.0)


def bulk_discount_rate(total_quantity: int, policy: DiscountPolicy = _DEFAULT_POLICY) -> float:
    return policy.bulk_rate if total_quantity >= policy.bulk_threshold else 0.0


def line_discount(line: PricedLine, total_quantity: int, policy: DiscountPolicy = _DEFAULT_POLICY) -> DiscountResult:
    """Discount for one line given the cart's total quantity.

    When the bulk threshold is met every line gets the bulk rate, even a
    line whose own individual rate is higher.
    """
    bulk_rate = bulk_discount_rate(total_quantity, policy)
    if bulk_rate > 0:
        rate, kind = bulk_rate, BULK
    else:
        rate = individual_discount_rate(line.product_id, line.quantity, policy)
        kind = INDIVIDUAL if rate > 0 else NONE

    amount = _decimal(line.line_total) * _decimal(rate)
    return DiscountResult(rate=rate, amount=float(amount), kind=kind)


def tuesday_discount(amount, is_tuesday: bool, policy: DiscountPolicy = _DEFAULT_POLICY) -> float:
    """Tuesday reduction on ``amount``. Nothing is taken off a zero total."""
    if not is_tuesday or amount <= 0:
        return 0.0
    return float(_decimal(amount) * _decimal(policy.tuesday_rate))


def summarize_discounts(
    lines: Sequence[PricedLine],
    is_tuesday: bool,
    policy: DiscountPolicy = _DEFAULT_POLICY,
) -> DiscountSummary:
    """Resolve every discount for the cart and total it up."""
    total_quantity = sum(line.quantity for line in lines)
    results = tuple(line_discount(line, total_quantity, policy) for line in lines)
    has_bulk = any(result.kind == BULK for result in results)

    subtotal = sum((_decimal(line.line_total) for line in lines), Decimal(0))
    line_discount_total = sum((_decimal(result.amount) for result in results), Decimal(0))
    intermediate = subtotal - line_discount_total

    tuesday = _decimal(tuesday_discount(intermediate, is_tuesday, policy))
    final_total = intermediate - tuesday

    per_line = tuple(
        LineDiscount(name=line.name, rate_percent=round(result.rate * 100))
        for line, result in zip(lines, results, strict=True)
        if result.kind == INDIVIDUAL
    )

    return DiscountSummary(
        subtotal=float(subtotal),
        total_discount=float(line_discount_total + tuesday),
        final_total=float(final_total),
        per_line_discounts=per_line,
        is_tuesday=is_tuesday,
        has_bulk_discount=has_bulk,
        total_quantity=total_quantity,
        line_results=results,
        tuesday_discount=float(tuesday),
    )
