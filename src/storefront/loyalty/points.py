"""Loyalty Points Engine — point award for the current cart.

Points are earned on the discounted final total, then topped up by three
independent bonuses: a Tuesday multiplier on the base points, set bonuses
for buying the keyboard/mouse combination (and the monitor arm with it),
and a quantity bonus taken from the single highest tier the cart reaches.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from storefront.config import LoyaltyPolicy, QuantityTier

_DEFAULT_POLICY = LoyaltyPolicy()


@dataclass(frozen=True)
class PointsCalculation:
    base_points: int
    tuesday_bonus: int
    set_bonus: int
    full_set_bonus: int
    quantity_bonus: int
    total_points: int
    details: tuple[str, ...]


def calculate_base_points(final_total, policy: LoyaltyPolicy = _DEFAULT_POLICY) -> int:
    if final_total <= 0:
        return 0
    return math.floor(Decimal(str(final_total)) * Decimal(str(policy.base_rate)))


def calculate_tuesday_bonus(base_points: int, is_tuesday: bool, policy: LoyaltyPolicy = _DEFAULT_POLICY) -> int:
    if not is_tuesday or base_points <= 0:
        return 0
    return base_points * (policy.tuesday_multiplier - 1)


def calculate_set_bonuses(product_ids: Iterable[str], policy: LoyaltyPolicy = _DEFAULT_POLICY) -> tuple[int, int]:
    """Return ``(set_bonus, full_set_bonus)``. The full set pays on top of the set."""
    owned = {str(product_id) for product_id in product_ids}
    set_bonus = policy.set_bonus if owned.issuperset(policy.set_products) else 0
    full_set_bonus = policy.full_set_bonus if set_bonus and owned.issuperset(policy.full_set_products) else 0
    return set_bonus, full_set_bonus


def matching_quantity_tier(total_quantity: int, policy: LoyaltyPolicy = _DEFAULT_POLICY) -> QuantityTier | None:
    """Highest tier the cart reaches. Tiers never accumulate."""
    reached = [tier for tier in policy.quantity_tiers if total_quantity >= tier.threshold]
    return max(reached, key=lambda tier: tier.threshold, default=None)


def calculate_total_points(
    final_total,
    lines: Sequence,
    is_tuesday: bool,
    policy: LoyaltyPolicy = _DEFAULT_POLICY,
) -> PointsCalculation:
    """Compute the point award.

    ``lines`` are cart lines exposing ``product_id`` and ``quantity``.
    """
    base_points = calculate_base_points(final_total, policy)
    tuesday_bonus = calculate_tuesday_bonus(base_points, is_tuesday, policy)
    set_bonus, full_set_bonus = calculate_set_bonuses((line.product_id for line in lines), policy)

    tier = matching_quantity_tier(sum(line.quantity for line in lines), policy)
    quantity_bonus = tier.bonus if tier else 0

    details = []
    if base_points > 0:
        details.append(f"Base: {base_points}p")
    if tuesday_bonus > 0:
        details.append(f"Tuesday {policy.tuesday_multiplier}x")
    if set_bonus > 0:
        details.append(f"Keyboard+mouse set +{set_bonus}p")
    if full_set_bonus > 0:
        details.append(f"Full set +{full_set_bonus}p")
    if quantity_bonus > 0:
        details.append(f"{tier.description} +{quantity_bonus}p")

    return PointsCalculation(
        base_points=base_points,
        tuesday_bonus=tuesday_bonus,
        set_bonus=set_bonus,
        full_set_bonus=full_set_bonus,
        quantity_bonus=quantity_bonus,
        total_points=base_points + tuesday_bonus + set_bonus + full_set_bonus + quantity_bonus,
        details=tuple(details),
    )


def format_points(points: PointsCalculation) -> str:
    if points.total_points == 0:
        return "Loyalty points: 0p"
    return f"Loyalty points: {points.total_points}p ({', '.join(points.details)})"
