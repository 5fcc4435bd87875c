"""Business-rule configuration for the storefront engine.

Protean infrastructure (providers, processing mode) lives in ``domain.toml``.
The rule tables here are plain frozen dataclasses so that the discount,
loyalty and promotion engines stay free of framework state and can be
constructed with alternative values in tests.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from storefront.catalogue.seeding import KEYBOARD, LAPTOP_CASE, MONITOR_ARM, MOUSE, SPEAKER

FALSY = frozenset({"0", "false", "no", "off"})

# Per-product rates unlocked at INDIVIDUAL_DISCOUNT_THRESHOLD units on one line
INDIVIDUAL_DISCOUNT_RATES = {
    KEYBOARD: 0.10,
    MOUSE: 0.15,
    MONITOR_ARM: 0.20,
    LAPTOP_CASE: 0.05,
    SPEAKER: 0.25,
}


@dataclass(frozen=True)
class DiscountPolicy:
    """Thresholds and rates for per-line, whole-cart and Tuesday discounts."""

    individual_rates: Mapping[str, float] = field(default_factory=lambda: dict(INDIVIDUAL_DISCOUNT_RATES))
    individual_threshold: int = 10
    bulk_threshold: int = 30
    bulk_rate: float = 0.25
    tuesday_rate: float = 0.10


@dataclass(frozen=True)
class QuantityTier:
    threshold: int
    bonus: int
    description: str


@dataclass(frozen=True)
class LoyaltyPolicy:
    """Point accrual rules. Tiers are matched highest-threshold first."""

    base_rate: float = 0.001
    tuesday_multiplier: int = 2
    set_bonus: int = 50
    full_set_bonus: int = 100
    set_products: tuple[str, ...] = (KEYBOARD, MOUSE)
    full_set_products: tuple[str, ...] = (KEYBOARD, MOUSE, MONITOR_ARM)
    quantity_tiers: tuple[QuantityTier, ...] = (
        QuantityTier(threshold=10, bonus=20, description="Bulk purchase (10+ items)"),
        QuantityTier(threshold=20, bonus=50, description="Bulk purchase (20+ items)"),
        QuantityTier(threshold=30, bonus=100, description="Bulk purchase (30+ items)"),
    )


@dataclass(frozen=True)
class PromotionSettings:
    """Rates and timings (seconds) of the two promotional timers."""

    flash_sale_rate: float = 0.20
    flash_sale_max_delay: float = 10.0
    flash_sale_interval: float = 30.0
    suggested_sale_rate: float = 0.05
    suggested_sale_max_delay: float = 20.0
    suggested_sale_interval: float = 60.0


@dataclass(frozen=True)
class StorefrontSettings:
    discounts: DiscountPolicy = field(default_factory=DiscountPolicy)
    loyalty: LoyaltyPolicy = field(default_factory=LoyaltyPolicy)
    promotions: PromotionSettings = field(default_factory=PromotionSettings)
    low_stock_threshold: int = 5
    autostart_promotions: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StorefrontSettings":
        """Build settings, overriding promotion timings and the low-stock threshold.

        Recognised variables: ``STOREFRONT_FLASH_SALE_MAX_DELAY``,
        ``STOREFRONT_FLASH_SALE_INTERVAL``, ``STOREFRONT_SUGGESTED_SALE_MAX_DELAY``,
        ``STOREFRONT_SUGGESTED_SALE_INTERVAL``, ``STOREFRONT_LOW_STOCK_THRESHOLD`` and
        ``STOREFRONT_AUTOSTART_PROMOTIONS`` (``0``/``false``/``no`` disable it).
        """
        env = os.environ if environ is None else environ
        defaults = PromotionSettings()

        promotions = PromotionSettings(
            flash_sale_rate=defaults.flash_sale_rate,
            flash_sale_max_delay=float(env.get("STOREFRONT_FLASH_SALE_MAX_DELAY", defaults.flash_sale_max_delay)),
            flash_sale_interval=float(env.get("STOREFRONT_FLASH_SALE_INTERVAL", defaults.flash_sale_interval)),
            suggested_sale_rate=defaults.suggested_sale_rate,
            suggested_sale_max_delay=float(
                env.get("STOREFRONT_SUGGESTED_SALE_MAX_DELAY", defaults.suggested_sale_max_delay)
            ),
            suggested_sale_interval=float(
                env.get("STOREFRONT_SUGGESTED_SALE_INTERVAL", defaults.suggested_sale_interval)
            ),
        )
        return cls(
            promotions=promotions,
            low_stock_threshold=int(env.get("STOREFRONT_LOW_STOCK_THRESHOLD", 5)),
            autostart_promotions=env.get("STOREFRONT_AUTOSTART_PROMOTIONS", "true").lower() not in FALSY,
        )
