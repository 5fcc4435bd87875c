"""Tests for business-rule settings."""

from storefront.config import DiscountPolicy, LoyaltyPolicy, PromotionSettings, StorefrontSettings


class TestDefaults:
    def test_discount_policy(self):
        policy = DiscountPolicy()
        assert policy.individual_rates == {"p1": 0.10, "p2": 0.15, "p3": 0.20, "p4": 0.05, "p5": 0.25}
        assert policy.individual_threshold == 10
        assert policy.bulk_threshold == 30
        assert policy.bulk_rate == 0.25
        assert policy.tuesday_rate == 0.10

    def test_loyalty_policy(self):
        policy = LoyaltyPolicy()
        assert [(t.threshold, t.bonus) for t in policy.quantity_tiers] == [(10, 20), (20, 50), (30, 100)]

    def test_promotion_settings(self):
        settings = PromotionSettings()
        assert (settings.flash_sale_rate, settings.flash_sale_max_delay, settings.flash_sale_interval) == (
            0.20,
            10.0,
            30.0,
        )
        assert (
            settings.suggested_sale_rate,
            settings.suggested_sale_max_delay,
            settings.suggested_sale_interval,
        ) == (0.05, 20.0, 60.0)


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        settings = StorefrontSettings.from_env({})
        assert settings == StorefrontSettings()

    def test_overrides(self):
        settings = StorefrontSettings.from_env(
            {
                "STOREFRONT_FLASH_SALE_INTERVAL": "5",
                "STOREFRONT_SUGGESTED_SALE_MAX_DELAY": "1.5",
                "STOREFRONT_LOW_STOCK_THRESHOLD": "3",
                "STOREFRONT_AUTOSTART_PROMOTIONS": "false",
            }
        )
        assert settings.promotions.flash_sale_interval == 5.0
        assert settings.promotions.suggested_sale_max_delay == 1.5
        assert settings.low_stock_threshold == 3
        assert settings.autostart_promotions is False
