"""Tests for the discount engine."""

import pytest
from storefront.config import DiscountPolicy
from storefront.pricing.discounts import (
    BULK,
    INDIVIDUAL,
    NONE,
    PricedLine,
    bulk_discount_rate,
    individual_discount_rate,
    line_discount,
    summarize_discounts,
    tuesday_discount,
)


def _line(product_id="p1", quantity=1, unit_price=10000, name=None):
    return PricedLine(product_id=product_id, name=name or product_id, unit_price=unit_price, quantity=quantity)


class TestIndividualRate:
    @pytest.mark.parametrize(
        "product_id, rate",
        [("p1", 0.10), ("p2", 0.15), ("p3", 0.20), ("p4", 0.05), ("p5", 0.25)],
    )
    def test_rate_table_at_ten_units(self, product_id, rate):
        assert individual_discount_rate(product_id, 10) == rate

    def test_nine_units_earn_nothing(self):
        assert individual_discount_rate("p5", 9) == 0.0

    def test_unknown_product_earns_nothing(self):
        assert individual_discount_rate("p99", 50) == 0.0


class TestBulkRate:
    def test_thirty_units_unlock_bulk(self):
        assert bulk_discount_rate(30) == 0.25

    def test_twenty_nine_units_do_not(self):
        assert bulk_discount_rate(29) == 0.0


class TestLineDiscount:
    def test_individual_line(self):
        result = line_discount(_line("p1", 10), total_quantity=10)
        assert result.kind == INDIVIDUAL
        assert result.rate == 0.10
        assert result.amount == 10000

    def test_bulk_replaces_individual_rate(self):
        result = line_discount(_line("p3", 20, unit_price=30000), total_quantity=30)
        assert result.kind == BULK
        assert result.rate == 0.25

    def test_bulk_replaces_even_a_higher_individual_rate(self):
        policy = DiscountPolicy(individual_rates={"p5": 0.40})
        result = line_discount(_line("p5", 30, unit_price=25000), total_quantity=30, policy=policy)
        assert result.kind == BULK
        assert result.rate == 0.25

    def test_no_discount(self):
        result = line_discount(_line("p1", 2), total_quantity=2)
        assert result.kind == NONE
        assert result.amount == 0


class TestTuesdayDiscount:
    def test_tuesday_takes_ten_percent(self):
        assert tuesday_discount(90000, is_tuesday=True) == 9000

    def test_other_days_take_nothing(self):
        assert tuesday_discount(90000, is_tuesday=False) == 0

    def test_zero_total_takes_nothing(self):
        assert tuesday_discount(0, is_tuesday=True) == 0


class TestSummarizeDiscounts:
    def test_keyboard_individual_discount(self):
        summary = summarize_discounts([_line("p1", 10, 10000, "Bug-Free Keyboard")], is_tuesday=False)

        assert summary.subtotal == 100000
        assert summary.final_total == 90000
        assert summary.total_discount == 10000
        assert [(d.name, d.rate_percent) for d in summary.per_line_discounts] == [("Bug-Free Keyboard", 10)]
        assert summary.has_bulk_discount is False

    def test_speaker_individual_discount(self):
        summary = summarize_discounts([_line("p5", 10, 25000)], is_tuesday=False)

        assert summary.subtotal == 250000
        assert summary.final_total == 187500

    def test_bulk_override_discards_individual_discounts(self):
        lines = [_line("p1", 15, 10000), _line("p2", 15, 20000)]
        summary = summarize_discounts(lines, is_tuesday=False)

        assert summary.subtotal == 450000
        assert summary.final_total == 337500
        assert summary.has_bulk_discount is True
        assert summary.per_line_discounts == ()
        assert all(result.kind == BULK for result in summary.line_results)

    def test_tuesday_stacks_on_individual_discount(self):
        summary = summarize_discounts([_line("p1", 10, 10000)], is_tuesday=True)

        assert summary.final_total == 81000
        assert summary.tuesday_discount == 9000
        assert summary.total_discount == 19000
        assert summary.is_tuesday is True

    def test_tuesday_stacks_on_bulk_discount(self):
        summary = summarize_discounts([_line("p1", 30, 10000)], is_tuesday=True)

        assert summary.final_total == 202500

    def test_empty_cart_degrades_to_zero(self):
        summary = summarize_discounts([], is_tuesday=True)

        assert summary.subtotal == 0
        assert summary.final_total == 0
        assert summary.total_discount == 0
        assert summary.tuesday_discount == 0
        assert summary.discount_rate == 0.0
        assert summary.total_quantity == 0

    def test_discount_rate(self):
        summary = summarize_discounts([_line("p5", 10, 25000)], is_tuesday=False)
        assert summary.discount_rate == 0.25
        assert summary.savings == 62500

    def test_policy_is_configurable(self):
        policy = DiscountPolicy(individual_threshold=5, bulk_threshold=100)
        summary = summarize_discounts([_line("p1", 5, 10000)], is_tuesday=False, policy=policy)
        assert summary.final_total == 45000
