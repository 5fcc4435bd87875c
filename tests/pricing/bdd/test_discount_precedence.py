"""BDD tests for discount precedence."""

import pytest
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.pricing.discounts import PricedLine, summarize_discounts

scenarios("features/discount_precedence.feature")


@pytest.fixture()
def cart():
    return {"lines": [], "is_tuesday": False, "summary": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart")
def empty_cart(cart):
    cart["lines"] = []


@given(parsers.cfparse("a cart with {quantity:d} units of {product_id} at {price:d}"))
def cart_line(cart, quantity, product_id, price):
    cart["lines"].append(PricedLine(product_id=product_id, name=product_id, unit_price=price, quantity=quantity))


@given("today is Tuesday")
def on_tuesday(cart):
    cart["is_tuesday"] = True


@given("today is not Tuesday")
def not_tuesday(cart):
    cart["is_tuesday"] = False


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the discounts are resolved")
def resolve(cart):
    cart["summary"] = summarize_discounts(cart["lines"], cart["is_tuesday"])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the subtotal is {amount:d}"))
def subtotal_is(cart, amount):
    assert cart["summary"].subtotal == amount


@then(parsers.cfparse("the final total is {amount:d}"))
def final_total_is(cart, amount):
    assert cart["summary"].final_total == amount


@then(parsers.cfparse('the line discounts are "{expected}"'))
def line_discounts_are(cart, expected):
    rendered = ", ".join(f"{d.name} {d.rate_percent}%" for d in cart["summary"].per_line_discounts)
    assert rendered == expected


@then("there are no line discounts")
def no_line_discounts(cart):
    assert cart["summary"].per_line_discounts == ()


@then("the bulk discount applies")
def bulk_applies(cart):
    assert cart["summary"].has_bulk_discount is True


@then(parsers.cfparse("the discount rate is {rate:d}"))
def discount_rate_is(cart, rate):
    assert cart["summary"].discount_rate == rate
