"""Shared BDD fixtures and step definitions for the cart reducer."""

import pytest
from ordering.cart.cart import StoredCart, StoredCartItem
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def cart():
    """Holds the cart under test and the state it started from."""
    return {"state": None, "initial": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart")
def empty_cart(cart):
    cart["state"] = cart["initial"] = StoredCart(id="cart-1")


@given(parsers.cfparse('a USD cart holding "{variant_id}" x {quantity:d}'))
def usd_cart(cart, variant_id, quantity):
    cart["state"] = cart["initial"] = StoredCart(
        id="cart-1", currency="USD", items=(StoredCartItem(variant_id, quantity),)
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart holds "{variant_id}" x {quantity:d}'))
def cart_holds(cart, variant_id, quantity):
    assert {i.variant_id: i.quantity for i in cart["state"].items}[variant_id] == quantity


@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_lines(cart, count):
    assert len(cart["state"].items) == count


@then(parsers.cfparse('the cart lines are "{variant_ids}"'))
def cart_lines_are(cart, variant_ids):
    assert [i.variant_id for i in cart["state"].items] == variant_ids.split(",")


@then(parsers.cfparse('the cart currency is "{currency}"'))
def cart_currency_is(cart, currency):
    assert cart["state"].currency == currency


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart["state"].items == ()


@then("the cart is unchanged")
def cart_is_unchanged(cart):
    assert cart["state"] == cart["initial"]


@then("there is no cart")
def no_cart(cart):
    assert cart["state"] is None


@then(parsers.cfparse('the action is rejected as "{reason}"'))
def action_rejected(error, reason):
    assert isinstance(error["exc"], ValidationError)
    assert error["exc"].reason.value == reason
