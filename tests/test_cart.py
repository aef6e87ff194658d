import math

import pytest

from cartledger import (
    Cart,
    CartError,
    InsufficientQuantity,
    InvalidPrice,
    InvalidQuantity,
    InvalidReference,
    PriceNotFound,
    ReferenceNotFound,
)


def test_initially_empty() -> None:
    cart = Cart()

    assert cart.get_total_amount() == 0
    assert cart.get_references() == []
    assert cart.is_empty
    assert len(cart) == 0
    with pytest.raises(ReferenceNotFound, match="Reference not found"):
        cart.get_unit_prices("A")
    with pytest.raises(ReferenceNotFound, match="Reference not found"):
        cart.get_quantity("A")
    with pytest.raises(ReferenceNotFound, match="Reference not found"):
        cart.get_amount("A", 10)


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def test_add_new_reference() -> None:
    cart = Cart()
    cart.add("A", 10, 2)

    assert cart.get_references() == ["A"]
    assert cart.get_unit_prices("A") == [10]
    assert cart.get_quantity("A") == 2
    assert cart.get_quantity("A", 10) == 2
    assert cart.get_amount("A", 10) == 20
    assert cart.get_total_amount() == 20


def test_add_same_price_merges_quantities() -> None:
    cart = Cart()
    cart.add("A", 10, 2)
    cart.add("A", 10, 3)

    assert cart.get_unit_prices("A") == [10]
    assert cart.get_quantity("A", 10) == 5
    assert cart.get_total_amount() == 50


def test_int_and_float_prices_share_an_entry() -> None:
    cart = Cart()
    cart.add("A", 10, 1)
    cart.add("A", 10.0, 1)

    assert cart.get_unit_prices("A") == [10]
    assert cart.get_quantity("A", 10.0) == 2


def test_multiple_prices_sorted_ascending() -> None:
    cart = Cart()
    cart.add("A", 12, 1)
    cart.add("A", 10, 2)
    cart.add("A", 11.5, 1)

    assert cart.get_unit_prices("A") == [10, 11.5, 12]
    assert cart.get_quantity("A") == 4
    assert cart.get_amount("A", 12) == 12
    assert cart.get_total_amount() == 43.5


def test_reference_is_trimmed() -> None:
    cart = Cart()
    cart.add("  A  ", 10, 1)

    assert cart.get_references() == ["A"]
    assert cart.get_quantity(" A") == 1


def test_references_sorted_alphabetically() -> None:
    cart = Cart()
    cart.add("B", 5, 1)
    cart.add("C", 5, 1)
    cart.add("A", 5, 1)

    assert cart.get_references() == ["A", "B", "C"]
    assert len(cart) == 3


@pytest.mark.parametrize("reference", ["", "   ", "\t\n"])
def test_add_rejects_empty_reference(reference: str) -> None:
    cart = Cart()
    with pytest.raises(InvalidReference, match="Reference must be a non-empty string"):
        cart.add(reference, 10, 1)
    assert cart.is_empty


@pytest.mark.parametrize("price", [0, -1, math.nan, math.inf, 10**400, True, "10"])
def test_add_rejects_invalid_price(price: object) -> None:
    cart = Cart()
    with pytest.raises(InvalidPrice, match="Price must be a positive number"):
        cart.add("A", price, 1)  # type: ignore[arg-type]
    assert cart.is_empty


@pytest.mark.parametrize("quantity", [0, -2, 1.5, True])
def test_add_rejects_invalid_quantity(quantity: object) -> None:
    cart = Cart()
    with pytest.raises(InvalidQuantity, match="Quantity must be a positive integer"):
        cart.add("A", 10, quantity)  # type: ignore[arg-type]
    assert cart.is_empty


def test_errors_share_a_base_class() -> None:
    cart = Cart()
    with pytest.raises(CartError):
        cart.add("A", 10, 0)
    with pytest.raises(LookupError):
        cart.get_quantity("missing")
    with pytest.raises(ValueError):
        cart.add("", 10, 1)


# ---------------------------------------------------------------------------
# remove
# ---------------------------------------------------------------------------


def test_remove_from_single_price() -> None:
    cart = Cart()
    cart.add("A", 10, 5)
    cart.remove("A", 2)

    assert cart.get_quantity("A", 10) == 3
    assert cart.get_total_amount() == 30


def test_remove_drains_most_expensive_first() -> None:
    cart = Cart()
    cart.add("A", 10, 2)
    cart.add("A", 12, 3)
    cart.remove("A", 4)

    assert cart.get_unit_prices("A") == [10]
    assert cart.get_quantity("A", 10) == 1
    assert cart.get_total_amount() == 10
    with pytest.raises(PriceNotFound, match="Price not found"):
        cart.get_quantity("A", 12)


def test_remove_keeps_remainder_of_partially_drained_price() -> None:
    cart = Cart()
    cart.add("A", 10, 5)
    cart.add("A", 12, 5)
    cart.remove("A", 3)

    assert cart.get_quantity("A", 12) == 2
    assert cart.get_quantity("A", 10) == 5
    assert cart.get_total_amount() == 12 * 2 + 10 * 5


def test_remove_across_three_prices() -> None:
    cart = Cart()
    cart.add("A", 5, 2)
    cart.add("A", 7, 1)
    cart.add("A", 9, 1)
    cart.remove("A", 3)

    assert cart.get_unit_prices("A") == [5]
    assert cart.get_quantity("A") == 1


def test_remove_last_units_drops_reference() -> None:
    cart = Cart()
    cart.add("A", 10, 2)
    cart.add("B", 3, 1)
    cart.remove("A", 2)

    assert cart.get_references() == ["B"]
    with pytest.raises(ReferenceNotFound, match="Reference not found"):
        cart.get_quantity("A")
    with pytest.raises(ReferenceNotFound):
        cart.get_unit_prices("A")


def test_remove_unknown_reference() -> None:
    cart = Cart()
    with pytest.raises(ReferenceNotFound, match="Reference not found"):
        cart.remove("A", 1)


@pytest.mark.parametrize("quantity", [0, -1, 1.2])
def test_remove_rejects_invalid_quantity(quantity: object) -> None:
    cart = Cart()
    cart.add("A", 10, 1)
    with pytest.raises(InvalidQuantity, match="Quantity must be a positive integer"):
        cart.remove("A", quantity)  # type: ignore[arg-type]
    assert cart.get_quantity("A") == 1


def test_remove_more_than_available_leaves_cart_unchanged() -> None:
    cart = Cart()
    cart.add("A", 10, 2)
    cart.add("A", 12, 1)

    with pytest.raises(InsufficientQuantity, match="Insufficient quantity"):
        cart.remove("A", 4)

    assert cart.get_quantity("A") == 3
    assert cart.get_quantity("A", 10) == 2
    assert cart.get_quantity("A", 12) == 1


# ---------------------------------------------------------------------------
# accessors
# ---------------------------------------------------------------------------


def test_get_quantity_unknown_price() -> None:
    cart = Cart()
    cart.add("A", 10, 1)
    with pytest.raises(PriceNotFound, match="Price not found"):
        cart.get_quantity("A", 999)


@pytest.mark.parametrize("price", [0, -5, math.nan])
def test_get_amount_rejects_invalid_price(price: float) -> None:
    cart = Cart()
    cart.add("A", 10, 1)
    with pytest.raises(InvalidPrice, match="Price must be a positive number"):
        cart.get_amount("A", price)


def test_reference_checked_before_price() -> None:
    cart = Cart()
    with pytest.raises(ReferenceNotFound):
        cart.get_amount("A", -1)
    with pytest.raises(ReferenceNotFound):
        cart.get_quantity("A", math.nan)


def test_subtotal_ignores_promotions() -> None:
    cart = Cart()
    cart.register_promotion("PROMO10", "A", 10)
    cart.add("A", 50, 2)
    cart.add("B", 5, 3)
    cart.activate_promotion("PROMO10")

    assert cart.get_subtotal() == 115
    assert cart.get_total_amount() == 105


def test_price_too_large_for_float_is_invalid() -> None:
    cart = Cart()
    cart.add("A", 10, 1)
    with pytest.raises(InvalidPrice, match="Price must be a positive number"):
        cart.get_amount("A", 10**400)
    with pytest.raises(InvalidPrice):
        cart.register_promotion("PROMO", "B", 10, 10**400)
