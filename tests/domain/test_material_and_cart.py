"""Unit tests for the Material and Cart aggregates."""

import pytest

from matpay.domain.exceptions import ValidationError
from matpay.domain.model.cart import Cart
from matpay.domain.model.material import Material
from matpay.domain.model.value_objects import Money


def _material(stock: int = 5) -> Material:
    return Material(id="M1", seller_id="s", name="Atlas", price=Money.of("10"),
                    stock_quantity=stock)


class TestMaterialStock:

    def test_withdraw_within_stock(self):
        m = _material(5)
        assert m.withdraw(3) == 3
        assert m.stock_quantity == 2

    def test_withdraw_is_floored_at_zero(self):
        m = _material(2)
        assert m.withdraw(5) == 2
        assert m.stock_quantity == 0

    def test_restock(self):
        m = _material(0)
        m.restock(4)
        assert m.stock_quantity == 4

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantities_rejected(self, qty):
        with pytest.raises(ValidationError):
            _material().withdraw(qty)
        with pytest.raises(ValidationError):
            _material().restock(qty)

    def test_price_must_stay_positive(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            _material().update_price(Money.zero())


class TestCart:

    def test_repeated_adds_accumulate(self):
        cart = Cart("b", "s")
        cart.add("M1", 2)
        cart.add("M1", 3)
        assert cart.quantity_of("M1") == 5
        assert len(cart.items) == 1

    def test_add_zero_rejected(self):
        with pytest.raises(ValidationError, match="at least 1"):
            Cart("b", "s").add("M1", 0)

    def test_remove_missing_rejected(self):
        with pytest.raises(ValidationError, match="not in the cart"):
            Cart("b", "s").remove("M1")

    def test_clear(self):
        cart = Cart("b", "s")
        cart.add("M1", 1)
        cart.clear()
        assert cart.is_empty
