from decimal import Decimal

import pytest

from dailygreens.checkout.cart import add_to_cart, delete_cart_line, read_cart
from dailygreens.checkout.fees import resolve_fees
from dailygreens.core.errors import InvalidReference
from dailygreens.db.models import Product, Size, Variant


def test_resolve_fees(db, shop):
    fees = resolve_fees(db, order_method_id=1, payment_method_id=1)
    assert fees.delivery_fee == Decimal("10.00")
    assert fees.admin_fee == Decimal("2.00")


def test_null_fee_is_free(db, shop):
    fees = resolve_fees(db, order_method_id=2, payment_method_id=2)
    assert fees.delivery_fee == 0
    assert fees.admin_fee == 0


def test_unknown_order_method(db, shop):
    with pytest.raises(InvalidReference) as exc:
        resolve_fees(db, order_method_id=99, payment_method_id=1)
    assert exc.value.field == "orderMethodId"
    assert exc.value.message == "Invalid order method id"


def test_unknown_payment_method(db, shop):
    with pytest.raises(InvalidReference) as exc:
        resolve_fees(db, order_method_id=1, payment_method_id=99)
    assert exc.value.field == "paymentMethodId"


def test_read_cart_snapshot(db, shop):
    lines = read_cart(db, shop["user_id"])
    assert [l.product_id for l in lines] == [1, 2]
    assert lines[0].product_name == "Green Tea"
    assert lines[0].subtotal == Decimal("100.00")
    assert lines[1].size_name == "Regular"
    assert lines[1].variant_name == "Hot"


def test_read_cart_empty_for_other_user(db, shop):
    assert read_cart(db, shop["admin_id"]) == []


@pytest.fixture
def discounted(db, shop):
    db.add_all([
        Product(id=3, name="Kale Smoothie", price=Decimal("40.00"), discount_percent=Decimal("10"), stock=3),
        Size(id=2, name="Large", size_cost=Decimal("5.00")),
        Variant(id=2, name="Ice", variant_cost=Decimal("2.00")),
    ])
    db.commit()


def test_add_to_cart_prices_line(db, discounted):
    line = add_to_cart(db, user_id=2, product_id=3, size_id=2, variant_id=2, amount=2)
    # (40 * 0.9 + 5 + 2) * 2
    assert line.subtotal == Decimal("86.00")
    assert line.discount_price == Decimal("36.00")


def test_add_to_cart_merges_same_configuration(db, discounted):
    add_to_cart(db, user_id=2, product_id=3, size_id=2, variant_id=2, amount=2)
    line = add_to_cart(db, user_id=2, product_id=3, size_id=2, variant_id=2, amount=1)
    assert line.amount == 3
    assert line.subtotal == Decimal("129.00")
    assert len(read_cart(db, 2)) == 1


def test_add_to_cart_rejects_more_than_stock(db, discounted):
    add_to_cart(db, user_id=2, product_id=3, size_id=2, variant_id=2, amount=3)
    with pytest.raises(ValueError, match="exceeds available stock"):
        add_to_cart(db, user_id=2, product_id=3, size_id=2, variant_id=2, amount=1)


def test_add_to_cart_rejects_non_positive_amount(db, discounted):
    with pytest.raises(ValueError):
        add_to_cart(db, user_id=2, product_id=3, size_id=2, variant_id=2, amount=0)


def test_add_to_cart_unknown_product(db, shop):
    with pytest.raises(LookupError):
        add_to_cart(db, user_id=2, product_id=404, size_id=1, variant_id=1, amount=1)


def test_delete_only_own_line(db, shop):
    line = read_cart(db, shop["user_id"])[0]
    assert not delete_cart_line(db, shop["admin_id"], line.cart_id)
    assert delete_cart_line(db, shop["user_id"], line.cart_id)
    assert len(read_cart(db, shop["user_id"])) == 1
