import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from datetime import datetime, timedelta, timezone
from retail.domain import Account, Item, ItemKind, Catalog
from retail.errors import InsufficientStockError
from retail.items import perishable, purchasable, regular, shippable, weight_of

NOW = datetime(2025, 6, 22, 12, 0, 0)


def test_regular_purchasable_up_to_stock():
    card = regular("card", "Scratch Card", 50, 3)
    assert purchasable(card, 3, NOW)
    assert not purchasable(card, 4, NOW)


def test_quantity_below_one_is_never_purchasable():
    card = regular("card", "Scratch Card", 50, 3)
    assert not purchasable(card, 0, NOW)
    assert not purchasable(card, -1, NOW)


def test_perishable_checks_expiry_at_call_time():
    cheese = perishable("cheese", "Cheese", 100, 10, NOW + timedelta(days=7))
    assert purchasable(cheese, 2, NOW)
    assert not purchasable(cheese, 2, NOW + timedelta(days=8))


def test_expired_perishable_never_purchasable():
    """Просроченный товар не покупается ни в каком количестве"""
    cheese = perishable("cheese", "Cheese", 100, 10, NOW - timedelta(seconds=1))
    assert all(not purchasable(cheese, q, NOW) for q in (0, 1, 5, 10, 11))


def test_perishable_without_now_uses_current_time():
    past = perishable("milk", "Milk", 10, 5, datetime.now() - timedelta(days=1))
    future = perishable("milk2", "Milk", 10, 5, datetime.now() + timedelta(days=1))
    assert not purchasable(past, 1)
    assert purchasable(future, 1)


def test_weight_only_for_shippable():
    biscuits = shippable("biscuits", "Biscuits", 150, 5, 0.7)
    card = regular("card", "Scratch Card", 50, 3)
    assert weight_of(biscuits).get_or_else(None) == 0.7
    assert weight_of(card).is_none()


@pytest.mark.parametrize("stock,qty,fails", [(5, 5, False), (5, 6, True), (0, 1, True)])
def test_reduce_stock_fails_iff_quantity_exceeds_stock(stock, qty, fails):
    card = regular("card", "Scratch Card", 50, stock)
    if fails:
        with pytest.raises(InsufficientStockError):
            card.reduce_stock(qty)
        assert card.stock == stock
    else:
        assert card.reduce_stock(qty).stock == stock - qty


def test_item_rejects_invalid_fields():
    with pytest.raises(ValueError):
        regular("x", "X", -1, 1)
    with pytest.raises(ValueError):
        regular("x", "X", 1, -1)
    with pytest.raises(ValueError):
        shippable("x", "X", 1, 1, -0.5)
    with pytest.raises(ValueError):
        Item(id="x", name="X", price=1, stock=1, kind=ItemKind.PERISHABLE)
    with pytest.raises(ValueError):
        Item(id="x", name="X", price=1, stock=1, weight=1.0)


def test_catalog_reduce_stock_returns_new_catalog():
    catalog = Catalog(items=(regular("a", "A", 1, 5), regular("b", "B", 2, 5)))
    updated = catalog.reduce_stock("b", 2)

    assert catalog.get("b").stock == 5
    assert updated.get("b").stock == 3
    assert updated.get("a") == catalog.get("a")


def test_catalog_rejects_duplicate_ids():
    with pytest.raises(ValueError):
        Catalog(items=(regular("a", "A", 1, 5), regular("a", "Other", 2, 5)))


def test_names_need_not_be_unique():
    catalog = Catalog(items=(regular("a", "Tea", 1, 5), regular("b", "Tea", 2, 5)))
    assert len(catalog) == 2
    assert "b" in catalog


@pytest.mark.parametrize("qty", [2.5, 1.0, True, "2"])
def test_non_integer_quantity_is_not_purchasable(qty):
    card = regular("card", "Scratch Card", 50, 100)
    assert not purchasable(card, qty, NOW)


def test_stock_must_be_integer():
    with pytest.raises(ValueError):
        regular("card", "Scratch Card", 50, 2.5)
    with pytest.raises(ValueError):
        regular("card", "Scratch Card", 50, True)


@pytest.mark.parametrize("qty", [0, -5, 1.5])
def test_reduce_stock_rejects_invalid_quantity(qty):
    card = regular("card", "Scratch Card", 50, 3)
    with pytest.raises(ValueError):
        card.reduce_stock(qty)
    assert card.stock == 3


def test_aware_expiry_and_now_compare_with_local_time():
    expiry = datetime(2025, 6, 22, 12, 0, 0, tzinfo=timezone.utc)
    cheese = perishable("cheese", "Cheese", 100, 10, expiry)

    assert cheese.expiry.tzinfo is None
    assert purchasable(cheese, 1, expiry - timedelta(minutes=1))
    assert not purchasable(cheese, 1, expiry + timedelta(minutes=1))


def test_account_rejects_negative_balance():
    assert Account(0).balance == 0
    with pytest.raises(ValueError):
        Account(-0.01)
