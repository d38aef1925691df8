import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from retail.async_ops import checkout_async, checkout_many_async, run_checkouts
from retail.domain import Account, Cart, CartLine, Catalog
from retail.errors import InsufficientFundsError, ItemUnavailableError
from retail.items import regular, shippable
from retail.service import ShopService


@pytest.fixture
def shop():
    return ShopService(
        Catalog(
            items=(
                shippable("biscuits", "Biscuits", 150, 5, 0.7),
                regular("card", "ScratchCard", 50, 100),
            )
        )
    )


def biscuits(qty):
    return Cart(lines=(CartLine("biscuits", qty),))


@pytest.mark.asyncio
async def test_checkout_async_success(shop):
    result = await checkout_async(shop, biscuits(1), Account(1000))

    assert result.is_right
    assert result.value.receipt.total == 160
    assert shop.catalog.get("biscuits").stock == 4


@pytest.mark.asyncio
async def test_checkout_async_failure_is_left(shop):
    result = await checkout_async(shop, biscuits(1), Account(10))

    assert result.is_left
    assert isinstance(result.value, InsufficientFundsError)


@pytest.mark.asyncio
async def test_competing_shoppers_never_oversell(shop):
    """Две корзины по 3 шт при остатке 5: проходит ровно одна"""
    sessions = [(biscuits(3), Account(1000)), (biscuits(3), Account(1000))]

    results = await checkout_many_async(shop, sessions)

    assert sum(r.is_right for r in results) == 1
    failed = next(r for r in results if r.is_left)
    assert isinstance(failed.value, ItemUnavailableError)
    assert shop.catalog.get("biscuits").stock == 2


def test_run_checkouts_sync(shop):
    sessions = [
        (Cart(lines=(CartLine("card", 10),)), Account(1000)),
        (Cart(lines=(CartLine("card", 20),)), Account(1000)),
    ]
    results = run_checkouts(shop, sessions)

    assert all(r.is_right for r in results)
    assert shop.catalog.get("card").stock == 70
    assert shop.events_state["revenue"] == 1500
