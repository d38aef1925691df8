import asyncio
from typing import List, Tuple

from .domain import Account, Cart, CheckoutResult
from .errors import CheckoutError
from .ftypes import Either
from .service import ShopService


# ============ Несколько покупателей одновременно ============


async def checkout_async(
    shop: ShopService, cart: Cart, account: Account
) -> Either[CheckoutError, CheckoutResult]:
    """
    Оформление в отдельном потоке.
    Обычные ошибки оформления -> Left, InsufficientStockError пробрасывается.
    """
    try:
        result = await asyncio.to_thread(shop.checkout, cart, account)
    except CheckoutError as exc:
        return Either.left(exc)
    return Either.right(result)


async def checkout_many_async(
    shop: ShopService, sessions: List[Tuple[Cart, Account]]
) -> List[Either[CheckoutError, CheckoutResult]]:
    """
    Запускает все сессии параллельно, результаты в порядке sessions.
    Атомарность каждой покупки держит блокировка ShopService.
    """
    tasks = [checkout_async(shop, cart, account) for cart, account in sessions]
    return list(await asyncio.gather(*tasks))


def run_checkouts(
    shop: ShopService, sessions: List[Tuple[Cart, Account]]
) -> List[Either[CheckoutError, CheckoutResult]]:
    """Синхронная обёртка"""
    return asyncio.run(checkout_many_async(shop, sessions))
