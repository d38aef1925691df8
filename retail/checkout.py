"""
Оформление заказа: все проверки до любых изменений.

Этапы: VALIDATING -> PRICING -> SETTLING -> RECEIPTED.
Ошибка валидации или оплаты возвращается как Left и ничего не меняет.
Каталог и счёт неизменяемые: settle собирает новые значения, и если
на этом шаге что-то падает, старое состояние остаётся как было.
"""

import logging
from datetime import datetime
from enum import Enum
from functools import reduce
from typing import Optional

from .domain import (
    Account,
    Cart,
    Catalog,
    CheckoutResult,
    Pricing,
    Receipt,
    ReceiptLine,
)
from .errors import (
    CheckoutError,
    EmptyCartError,
    InsufficientFundsError,
    InsufficientStockError,
    ItemUnavailableError,
    UnknownItemError,
)
from .ftypes import Either
from .lazy import iter_resolved_lines, iter_unavailable_lines
from .shipping import build_manifest
from .transforms import line_total, shippables, subtotal

logger = logging.getLogger("checkout")

# за каждую доставляемую строку, независимо от веса и количества
FLAT_RATE = 10


class CheckoutStage(Enum):
    VALIDATING = "validating"
    PRICING = "pricing"
    SETTLING = "settling"
    RECEIPTED = "receipted"


def validate_cart(
    cart: Cart, catalog: Catalog, now: Optional[datetime] = None
) -> Either[CheckoutError, Cart]:
    """Пустая корзина или первая недоступная строка -> Left"""
    if cart.is_empty():
        return Either.left(EmptyCartError())

    failed = next(iter_unavailable_lines(cart, catalog, now), None)
    if failed is not None:
        line, item = failed
        if item is None:
            return Either.left(UnknownItemError(line.item_id))
        return Either.left(ItemUnavailableError(item.name))

    return Either.right(cart)


def price_cart(cart: Cart, catalog: Catalog) -> Pricing:
    logger.debug("Checkout stage: %s", CheckoutStage.PRICING.value)
    sub = subtotal(cart, catalog)
    fee = len(shippables(cart, catalog)) * FLAT_RATE
    return Pricing(subtotal=sub, shipping_fee=fee, total=sub + fee)


def check_balance(pricing: Pricing, account: Account) -> Either[CheckoutError, Pricing]:
    if pricing.total > account.balance:
        return Either.left(InsufficientFundsError(pricing.total, account.balance))
    return Either.right(pricing)


def settle(
    cart: Cart, catalog: Catalog, account: Account, pricing: Pricing
) -> CheckoutResult:
    """
    Списание остатков и денег. Вызывается только после всех проверок.
    InsufficientStockError здесь означает, что валидация и списание разошлись:
    ошибка пробрасывается, новое состояние не возвращается.
    """
    logger.debug("Checkout stage: %s", CheckoutStage.SETTLING.value)
    manifest = build_manifest(shippables(cart, catalog))
    if manifest.is_some():
        logger.info(
            "Shipping manifest: %s (total %.1fkg)",
            ", ".join(f"{e.name} {e.weight:.1f}kg" for e in manifest.value.entries),
            manifest.value.total_weight,
        )

    try:
        new_catalog = reduce(
            lambda cat, line: cat.reduce_stock(line.item_id, line.quantity),
            cart.lines,
            catalog,
        )
    except InsufficientStockError as exc:
        logger.critical("Settlement diverged from validation: %s", exc)
        raise

    new_account = account.deduct(pricing.total)

    receipt = Receipt(
        lines=tuple(
            ReceiptLine(
                quantity=line.quantity,
                name=item.name,
                line_total=line_total(item, line),
            )
            for line, item in iter_resolved_lines(cart, catalog)
        ),
        subtotal=pricing.subtotal,
        shipping_fee=pricing.shipping_fee,
        total=pricing.total,
        remaining=new_account.balance,
    )

    return CheckoutResult(
        catalog=new_catalog,
        account=new_account,
        receipt=receipt,
        manifest=manifest.get_or_else(None),
    )


def checkout(
    cart: Cart,
    catalog: Catalog,
    account: Account,
    now: Optional[datetime] = None,
) -> Either[CheckoutError, CheckoutResult]:
    """
    Оформляет корзину -> Either[CheckoutError, CheckoutResult]
    Left: EmptyCartError / ItemUnavailableError / InsufficientFundsError
    Right: новый каталог, новый счёт, чек и манифест
    """
    logger.debug("Checkout stage: %s", CheckoutStage.VALIDATING.value)
    result = (
        validate_cart(cart, catalog, now)
        .map(lambda c: price_cart(c, catalog))
        .bind(lambda pricing: check_balance(pricing, account))
        .map(lambda pricing: settle(cart, catalog, account, pricing))
    )

    if result.is_left:
        logger.warning("Checkout rejected: %s", result.value)
    else:
        logger.info(
            "Checkout %s: total %.2f, remaining %.2f",
            CheckoutStage.RECEIPTED.value,
            result.value.receipt.total,
            result.value.account.balance,
        )
    return result
