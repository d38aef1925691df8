import json
import logging
from datetime import datetime, timedelta
from functools import reduce
from typing import Callable, Optional, Tuple

from .domain import Account, Cart, CartLine, Catalog, Item, ItemKind
from .errors import ItemUnavailableError, UnknownItemError
from .ftypes import Either
from .items import perishable, purchasable, regular, shippable
from .lazy import iter_resolved_lines, iter_shippable_items

logger = logging.getLogger("shop")


def _to_item(raw: dict, now: datetime) -> Item:
    kind = ItemKind(raw.get("kind", "regular"))
    base = (str(raw["id"]), str(raw["name"]), float(raw["price"]), int(raw["stock"]))

    if kind is ItemKind.PERISHABLE:
        if "expiry" in raw:
            expiry = datetime.fromisoformat(raw["expiry"])
        else:
            expiry = now + timedelta(days=float(raw["expires_in_days"]))
        return perishable(*base, expiry=expiry)
    if kind is ItemKind.SHIPPABLE:
        return shippable(*base, weight=float(raw["weight"]))
    return regular(*base)


def load_seed(path: str, now: Optional[datetime] = None) -> Tuple[Catalog, Account]:
    """
    Загружает seed.json: каталог товаров и стартовый баланс покупателя.
    Относительный срок годности (expires_in_days) отсчитывается от now.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    current = now if now is not None else datetime.now()
    items = tuple(map(lambda raw: _to_item(raw, current), data.get("items", [])))
    account = Account(balance=float(data.get("account", {}).get("balance", 0)))
    return Catalog(items=items), account


# ============ Корзина (чистые функции) ============


def add_to_cart(
    cart: Cart,
    catalog: Catalog,
    item_id: str,
    qty: int,
    now: Optional[datetime] = None,
) -> Either[ItemUnavailableError, Cart]:
    """
    Возвращает новую корзину с добавленной строкой.
    Остаток не резервируется: каждая проверка независима.
    """
    item = catalog.get(item_id)
    if item is None:
        return Either.left(UnknownItemError(item_id))
    if not purchasable(item, qty, now):
        logger.warning("Rejected add to cart: %s x%s", item.name, qty)
        return Either.left(ItemUnavailableError(item.name))

    return Either.right(Cart(lines=cart.lines + (CartLine(item_id, qty),)))


def line_total(item: Item, line: CartLine) -> float:
    return item.price * line.quantity


def subtotal(cart: Cart, catalog: Catalog) -> float:
    """Сумма строк через reduce"""
    return reduce(
        lambda acc, pair: acc + line_total(pair[1], pair[0]),
        (pair for pair in iter_resolved_lines(cart, catalog) if pair[1] is not None),
        0,
    )


def shippables(cart: Cart, catalog: Catalog) -> Tuple[Item, ...]:
    return tuple(iter_shippable_items(cart, catalog))


# ============ Фильтры каталога (замыкания) ============


def by_kind(kind: ItemKind) -> Callable[[Item], bool]:
    return lambda item: item.kind is kind


def in_stock() -> Callable[[Item], bool]:
    return lambda item: item.stock > 0


def price_at_most(limit: float) -> Callable[[Item], bool]:
    return lambda item: item.price <= limit
