from datetime import datetime
from typing import Optional

from .domain import Item, ItemKind, is_whole_count, local_naive
from .ftypes import Maybe


# ============ Конструкторы вариантов ============


def regular(item_id: str, name: str, price: float, stock: int) -> Item:
    return Item(id=item_id, name=name, price=price, stock=stock)


def perishable(
    item_id: str, name: str, price: float, stock: int, expiry: datetime
) -> Item:
    return Item(
        id=item_id,
        name=name,
        price=price,
        stock=stock,
        kind=ItemKind.PERISHABLE,
        expiry=expiry,
    )


def shippable(item_id: str, name: str, price: float, stock: int, weight: float) -> Item:
    return Item(
        id=item_id,
        name=name,
        price=price,
        stock=stock,
        kind=ItemKind.SHIPPABLE,
        weight=weight,
    )


# ============ Проверка доступности ============


def purchasable(item: Item, quantity: int, now: Optional[datetime] = None) -> bool:
    """
    Можно ли купить quantity штук прямо сейчас.
    Срок годности проверяется в момент вызова, результат не кэшируется.
    """
    if not is_whole_count(quantity) or quantity < 1 or quantity > item.stock:
        return False

    if item.kind is ItemKind.PERISHABLE:
        current = local_naive(now) if now is not None else datetime.now()
        return item.expiry > current
    if item.kind in (ItemKind.REGULAR, ItemKind.SHIPPABLE):
        return True
    raise ValueError(f"Unknown item kind: {item.kind}")


def is_shippable(item: Item) -> bool:
    return item.kind is ItemKind.SHIPPABLE


def weight_of(item: Item) -> Maybe[float]:
    """Вес есть только у доставляемых товаров"""
    return Maybe.some(item.weight) if is_shippable(item) else Maybe.nothing()
