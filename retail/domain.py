from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import InsufficientFundsError, InsufficientStockError


class ItemKind(Enum):
    REGULAR = "regular"
    PERISHABLE = "perishable"
    SHIPPABLE = "shippable"


def is_whole_count(value) -> bool:
    """Количество и остаток - только int (bool не считается)"""
    return isinstance(value, int) and not isinstance(value, bool)


def local_naive(moment: datetime) -> datetime:
    """Время с часовым поясом -> локальное без пояса, чтобы сравнивать с datetime.now()"""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


@dataclass(frozen=True)
class Item:
    """
    Товар каталога. Вариант задаётся тегом kind:
    у PERISHABLE есть expiry, у SHIPPABLE есть weight, у остальных этих полей нет.
    """

    id: str
    name: str
    price: float
    stock: int
    kind: ItemKind = ItemKind.REGULAR
    expiry: Optional[datetime] = None
    weight: Optional[float] = None

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Negative price for {self.name}")
        if not is_whole_count(self.stock):
            raise ValueError(f"Stock must be an integer for {self.name}")
        if self.stock < 0:
            raise ValueError(f"Negative stock for {self.name}")
        if (self.kind is ItemKind.PERISHABLE) != (self.expiry is not None):
            raise ValueError(f"expiry is required only for perishable items ({self.name})")
        if (self.kind is ItemKind.SHIPPABLE) != (self.weight is not None):
            raise ValueError(f"weight is required only for shippable items ({self.name})")
        if self.weight is not None and self.weight < 0:
            raise ValueError(f"Negative weight for {self.name}")
        if self.expiry is not None:
            object.__setattr__(self, "expiry", local_naive(self.expiry))

    def reduce_stock(self, quantity: int) -> "Item":
        """Единственный способ уменьшить остаток"""
        if not is_whole_count(quantity) or quantity < 1:
            raise ValueError(f"Invalid quantity for {self.name}: {quantity!r}")
        if quantity > self.stock:
            raise InsufficientStockError(self.name, quantity, self.stock)
        return replace(self, stock=self.stock - quantity)


@dataclass(frozen=True)
class CartLine:
    item_id: str
    quantity: int


@dataclass(frozen=True)
class Cart:
    # одинаковые товары не склеиваются: каждое добавление — отдельная строка
    lines: Tuple[CartLine, ...] = ()

    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class Account:
    balance: float

    def __post_init__(self):
        if self.balance < 0:
            raise ValueError(f"Negative balance: {self.balance}")

    def deduct(self, amount: float) -> "Account":
        if amount > self.balance:
            raise InsufficientFundsError(amount, self.balance)
        return Account(balance=self.balance - amount)


@dataclass(frozen=True)
class Catalog:
    """Владелец товаров и их остатков. Ключ — id товара."""

    items: Tuple[Item, ...] = ()
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index = {}
        for pos, item in enumerate(self.items):
            if item.id in index:
                raise ValueError(f"Duplicate item id: {item.id}")
            index[item.id] = pos
        object.__setattr__(self, "_index", index)

    def get(self, item_id: str) -> Optional[Item]:
        pos = self._index.get(item_id)
        return self.items[pos] if pos is not None else None

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._index

    def __len__(self) -> int:
        return len(self.items)

    def reduce_stock(self, item_id: str, quantity: int) -> "Catalog":
        """Возвращает новый каталог с уменьшенным остатком одного товара"""
        pos = self._index[item_id]
        updated = self.items[pos].reduce_stock(quantity)
        return Catalog(items=self.items[:pos] + (updated,) + self.items[pos + 1 :])


# ============ Результаты оформления ============


@dataclass(frozen=True)
class ManifestEntry:
    name: str
    weight: float


@dataclass(frozen=True)
class Manifest:
    entries: Tuple[ManifestEntry, ...]
    total_weight: float


@dataclass(frozen=True)
class Pricing:
    subtotal: float
    shipping_fee: float
    total: float


@dataclass(frozen=True)
class ReceiptLine:
    quantity: int
    name: str
    line_total: float


@dataclass(frozen=True)
class Receipt:
    lines: Tuple[ReceiptLine, ...]
    subtotal: float
    shipping_fee: float
    total: float
    remaining: float


@dataclass(frozen=True)
class CheckoutResult:
    """Итог успешного оформления: новое состояние каталога и счёта + чек"""

    catalog: Catalog
    account: Account
    receipt: Receipt
    manifest: Optional[Manifest] = None


@dataclass(frozen=True)
class Event:
    id: str
    ts: str
    name: str
    payload: Dict
