from datetime import datetime
from typing import Iterator, Optional, Tuple

from .domain import Cart, CartLine, Catalog, Item
from .items import is_shippable, purchasable


## ленивый генератор строк корзины вместе с товаром из каталога (None, если id нет)
def iter_resolved_lines(
    cart: Cart, catalog: Catalog
) -> Iterator[Tuple[CartLine, Optional[Item]]]:
    for line in cart.lines:
        yield line, catalog.get(line.item_id)


## строки, не прошедшие проверку доступности, в порядке корзины
## для проверки при оформлении достаточно первой: next() не перебирает остальные
def iter_unavailable_lines(
    cart: Cart, catalog: Catalog, now: Optional[datetime] = None
) -> Iterator[Tuple[CartLine, Optional[Item]]]:
    for line, item in iter_resolved_lines(cart, catalog):
        if item is None or not purchasable(item, line.quantity, now):
            yield line, item


## доставляемые товары: по одному на строку, количество не важно
def iter_shippable_items(cart: Cart, catalog: Catalog) -> Iterator[Item]:
    for _, item in iter_resolved_lines(cart, catalog):
        if item is not None and is_shippable(item):
            yield item
