from functools import reduce
from typing import Iterable

from .domain import Item, Manifest, ManifestEntry
from .ftypes import Maybe
from .items import weight_of


def build_manifest(items: Iterable[Item]) -> Maybe[Manifest]:
    """
    Манифест доставки: имя и вес каждой доставляемой строки плюс общий вес.
    На сумму заказа не влияет. Пустой список -> Nothing.
    """
    entries = tuple(
        ManifestEntry(name=item.name, weight=weight_of(item).get_or_else(0.0))
        for item in items
    )
    if not entries:
        return Maybe.nothing()

    total_weight = reduce(lambda acc, e: acc + e.weight, entries, 0.0)
    return Maybe.some(Manifest(entries=entries, total_weight=total_weight))
