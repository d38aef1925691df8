import logging
from datetime import datetime
from threading import RLock
from typing import Callable, Optional, Tuple

from .checkout import checkout
from .domain import Account, Cart, Catalog, CheckoutResult, Item
from .frp import EventBus, create_event, create_shop_event_bus, initial_state
from .ftypes import Maybe
from .items import purchasable
from .transforms import add_to_cart

logger = logging.getLogger("shop")


class CatalogService:
    """Просмотр каталога (только чтение, без блокировок)"""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def find(self, item_id: str) -> Maybe[Item]:
        return Maybe.of(self.catalog.get(item_id))

    def filter_items(self, predicate: Callable[[Item], bool]) -> Tuple[Item, ...]:
        return tuple(filter(predicate, self.catalog.items))

    def available(self, now: Optional[datetime] = None) -> Tuple[Item, ...]:
        """Товары, которые можно купить хотя бы в одном экземпляре"""
        return self.filter_items(lambda item: purchasable(item, 1, now))


class ShopService:
    """
    Единственный владелец общего каталога.
    Вся последовательность проверка -> списание идёт под одной блокировкой,
    так что параллельные покупатели не видят частичных изменений.
    """

    def __init__(
        self,
        catalog: Catalog,
        clock: Callable[[], datetime] = datetime.now,
        bus: Optional[EventBus] = None,
    ):
        self._catalog = catalog
        self._clock = clock
        self._bus = bus or create_shop_event_bus()
        self._state = initial_state()
        self._lock = RLock()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def events_state(self) -> dict:
        return self._state

    def browse(self) -> CatalogService:
        return CatalogService(self._catalog)

    def add_to_cart(self, cart: Cart, item_id: str, qty: int) -> Cart:
        """Возвращает новую корзину или бросает ItemUnavailableError"""
        updated = add_to_cart(cart, self._catalog, item_id, qty, self._clock()).get_or_raise()
        self._publish("ITEM_ADDED", {"item_id": item_id, "qty": qty})
        return updated

    def checkout(self, cart: Cart, account: Account) -> CheckoutResult:
        """
        Оформляет корзину и фиксирует новый каталог.
        CheckoutError пробрасывается без изменений состояния.
        Новый счёт покупателя возвращается в результате.
        """
        with self._lock:
            result = checkout(cart, self._catalog, account, now=self._clock())
            if result.is_left:
                error = result.value
                self._publish(
                    "CHECKOUT_FAILED",
                    {"error": type(error).__name__, "message": str(error)},
                )
                raise error

            settled = result.value
            self._catalog = settled.catalog
            self._publish(
                "CHECKOUT_COMPLETED",
                {"total": settled.receipt.total, "remaining": settled.receipt.remaining},
            )
            logger.info("Catalog committed after checkout of %d lines", len(cart.lines))
            return settled

    def _publish(self, name: str, payload: dict) -> None:
        with self._lock:
            self._state = self._bus.publish(create_event(name, payload), self._state)
