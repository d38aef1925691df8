class ShopError(Exception):
    """Базовая ошибка магазина"""


class CheckoutError(ShopError):
    """Ошибки, которые видит покупатель: проверка корзины и оплаты"""


class EmptyCartError(CheckoutError):
    def __init__(self):
        super().__init__("Cart is empty")


class ItemUnavailableError(CheckoutError):
    """Товар не проходит проверку доступности (при добавлении или при оформлении)"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} unavailable")


class UnknownItemError(ItemUnavailableError):
    """Товара с таким id нет в каталоге"""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(item_id)


class InsufficientFundsError(CheckoutError):
    def __init__(self, amount: float, balance: float):
        self.amount = amount
        self.balance = balance
        super().__init__(f"Not enough money: need {amount:.2f}, have {balance:.2f}")


class InsufficientStockError(ShopError):
    """
    Списание больше остатка.
    После валидации недостижимо, поэтому это нарушение инварианта,
    а не обычная ошибка оформления.
    """

    def __init__(self, name: str, requested: int, available: int):
        self.name = name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for {name}: requested {requested}, available {available}"
        )
