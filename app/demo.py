import sys
import os
import logging

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from retail.domain import Cart
from retail.errors import CheckoutError
from retail.service import ShopService
from retail.transforms import load_seed
from Receipt_Service.receipt import render_checkout

SEED_PATH = os.environ.get("SHOP_SEED_PATH", "data/seed.json")


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("SHOP_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    catalog, account = load_seed(SEED_PATH)
    shop = ShopService(catalog)

    try:
        cart = Cart()
        cart = shop.add_to_cart(cart, "cheese", 2)
        cart = shop.add_to_cart(cart, "biscuits", 1)
        cart = shop.add_to_cart(cart, "scratch_card", 1)
        result = shop.checkout(cart, account)
    except CheckoutError as exc:
        print(f"Checkout failed: {exc}", file=sys.stderr)
        return 1

    print(render_checkout(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
