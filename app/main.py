import sys
import os
import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from retail.domain import Cart, ItemKind
from retail.errors import CheckoutError
from retail.service import ShopService
from retail.transforms import by_kind, in_stock, load_seed, line_total
from Receipt_Service.receipt import render_checkout, format_money

SEED_PATH = os.environ.get("SHOP_SEED_PATH", "data/seed.json")


# ============ Общий магазин на все сессии ============
@st.cache_resource
def get_shop():
    catalog, _ = load_seed(SEED_PATH)
    return ShopService(catalog)


@st.cache_data
def get_start_account():
    _, account = load_seed(SEED_PATH)
    return account


st.set_page_config(
    page_title="Retail Checkout",
    page_icon="🛒",
    layout="wide",
)

shop = get_shop()

if "cart" not in st.session_state:
    st.session_state.cart = Cart()

if "account" not in st.session_state:
    st.session_state.account = get_start_account()


KIND_LABELS = {
    ItemKind.REGULAR: "обычный",
    ItemKind.PERISHABLE: "скоропортящийся",
    ItemKind.SHIPPABLE: "с доставкой",
}


# ============ HEADER ============
st.title("🛒 Магазин")
st.caption(f"💰 Баланс: {format_money(st.session_state.account.balance)}")

with st.sidebar:
    st.header("📂 Навигация")
    page = st.radio(
        "Выберите раздел:",
        ["🏪 Каталог", "🛒 Корзина", "⚡ События"],
        label_visibility="collapsed",
    )


# ============ PAGE: КАТАЛОГ ============
if page == "🏪 Каталог":
    st.header("🏪 Каталог товаров")

    col1, col2 = st.columns(2)
    with col1:
        selected_kind = st.selectbox(
            "Тип товара", ["Все"] + [k.value for k in ItemKind], key="catalog_kind"
        )
    with col2:
        only_in_stock = st.checkbox("Только в наличии", value=True)

    filters = []
    if selected_kind != "Все":
        filters.append(by_kind(ItemKind(selected_kind)))
    if only_in_stock:
        filters.append(in_stock())

    items = shop.browse().filter_items(lambda item: all(f(item) for f in filters))

    if not items:
        st.warning("Товары не найдены.")
    for item in items:
        cols = st.columns([4, 2, 2, 2, 2])
        with cols[0]:
            st.markdown(f"**{item.name}**")
            st.caption(KIND_LABELS[item.kind])
        with cols[1]:
            st.write(format_money(item.price))
        with cols[2]:
            st.write(f"Остаток: {item.stock}")
        with cols[3]:
            qty = st.number_input(
                "Кол-во",
                min_value=1,
                value=1,
                key=f"qty_{item.id}",
                label_visibility="collapsed",
            )
        with cols[4]:
            if st.button("➕ В корзину", key=f"add_{item.id}"):
                try:
                    st.session_state.cart = shop.add_to_cart(
                        st.session_state.cart, item.id, int(qty)
                    )
                    st.success(f"✅ {item.name} × {qty}")
                except CheckoutError as exc:
                    st.error(f"❌ {exc}")


# ============ PAGE: КОРЗИНА ============
elif page == "🛒 Корзина":
    st.header("🛒 Ваша корзина")

    cart = st.session_state.cart

    if cart.is_empty():
        st.info("🛍️ Корзина пуста. Перейдите в каталог!")
    else:
        for line in cart.lines:
            item = shop.catalog.get(line.item_id)
            cols = st.columns([5, 2, 2])
            with cols[0]:
                st.write(f"**{item.name}**")
            with cols[1]:
                st.write(f"× {line.quantity}")
            with cols[2]:
                st.write(format_money(line_total(item, line)))

        st.divider()
        if st.button("✅ Оформить заказ", type="primary", use_container_width=True):
            try:
                result = shop.checkout(cart, st.session_state.account)
            except CheckoutError as exc:
                st.error(f"❌ Ошибка: {exc}")
            else:
                st.session_state.account = result.account
                st.session_state.cart = Cart()
                st.code(render_checkout(result))
                st.balloons()


# ============ PAGE: СОБЫТИЯ ============
elif page == "⚡ События":
    st.header("⚡ События магазина")

    state = shop.events_state

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("💰 Выручка", format_money(state.get("revenue", 0)))
    with col2:
        st.metric("📦 Покупок", len(state.get("completed", [])))
    with col3:
        st.metric("❌ Отказов", len(state.get("failures", [])))

    st.divider()
    for failure in state.get("failures", [])[-10:]:
        st.write(f"• **{failure['error']}**: {failure['message']}")

    st.caption(f"Последнее событие: **{state.get('last_event') or 'N/A'}**")
