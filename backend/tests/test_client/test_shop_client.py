"""
Tests for ShopClient running against the app through TestClient
"""
import pytest

from bazar.client import ApiError, Cart, CartError, SessionStore, ShopClient


@pytest.fixture
def shop(client, tmp_path):
    return ShopClient(session=SessionStore(tmp_path / "session.json"), http=client)


class TestShopClient:

    def test_browse_login_and_checkout(self, shop, sample_products, sample_user_data):
        shop.register(**sample_user_data)
        shop.logout()
        user = shop.login(sample_user_data["email"], sample_user_data["password"])
        assert user["email"] == "ana@x.com"

        products = {p["id"]: p for p in shop.list_products()}
        shop.session.cart.add(products[1], 2)
        shop.session.cart.add(products[2], 1)

        order = shop.place_order()

        assert order["total_units"] == 3
        assert not shop.session.cart
        assert [o["id"] for o in shop.my_orders()] == [order["id"]]

    def test_rejected_order_keeps_the_cart(self, shop, sample_products, sample_user_data):
        shop.register(**sample_user_data)
        candle = {p["id"]: p for p in shop.list_products()}[2]
        shop.session.cart.add(candle, 1)
        shop.place_order()

        shop.session.cart.add(candle, 1)
        with pytest.raises(ApiError) as exc_info:
            shop.place_order()

        assert exc_info.value.status_code == 409
        assert exc_info.value.kind == "InsufficientStock"
        assert len(shop.session.cart) == 1

    def test_empty_cart_is_not_sent(self, shop, sample_user_data):
        shop.register(**sample_user_data)

        with pytest.raises(CartError):
            shop.place_order()

    def test_authenticated_call_without_login(self, shop):
        with pytest.raises(ApiError) as exc_info:
            shop.my_orders()

        assert exc_info.value.kind == "MissingCredential"

    def test_rejected_token_logs_out(self, shop, tmp_path):
        shop.session.set_auth("garbage", {"id": 1})

        with pytest.raises(ApiError) as exc_info:
            shop.me()

        assert exc_info.value.status_code == 401
        assert not shop.session.is_authenticated
        assert not (tmp_path / "session.json").exists()

    def test_bad_login(self, shop, sample_user_data):
        shop.register(**sample_user_data)
        shop.logout()

        with pytest.raises(ApiError) as exc_info:
            shop.login(sample_user_data["email"], "wrong-password")

        assert exc_info.value.kind == "InvalidCredentials"
        assert not shop.session.is_authenticated

    def test_idempotency_key_is_forwarded(self, shop, sample_products, sample_user_data):
        shop.register(**sample_user_data)
        notebook = {p["id"]: p for p in shop.list_products()}[4]

        shop.session.cart.add(notebook, 1)
        first = shop.place_order(idempotency_key="k-1")
        shop.session.cart.add(notebook, 1)
        replay = shop.place_order(idempotency_key="k-1")

        assert replay["id"] == first["id"]

    def test_explicit_cart_is_submitted(self, shop, sample_products, sample_user_data):
        shop.register(**sample_user_data)
        cart = Cart()
        cart.add({p["id"]: p for p in shop.list_products()}[4], 3)

        order = shop.place_order(cart)

        assert order["total_units"] == 3
        assert not cart
