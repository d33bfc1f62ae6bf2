"""
Bazar API client
Python counterpart of the shop's browser client: catalog, login and
checkout through the REST API
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from bazar.client.cart import Cart, CartError
from bazar.client.session import SessionStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, kind: str, message: str, details: Optional[Dict] = None):
        super().__init__(f"{status_code} {kind}: {message}")
        self.status_code = status_code
        self.kind = kind
        self.message = message
        self.details = details or {}

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            error = response.json()["error"]
            return cls(response.status_code, error.get("kind", "Error"), error.get("message", ""), error)
        except (ValueError, KeyError, TypeError, AttributeError):
            return cls(response.status_code, "HTTPError", response.text)


class ShopClient:
    """
    Client for the Bazar REST API

    Handles:
    - Catalog listing
    - Register / login / logout through the injected SessionStore
    - Checkout of the session cart and order history

    Usage:
        with ShopClient("http://localhost:8000", SessionStore(path)) as shop:
            shop.login("ana@x.com", "s3cret1")
            products = shop.list_products()
            shop.session.cart.add(products[0], 2)
            order = shop.place_order()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        session: Optional[SessionStore] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.session = session or SessionStore()
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "ShopClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()

    def _request(self, method: str, path: str, authenticated: bool = False, **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})

        if authenticated:
            if not self.session.is_authenticated:
                raise ApiError(401, "MissingCredential", "Log in first")
            headers.update(self.session.auth_headers())

        response = self.http.request(method, path, headers=headers, **kwargs)

        if response.is_error:
            error = ApiError.from_response(response)
            if authenticated and response.status_code == 401:
                logger.info(f"Session rejected by server ({error.kind}), logging out")
                self.session.clear()
            raise error

        return response

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def list_products(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/products").json()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/auth/register", json={"name": name, "email": email, "password": password}
        ).json()
        self.session.set_auth(data["token"], data["user"])
        return data["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password}).json()
        self.session.set_auth(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        self.session.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me", authenticated=True).json()

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def place_order(
        self,
        cart: Optional[Cart] = None,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Submit a cart (the session cart by default) as an order and empty it

        Raises:
            CartError: the cart is empty
            ApiError: the server rejected the order (cart is kept)
        """
        cart = self.session.cart if cart is None else cart
        if not cart:
            raise CartError("Cart is empty")

        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        order = self._request(
            "POST",
            "/orders",
            authenticated=True,
            json={"lines": cart.to_order_lines()},
            headers=headers,
        ).json()

        cart.clear()
        logger.info(f"Order {order['id']} placed ({order['total_units']} units)")
        return order

    def my_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/orders/mine", authenticated=True).json()
