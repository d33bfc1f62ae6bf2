"""
Client Layer - Python client for the Bazar API

Session store, cart and HTTP client used by scripts and tests.
"""
from bazar.client.cart import Cart, CartError, CartItem
from bazar.client.session import SessionStore
from bazar.client.api_client import ApiError, ShopClient

__all__ = [
    'Cart',
    'CartError',
    'CartItem',
    'SessionStore',
    'ApiError',
    'ShopClient',
]
