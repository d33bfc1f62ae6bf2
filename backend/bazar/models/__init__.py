"""
Modelos de base de datos
"""
from .user import User
from .product import Product
from .order import Order, OrderLine

__all__ = [
    "User",
    "Product",
    "Order",
    "OrderLine",
]
