"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities
and the request/response contracts validated at the API boundary.
"""
from bazar.domain.product import Product
from bazar.domain.user import User, UserCredentials, RegisterRequest, LoginRequest, AuthResponse
from bazar.domain.order import (
    OrderStatus,
    OrderLineRequest,
    PlaceOrderRequest,
    OrderLine,
    OrderLineSummary,
    OrderResult,
    OrderSummary,
)

__all__ = [
    'Product',
    'User',
    'UserCredentials',
    'RegisterRequest',
    'LoginRequest',
    'AuthResponse',
    'OrderStatus',
    'OrderLineRequest',
    'PlaceOrderRequest',
    'OrderLine',
    'OrderLineSummary',
    'OrderResult',
    'OrderSummary',
]
