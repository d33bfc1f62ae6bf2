"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from bazar.repositories.user_repository import UserRepository
from bazar.repositories.product_repository import ProductRepository
from bazar.repositories.order_repository import OrderRepository

__all__ = [
    'UserRepository',
    'ProductRepository',
    'OrderRepository',
]
