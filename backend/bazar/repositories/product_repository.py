"""
Product Repository - Data Access Layer for Products (catalog reader)

Handles all database queries for products and returns Product domain models.

Author: Bazar
Date: 2026-10-19
"""
from typing import Dict, Iterable, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from bazar.domain.product import Product
from bazar.models import Product as ProductModel


class ProductRepository:
    """
    Repository for Product data access

    All catalog queries are centralized here. Inactive products are
    invisible to every lookup.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Product]:
        """
        List active products ordered by name

        Returns:
            List of products
        """
        rows = self.db.execute(
            select(ProductModel)
            .where(ProductModel.is_active.is_(True))
            .order_by(ProductModel.name, ProductModel.id)
        ).scalars().all()
        return [Product.model_validate(row) for row in rows]

    def find_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Resolve several products in one query

        Args:
            product_ids: IDs to look up (duplicates allowed)

        Returns:
            Dict of product_id -> Product for the ids that exist
        """
        ids = set(product_ids)
        if not ids:
            return {}

        rows = self.db.execute(
            select(ProductModel).where(
                ProductModel.id.in_(ids),
                ProductModel.is_active.is_(True),
            )
        ).scalars().all()
        return {row.id: Product.model_validate(row) for row in rows}

    def reserve_stock(self, product_id: int, quantity: int) -> bool:
        """
        Decrement stock only if enough units remain

        The check and the decrement are a single UPDATE so two concurrent
        orders cannot both take the last units.

        Returns:
            True if the units were reserved, False if stock was short
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def get_stock(self, product_id: int) -> int:
        """Current stock read straight from the table (0 if the product is gone)"""
        stock = self.db.execute(
            select(ProductModel.stock).where(ProductModel.id == product_id)
        ).scalar_one_or_none()
        return stock or 0
