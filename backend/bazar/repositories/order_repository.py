"""
Order Repository - Data Access Layer for Orders

Writes order headers with their lines and reads a user's order history
joined with the catalog.

Author: Bazar
Date: 2026-10-19
"""
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bazar.domain.order import OrderLine, OrderLineSummary, OrderResult, OrderStatus, OrderSummary
from bazar.models import Order as OrderModel
from bazar.models import OrderLine as OrderLineModel

# (product_id, quantity, unit_price)
LineValues = Tuple[int, int, Decimal]


class OrderRepository:
    """
    Repository for Order data access

    create() only flushes; committing or rolling back the header and its
    lines together is up to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: int,
        lines: Sequence[LineValues],
        idempotency_key: Optional[str] = None,
    ) -> OrderModel:
        """
        Insert an order header and its lines

        The header is flushed first so the lines can reference its id.

        Args:
            user_id: Owner of the order
            lines: (product_id, quantity, unit_price) per line, in cart order
            idempotency_key: Optional client-supplied deduplication key

        Returns:
            The flushed Order row, with ids assigned
        """
        order = OrderModel(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            idempotency_key=idempotency_key,
        )
        self.db.add(order)
        self.db.flush()

        for product_id, quantity, unit_price in lines:
            order.lines.append(
                OrderLineModel(product_id=product_id, quantity=quantity, unit_price=unit_price)
            )
        self.db.flush()
        return order

    def find_by_idempotency_key(self, user_id: int, key: str) -> Optional[OrderResult]:
        """Order previously placed by this user with the same key, if any"""
        order = self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id, OrderModel.idempotency_key == key)
            .options(selectinload(OrderModel.lines).selectinload(OrderLineModel.product))
        ).scalar_one_or_none()
        if not order:
            return None

        return OrderResult(
            id=order.id,
            user_id=order.user_id,
            status=order.status,
            created_at=order.created_at,
            lines=[
                OrderLine(
                    id=line.id,
                    product_id=line.product_id,
                    product_name=line.product.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in order.lines
            ],
        )

    def find_by_user(self, user_id: int) -> List[OrderSummary]:
        """
        Order history of one user, newest first

        Lines and their products are loaded eagerly (two extra queries in
        total, not one per order).

        Args:
            user_id: Owner whose orders to return

        Returns:
            List of OrderSummary (empty if the user has no orders)
        """
        orders = self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .options(selectinload(OrderModel.lines).selectinload(OrderLineModel.product))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        ).scalars().all()

        return [
            OrderSummary(
                id=order.id,
                user_id=order.user_id,
                status=order.status,
                created_at=order.created_at,
                lines=[
                    OrderLineSummary(
                        id=line.id,
                        product_id=line.product_id,
                        product_name=line.product.name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        current_price=line.product.price,
                    )
                    for line in order.lines
                ],
            )
            for order in orders
        ]
