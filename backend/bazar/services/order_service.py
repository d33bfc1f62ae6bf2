"""
Order Service
Turns a cart (product ids + quantities) into a persisted order and
serves a user's order history

Author: Bazar
Date: 2026-10-19
"""
import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bazar.core.config import settings
from bazar.core.errors import (
    EmptyCart,
    InsufficientStock,
    InvalidQuantity,
    PersistenceFailure,
    ProductNotFound,
)
from bazar.domain.order import OrderLine, OrderLineRequest, OrderResult, OrderStatus, OrderSummary
from bazar.domain.product import Product
from bazar.repositories.order_repository import OrderRepository
from bazar.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for placing and listing orders

    Handles:
    - Cart validation (non-empty, positive quantities)
    - Product resolution against the catalog (all-or-nothing)
    - Server-side stock re-validation at commit time
    - Atomic write of order header + lines (+ stock reservation)
    """

    def __init__(self, db: Session, reserve_stock: Optional[bool] = None):
        self.db = db
        self.products = ProductRepository(db)
        self.orders = OrderRepository(db)
        self.reserve_stock = settings.RESERVE_STOCK_ON_ORDER if reserve_stock is None else reserve_stock

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_lines(line_requests: Sequence[OrderLineRequest]) -> None:
        if not line_requests:
            logger.info("Order rejected: empty cart")
            raise EmptyCart()

        for line in line_requests:
            if line.quantity <= 0:
                logger.info(f"Order rejected: quantity {line.quantity} for product {line.product_id}")
                raise InvalidQuantity(
                    f"Quantity for product {line.product_id} must be positive (got {line.quantity})"
                )

    def _resolve_products(self, line_requests: Sequence[OrderLineRequest]) -> Dict[int, Product]:
        try:
            catalog = self.products.find_by_ids(line.product_id for line in line_requests)
        except SQLAlchemyError:
            logger.exception("Failed to resolve order products from the catalog")
            raise PersistenceFailure()

        for line in line_requests:
            if line.product_id not in catalog:
                logger.info(f"Order rejected: unknown product {line.product_id}")
                raise ProductNotFound(line.product_id)

        return catalog

    @staticmethod
    def _requested_units(line_requests: Sequence[OrderLineRequest]) -> Dict[int, int]:
        """Total units per product; a product may appear on several lines"""
        units: Dict[int, int] = {}
        for line in line_requests:
            units[line.product_id] = units.get(line.product_id, 0) + line.quantity
        return units

    @staticmethod
    def _check_stock(requested: Dict[int, int], catalog: Dict[int, Product]) -> None:
        for product_id, quantity in requested.items():
            product = catalog[product_id]
            if not product.has_stock_for(quantity):
                logger.info(
                    f"Order rejected: product {product_id} has {product.stock} units, {quantity} requested"
                )
                raise InsufficientStock(product_id, available=product.stock, requested=quantity)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def place_order(
        self,
        user_id: int,
        line_requests: Sequence[OrderLineRequest],
        idempotency_key: Optional[str] = None,
    ) -> OrderResult:
        """
        Validate a cart and persist it as a pending order

        Only product_id and quantity are taken from the request; names and
        prices come from the catalog.

        Args:
            user_id: Authenticated subject placing the order
            line_requests: Cart lines
            idempotency_key: When given and already used by this user, the
                existing order is returned instead of creating a new one

        Returns:
            OrderResult with persisted lines and totals

        Raises:
            EmptyCart, InvalidQuantity: bad cart (nothing written)
            ProductNotFound: unknown or inactive product (nothing written)
            InsufficientStock: quantity above available stock (nothing written)
            PersistenceFailure: store error, transaction rolled back
        """
        if idempotency_key:
            existing = self.find_existing(user_id, idempotency_key)
            if existing is not None:
                return existing

        self._validate_lines(line_requests)
        catalog = self._resolve_products(line_requests)
        requested = self._requested_units(line_requests)
        self._check_stock(requested, catalog)

        try:
            order = self.orders.create(
                user_id=user_id,
                lines=[
                    (line.product_id, line.quantity, catalog[line.product_id].price)
                    for line in line_requests
                ],
                idempotency_key=idempotency_key,
            )

            if self.reserve_stock:
                for product_id, quantity in requested.items():
                    if not self.products.reserve_stock(product_id, quantity):
                        # Another order took the units after our snapshot
                        self.db.rollback()
                        available = self.products.get_stock(product_id)
                        logger.warning(
                            f"Stock for product {product_id} changed during checkout "
                            f"(available={available}, requested={quantity})"
                        )
                        raise InsufficientStock(product_id, available=available, requested=quantity)

            result = OrderResult(
                id=order.id,
                user_id=order.user_id,
                status=OrderStatus(order.status),
                created_at=order.created_at,
                lines=[
                    OrderLine(
                        id=line.id,
                        product_id=line.product_id,
                        product_name=catalog[line.product_id].name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                    )
                    for line in order.lines
                ],
            )
            self.db.commit()

        except IntegrityError:
            self.db.rollback()
            if idempotency_key:
                # A concurrent request with the same key committed first
                existing = self.find_existing(user_id, idempotency_key)
                if existing is not None:
                    return existing
            logger.exception(f"Integrity error while storing order for user {user_id}")
            raise PersistenceFailure()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to store order for user {user_id}")
            raise PersistenceFailure()

        logger.info(
            f"Order {result.id} placed by user {user_id}: "
            f"{len(result.lines)} lines, {result.total_units} units"
        )
        return result

    def find_existing(self, user_id: int, idempotency_key: str) -> Optional[OrderResult]:
        """Order already placed by this user under the given key"""
        try:
            return self.orders.find_by_idempotency_key(user_id, idempotency_key)
        except SQLAlchemyError:
            logger.exception(f"Failed to look up idempotency key for user {user_id}")
            raise PersistenceFailure()

    def list_orders(self, user_id: int) -> List[OrderSummary]:
        """
        Order history of a user, newest first

        Returns:
            List of OrderSummary, empty when the user has no orders
        """
        try:
            return self.orders.find_by_user(user_id)
        except SQLAlchemyError:
            logger.exception(f"Failed to load orders for user {user_id}")
            raise PersistenceFailure()
