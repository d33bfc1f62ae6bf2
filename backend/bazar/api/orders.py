"""
Orders API Endpoints
Place orders and read the caller's order history. Every route requires
a bearer token; users only ever see and create their own orders.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Response, status
from sqlalchemy.orm import Session

from bazar.core.auth import AuthenticatedUser, get_current_user
from bazar.core.database import get_db
from bazar.domain.order import OrderResult, OrderSummary, PlaceOrderRequest
from bazar.services.order_service import OrderService

router = APIRouter()


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=OrderResult, status_code=status.HTTP_201_CREATED)
def place_order(
    payload: PlaceOrderRequest,
    response: Response,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """
    Create an order from cart lines

    Body: {"lines": [{"productId": 1, "quantity": 2}, ...]}

    Replaying a request with an Idempotency-Key the user already used
    returns the stored order with 200 instead of creating another one.
    """
    if idempotency_key:
        existing = service.find_existing(current_user.id, idempotency_key)
        if existing is not None:
            response.status_code = status.HTTP_200_OK
            return existing

    return service.place_order(current_user.id, payload.lines, idempotency_key=idempotency_key)


@router.get("/mine", response_model=List[OrderSummary])
def get_my_orders(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Orders of the authenticated user, newest first"""
    return service.list_orders(current_user.id)
