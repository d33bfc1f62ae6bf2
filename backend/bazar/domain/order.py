"""
Order Domain Models

Request contract of the order workflow and the aggregates it returns.
Clients only ever send product ids and quantities; names and prices are
filled in from the catalog.

Author: Bazar
Date: 2026-10-19
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field

# Upper bound of the 32-bit INTEGER primary key column
MAX_PRODUCT_ID = 2**31 - 1


class OrderStatus(str, Enum):
    """
    Order lifecycle states

    Transitions happen outside this service; new orders are always PENDING.
    """
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# =============================================================================
# Requests
# =============================================================================

class OrderLineRequest(BaseModel):
    """
    One cart line as submitted by the client

    quantity is deliberately unconstrained here: the workflow rejects
    non-positive values with InvalidQuantity.
    """
    product_id: int = Field(
        ...,
        gt=0,
        le=MAX_PRODUCT_ID,
        validation_alias=AliasChoices("productId", "product_id"),
    )
    quantity: int

    model_config = ConfigDict(populate_by_name=True)


class PlaceOrderRequest(BaseModel):
    lines: List[OrderLineRequest] = Field(default_factory=list)


# =============================================================================
# Results
# =============================================================================

class OrderLine(BaseModel):
    """
    Persisted order line

    Fields:
        id: Order line ID
        product_id: Product catalog ID
        product_name: Catalog name
        quantity: Units ordered
        unit_price: Price captured when the order was placed
    """

    id: int
    product_id: int
    product_name: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderLineSummary(OrderLine):
    """Order line as shown in the history, with today's catalog price"""

    current_price: Optional[Decimal] = None


class OrderResult(BaseModel):
    """Aggregate returned by place_order"""

    id: int
    user_id: int
    status: OrderStatus
    created_at: datetime
    lines: List[OrderLine]

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def total_units(self) -> int:
        """Sum of quantities, not the number of distinct products"""
        return sum(line.quantity for line in self.lines)

    @computed_field
    @property
    def total_amount(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))


class OrderSummary(OrderResult):
    """Entry of a user's order history"""

    lines: List[OrderLineSummary]
