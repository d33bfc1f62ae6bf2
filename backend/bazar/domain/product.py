"""
Product Domain Model

Represents a catalog product as the API and the order workflow see it.
Prices are Decimal end to end and serialize as decimal strings.

Author: Bazar
Date: 2026-10-19
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Internal product ID (primary key)
        name: Product name
        description: Product description (optional)
        price: Unit price (fixed-point)
        stock: Units available right now (snapshot, may be stale)
        is_active: Whether product is listed in the catalog
        created_at: When product was created
    """

    id: int = Field(..., description="Internal product ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Unit price", ge=0)
    stock: int = Field(0, description="Available units", ge=0)
    is_active: bool = Field(True, description="Whether product is active")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    def has_stock_for(self, quantity: int) -> bool:
        return quantity <= self.stock
