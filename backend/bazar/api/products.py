"""
Products API Endpoints
Read-only catalog listing
"""
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bazar.core.database import get_db
from bazar.core.errors import PersistenceFailure
from bazar.domain.product import Product
from bazar.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[Product])
def get_products(db: Session = Depends(get_db)):
    """
    Get all active products, ordered by name

    Stock values are a snapshot; orders re-check them at commit time.
    """
    try:
        return ProductRepository(db).find_all()
    except SQLAlchemyError:
        logger.exception("Error fetching products")
        raise PersistenceFailure("Error fetching products")
