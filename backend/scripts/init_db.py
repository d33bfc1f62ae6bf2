#!/usr/bin/env python3
"""
Create the Bazar schema and optionally load a demo catalog

Usage:
    export DATABASE_URL="postgresql://..."
    export JWT_SECRET="..."
    python3 backend/scripts/init_db.py --seed
"""
import argparse
import logging
import os
import sys
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select  # noqa: E402

from bazar.core.database import SessionLocal, engine, init_db  # noqa: E402
from bazar.models import Product  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEMO_PRODUCTS = [
    {"name": "Taza de cerámica", "description": "Taza artesanal 350ml", "price": Decimal("8.50"), "stock": 5},
    {"name": "Vela aromática", "description": "Vela de soja con lavanda", "price": Decimal("12.00"), "stock": 1},
    {"name": "Cuaderno reciclado", "description": "A5, 120 hojas", "price": Decimal("4.75"), "stock": 40},
    {"name": "Bolsa de tela", "description": "Algodón orgánico", "price": Decimal("6.20"), "stock": 25},
]


def seed_demo_catalog(dry_run: bool = False) -> int:
    """Insert demo products whose name is not in the catalog yet"""
    session = SessionLocal()
    try:
        existing = set(session.execute(select(Product.name)).scalars().all())
        missing = [p for p in DEMO_PRODUCTS if p["name"] not in existing]

        for product in missing:
            logger.info(f"{'Would insert' if dry_run else 'Inserting'}: {product['name']}")
            if not dry_run:
                session.add(Product(**product))

        if not dry_run:
            session.commit()
        return len(missing)
    finally:
        session.close()


def main():
    parser = argparse.ArgumentParser(description='Create Bazar tables and seed a demo catalog')
    parser.add_argument('--seed', action='store_true', help='Insert the demo products')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be seeded without writing')
    args = parser.parse_args()

    logger.info(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    init_db()

    if args.seed:
        count = seed_demo_catalog(dry_run=args.dry_run)
        logger.info(f"Demo catalog: {count} products {'to insert' if args.dry_run else 'inserted'}")


if __name__ == "__main__":
    main()
