"""
Shopping cart kept on the client until it is submitted as an order

Stock checks here only give early feedback; the server re-validates
every line when the order is placed.
"""
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping

logger = logging.getLogger(__name__)


class CartError(Exception):
    """Rejected cart operation (bad quantity, not enough stock, unknown item)"""


@dataclass
class CartItem:
    product_id: int
    name: str
    price: Decimal
    quantity: int
    stock: int

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Cart:
    """
    In-memory cart

    Products are the dicts returned by GET /products. Adding a product that
    is already in the cart increases its quantity.
    """

    def __init__(self):
        self._items: Dict[int, CartItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    def get(self, product_id: int) -> CartItem:
        try:
            return self._items[product_id]
        except KeyError:
            raise CartError(f"Product {product_id} is not in the cart")

    def add(self, product: Mapping[str, Any], quantity: int = 1) -> CartItem:
        """
        Add units of a catalog product

        Raises:
            CartError: quantity not positive, or the cart would hold more
                units than the product's known stock
        """
        if quantity <= 0:
            raise CartError("Quantity must be positive")

        product_id = int(product["id"])
        stock = int(product.get("stock", 0))
        item = self._items.get(product_id)
        new_quantity = quantity + (item.quantity if item else 0)

        if new_quantity > stock:
            logger.warning(
                f"Insufficient stock for product {product_id}: "
                f"available={stock}, requested={new_quantity}"
            )
            raise CartError(f"Only {stock} units available")

        if item:
            item.quantity = new_quantity
            item.stock = stock
        else:
            item = CartItem(
                product_id=product_id,
                name=str(product["name"]),
                price=Decimal(str(product["price"])),
                quantity=quantity,
                stock=stock,
            )
            self._items[product_id] = item

        logger.debug(f"Cart: product {product_id} x{item.quantity}")
        return item

    def remove(self, product_id: int) -> None:
        self.get(product_id)
        del self._items[product_id]

    def change_quantity(self, product_id: int, quantity: int) -> CartItem:
        """
        Set the quantity of an item already in the cart

        Raises:
            CartError: item missing, quantity not positive or above stock
        """
        item = self.get(product_id)
        if quantity <= 0:
            raise CartError("Quantity must be positive")
        if quantity > item.stock:
            raise CartError(f"Maximum stock: {item.stock}")
        item.quantity = quantity
        return item

    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items.values()), Decimal("0"))

    def total_units(self) -> int:
        return sum(item.quantity for item in self._items.values())

    def clear(self) -> None:
        self._items = {}

    def to_order_lines(self) -> List[Dict[str, int]]:
        """Body lines for POST /orders: only ids and quantities are sent"""
        return [
            {"productId": item.product_id, "quantity": item.quantity}
            for item in self._items.values()
        ]

    def to_list(self) -> List[Dict[str, Any]]:
        return [asdict(item) for item in self._items.values()]
