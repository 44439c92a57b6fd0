"""Cart aggregate - per-user items with a price snapshot taken at add time."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import NotFound, ValidationError
from ..value_objects import DEFAULT_CURRENCY, Money


@dataclass
class CartItem:
    product_id: str
    quantity: int
    price: Money
    product_name: str = ""

    @property
    def total(self) -> Money:
        return self.price * self.quantity


@dataclass
class Cart:
    """
    Shopping cart.

    The cart only tracks quantities; stock reservation is done by the
    caller with the quantity deltas these methods return.
    """
    user_id: str
    items: List[CartItem] = field(default_factory=list)
    currency: str = DEFAULT_CURRENCY

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def subtotal(self) -> Money:
        total = Money.zero(self.currency)
        for item in self.items:
            total = total + item.total
        return total

    def find(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def add(
        self,
        product_id: str,
        quantity: int,
        price: Money,
        max_quantity: int,
        product_name: str = "",
    ) -> int:
        """
        Add units of a product, refreshing its price snapshot.

        Returns:
            Number of units newly reserved
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        item = self.find(product_id)
        current = item.quantity if item else 0
        if current + quantity > max_quantity:
            raise ValidationError(
                f"Maximum {max_quantity} units per product; cart already has {current}"
            )

        if item is None:
            self.items.append(
                CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    price=price,
                    product_name=product_name,
                )
            )
        else:
            item.quantity += quantity
            item.price = price
        return quantity

    def change_quantity(self, product_id: str, delta: int, max_quantity: int) -> int:
        """
        Increment or decrement an item.

        Returns:
            The applied delta (positive reserves, negative releases)
        """
        item = self.find(product_id)
        if item is None:
            raise NotFound(f"Product {product_id} is not in the cart")
        if delta == 0:
            raise ValidationError("Quantity change must be non-zero")

        new_quantity = item.quantity + delta
        if new_quantity < 1:
            raise ValidationError("Quantity cannot go below 1; remove the item instead")
        if new_quantity > max_quantity:
            raise ValidationError(f"Maximum {max_quantity} units per product")

        item.quantity = new_quantity
        return delta

    def remove(self, product_id: str) -> int:
        """Remove an item and return how many units it held."""
        item = self.find(product_id)
        if item is None:
            raise NotFound(f"Product {product_id} is not in the cart")
        self.items.remove(item)
        return item.quantity
