"""Material aggregate: a catalog item sold by one seller, with its stock.

Materials live independently of orders: prices change and stock moves
while placed orders keep their own snapshot.  Stock is only changed
through ``withdraw()`` and ``restock()``, called by the stock adjuster.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from matpay.domain.exceptions import ValidationError
from matpay.domain.model.value_objects import Money


@dataclass
class Material:
    """Aggregate root for a catalog material.

    Invariants:
    - ``stock_quantity`` is always >= 0
    - ``price`` is always > 0
    """

    id: str
    seller_id: str
    name: str
    price: Money
    stock_quantity: int = 0
    image_urls: list[str] = field(default_factory=list)
    is_active: bool = True

    @property
    def primary_image(self) -> str | None:
        return self.image_urls[0] if self.image_urls else None

    def has_stock_for(self, quantity: int) -> bool:
        return quantity <= self.stock_quantity

    def update_price(self, new_price: Money) -> None:
        """Change the price.  Existing orders keep their snapshot."""
        if new_price.amount <= 0:
            raise ValidationError("Material price must be greater than zero")
        self.price = new_price

    def withdraw(self, quantity: int) -> int:
        """Remove up to ``quantity`` units from stock.

        Returns the number of units actually withdrawn.  Stock never goes
        below zero; a shortfall is reported to the caller through the
        return value.
        """
        if quantity <= 0:
            raise ValidationError("Withdrawal quantity must be positive")
        taken = min(quantity, self.stock_quantity)
        self.stock_quantity -= taken
        return taken

    def restock(self, quantity: int) -> None:
        """Return previously withdrawn units to stock."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stock_quantity += quantity
