"""Cart aggregate: one buyer's pending selection from one seller."""

from __future__ import annotations

from dataclasses import dataclass, field

from matpay.domain.exceptions import ValidationError


@dataclass
class CartItem:
    material_id: str
    quantity: int


@dataclass
class Cart:
    buyer_id: str
    seller_id: str
    items: list[CartItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def quantity_of(self, material_id: str) -> int:
        for item in self.items:
            if item.material_id == material_id:
                return item.quantity
        return 0

    def add(self, material_id: str, quantity: int) -> None:
        """Add units of a material; repeated adds accumulate."""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        for item in self.items:
            if item.material_id == material_id:
                item.quantity += quantity
                return
        self.items.append(CartItem(material_id=material_id, quantity=quantity))

    def remove(self, material_id: str) -> None:
        before = len(self.items)
        self.items = [i for i in self.items if i.material_id != material_id]
        if len(self.items) == before:
            raise ValidationError(f"Material '{material_id}' is not in the cart")

    def clear(self) -> None:
        self.items = []
