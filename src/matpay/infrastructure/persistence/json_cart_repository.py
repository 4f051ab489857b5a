"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from pathlib import Path

from matpay.domain.model.cart import Cart, CartItem
from matpay.domain.repository.cart_repository import CartRepository
from matpay.infrastructure.persistence.json_store import JsonFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get(self, buyer_id: str, seller_id: str) -> Cart | None:
        key = self._key(buyer_id, seller_id)
        for raw in self._file.load():
            if raw["key"] == key:
                return Cart(
                    buyer_id=raw["buyer_id"],
                    seller_id=raw["seller_id"],
                    items=[CartItem(i["material_id"], i["quantity"]) for i in raw["items"]],
                )
        return None

    def save(self, cart: Cart) -> None:
        self._file.upsert(
            {
                "key": self._key(cart.buyer_id, cart.seller_id),
                "buyer_id": cart.buyer_id,
                "seller_id": cart.seller_id,
                "items": [
                    {"material_id": i.material_id, "quantity": i.quantity} for i in cart.items
                ],
            },
            key="key",
        )

    @staticmethod
    def _key(buyer_id: str, seller_id: str) -> str:
        return f"{buyer_id}:{seller_id}"
