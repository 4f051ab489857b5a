"""JSON-file-backed implementation of MaterialRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from matpay.domain.exceptions import EntityNotFoundError
from matpay.domain.model.material import Material
from matpay.domain.model.value_objects import Money
from matpay.domain.repository.material_repository import MaterialRepository
from matpay.infrastructure.persistence.json_store import JsonFile


class JsonMaterialRepository(MaterialRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- MaterialRepository interface -----------------------------------------

    def get_by_id(self, material_id: str) -> Material | None:
        return self._load().get(material_id)

    def list_by_seller(self, seller_id: str) -> list[Material]:
        return [m for m in self._load().values() if m.seller_id == seller_id]

    def save(self, material: Material) -> None:
        self._file.upsert(self._to_raw(material), key="id")

    def withdraw_stock(self, material_id: str, quantity: int) -> int:
        with self._file.lock:
            material = self._require(material_id)
            taken = material.withdraw(quantity)
            self.save(material)
        return taken

    def restock(self, material_id: str, quantity: int) -> None:
        with self._file.lock:
            material = self._require(material_id)
            material.restock(quantity)
            self.save(material)

    def _require(self, material_id: str) -> Material:
        material = self.get_by_id(material_id)
        if material is None:
            raise EntityNotFoundError(f"Material '{material_id}' not found")
        return material

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Material]:
        return {
            item["id"]: Material(
                id=item["id"],
                seller_id=item["seller_id"],
                name=item["name"],
                price=Money(Decimal(item["price"]), item["currency"]),
                stock_quantity=item["stock_quantity"],
                image_urls=item.get("image_urls", []),
                is_active=item.get("is_active", True),
            )
            for item in self._file.load()
        }

    @staticmethod
    def _to_raw(m: Material) -> dict:
        return {
            "id": m.id,
            "seller_id": m.seller_id,
            "name": m.name,
            "price": str(m.price.amount),
            "currency": m.price.currency,
            "stock_quantity": m.stock_quantity,
            "image_urls": m.image_urls,
            "is_active": m.is_active,
        }
