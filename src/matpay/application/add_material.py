"""Application service: Add Material use case."""

from __future__ import annotations

from matpay.application.dto import MaterialDTO, material_to_dto
from matpay.domain.exceptions import ValidationError
from matpay.domain.model.material import Material
from matpay.domain.model.value_objects import Money
from matpay.domain.repository.material_repository import MaterialRepository


class AddMaterialHandler:

    def __init__(self, material_repo: MaterialRepository, currency: str) -> None:
        self._material_repo = material_repo
        self._currency = currency

    def handle(
        self,
        seller_id: str,
        name: str,
        price: str,
        stock_quantity: int,
        image_urls: list[str] | None = None,
        material_id: str | None = None,
    ) -> MaterialDTO:
        """Add a new material to a seller's catalog."""
        if not name or not name.strip():
            raise ValidationError("Material name is required")
        if stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        amount = Money.of(price, self._currency)
        if amount.is_zero:
            raise ValidationError("Price must be positive")

        # Auto-assign ID based on existing materials
        if material_id is None:
            existing = self._material_repo.list_by_seller(seller_id)
            material_id = f"{seller_id}-{len(existing) + 1}"
            while self._material_repo.get_by_id(material_id) is not None:
                material_id = f"{material_id}-1"
        elif self._material_repo.get_by_id(material_id) is not None:
            raise ValidationError(f"Material '{material_id}' already exists")

        material = Material(
            id=material_id,
            seller_id=seller_id,
            name=name.strip(),
            price=amount.rounded(),
            stock_quantity=stock_quantity,
            image_urls=list(image_urls or []),
        )
        self._material_repo.save(material)
        return material_to_dto(material)
