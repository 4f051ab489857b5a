"""Application service: List Materials use case (query)."""

from __future__ import annotations

from matpay.application.dto import MaterialDTO, material_to_dto
from matpay.domain.repository.material_repository import MaterialRepository


class ListMaterialsHandler:

    def __init__(self, material_repo: MaterialRepository) -> None:
        self._material_repo = material_repo

    def handle(self, seller_id: str, include_inactive: bool = False) -> list[MaterialDTO]:
        materials = self._material_repo.list_by_seller(seller_id)
        if not include_inactive:
            materials = [m for m in materials if m.is_active]
        return [material_to_dto(m) for m in sorted(materials, key=lambda m: m.name.lower())]
