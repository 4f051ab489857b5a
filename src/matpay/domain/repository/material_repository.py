"""Abstract repository for Material aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Stock changes go through ``withdraw_stock`` and
``restock``, which implementations must perform as a single atomic
read-modify-write per material so concurrent orders never lose updates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from matpay.domain.model.material import Material


class MaterialRepository(ABC):

    @abstractmethod
    def get_by_id(self, material_id: str) -> Material | None:
        """Return a material by its ID, or None if not found."""

    @abstractmethod
    def list_by_seller(self, seller_id: str) -> list[Material]:
        """Return every material a seller offers."""

    @abstractmethod
    def save(self, material: Material) -> None:
        """Persist a new or updated material."""

    @abstractmethod
    def withdraw_stock(self, material_id: str, quantity: int) -> int:
        """Atomically withdraw up to ``quantity`` units; return units taken."""

    @abstractmethod
    def restock(self, material_id: str, quantity: int) -> None:
        """Atomically return ``quantity`` units to stock."""
