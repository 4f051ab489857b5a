"""Abstract repository for Cart aggregate (one cart per buyer and seller)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from matpay.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get(self, buyer_id: str, seller_id: str) -> Cart | None:
        """Return the buyer's cart for a seller, or None."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""
