"""Application service: Remove From Cart use case."""

from __future__ import annotations

from matpay.application.dto import CartDTO, cart_to_dto
from matpay.application.locking import KeyedLock
from matpay.domain.exceptions import EntityNotFoundError
from matpay.domain.repository.cart_repository import CartRepository


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository, locks: KeyedLock) -> None:
        self._cart_repo = cart_repo
        self._locks = locks

    def handle(self, buyer_id: str, seller_id: str, material_id: str) -> CartDTO:
        with self._locks.hold(f"cart:{buyer_id}:{seller_id}"):
            cart = self._cart_repo.get(buyer_id, seller_id)
            if cart is None:
                raise EntityNotFoundError("Cart not found")
            cart.remove(material_id)
            self._cart_repo.save(cart)
        return cart_to_dto(cart)
