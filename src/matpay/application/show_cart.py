"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from matpay.application.dto import CartDTO, cart_to_dto
from matpay.domain.model.cart import Cart
from matpay.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, buyer_id: str, seller_id: str) -> CartDTO:
        # A buyer who never added anything simply has an empty cart.
        cart = self._cart_repo.get(buyer_id, seller_id) or Cart(buyer_id, seller_id)
        return cart_to_dto(cart)
