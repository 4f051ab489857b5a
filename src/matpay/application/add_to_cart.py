"""Application service: Add To Cart use case."""

from __future__ import annotations

from matpay.application.dto import CartDTO, cart_to_dto
from matpay.application.locking import KeyedLock
from matpay.domain.exceptions import EntityNotFoundError, ValidationError
from matpay.domain.model.cart import Cart
from matpay.domain.repository.cart_repository import CartRepository
from matpay.domain.repository.material_repository import MaterialRepository


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        material_repo: MaterialRepository,
        locks: KeyedLock,
    ) -> None:
        self._cart_repo = cart_repo
        self._material_repo = material_repo
        self._locks = locks

    def handle(self, buyer_id: str, seller_id: str, material_id: str, quantity: int) -> CartDTO:
        """Add a material to the buyer's cart for its seller.

        Stock is checked against the whole quantity in the cart, not just
        the units being added.  Nothing is reserved here; stock only moves
        when an order is confirmed.
        """
        material = self._material_repo.get_by_id(material_id)
        if material is None or not material.is_active:
            raise EntityNotFoundError("Material not found")
        if material.seller_id != seller_id:
            raise ValidationError(
                f"Material '{material.name}' is not sold by seller {seller_id}"
            )

        with self._locks.hold(f"cart:{buyer_id}:{seller_id}"):
            cart = self._cart_repo.get(buyer_id, seller_id) or Cart(buyer_id, seller_id)
            if not material.has_stock_for(cart.quantity_of(material_id) + quantity):
                raise ValidationError("Insufficient stock")
            cart.add(material_id, quantity)
            self._cart_repo.save(cart)

        return cart_to_dto(cart)
