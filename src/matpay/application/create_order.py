"""Application service: Create Order use case.

Turns a buyer's cart for one seller into a PENDING order.  Line items
snapshot the material's current price, name and image so later catalog
edits never change a placed order.  The cart is emptied in the same
operation; if that fails the order is removed again so neither change
becomes visible on its own.
"""

from __future__ import annotations

import logging

from matpay.application.dto import OrderDTO, order_to_dto
from matpay.application.locking import KeyedLock
from matpay.domain.exceptions import EntityNotFoundError, ValidationError
from matpay.domain.model.order import DeliveryMethod, Order, OrderLineItem
from matpay.domain.model.value_objects import Quantity
from matpay.domain.repository.cart_repository import CartRepository
from matpay.domain.repository.material_repository import MaterialRepository
from matpay.domain.repository.order_repository import OrderRepository
from matpay.domain.service.reference_generator import ReferenceGenerator

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        material_repo: MaterialRepository,
        references: ReferenceGenerator,
        locks: KeyedLock,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._material_repo = material_repo
        self._references = references
        self._locks = locks

    def handle(
        self,
        buyer_id: str,
        buyer_email: str,
        seller_id: str,
        delivery_method: str = DeliveryMethod.SCHOOL_PICKUP.value,
        delivery_address: str | None = None,
        delivery_notes: str | None = None,
    ) -> OrderDTO:
        """Create a new order from the buyer's cart.

        Steps:
        1. Load the cart (fail if missing or empty).
        2. Build OrderLineItems with *current* material data (snapshot).
        3. Let the Order aggregate validate and freeze the fee split.
        4. Persist the order, then empty the cart.
        """
        method = self._parse_delivery_method(delivery_method)

        with self._locks.hold(f"cart:{buyer_id}:{seller_id}"):
            cart = self._cart_repo.get(buyer_id, seller_id)
            if cart is None or cart.is_empty:
                raise ValidationError("Cart is empty")

            line_items: list[OrderLineItem] = []
            for cart_item in cart.items:
                material = self._material_repo.get_by_id(cart_item.material_id)
                if material is None or not material.is_active:
                    raise EntityNotFoundError(
                        f"Material not found: '{cart_item.material_id}'"
                    )
                line_items.append(
                    OrderLineItem(
                        material_id=material.id,
                        material_name=material.name,
                        material_image=material.primary_image,
                        quantity=Quantity(cart_item.quantity),
                        unit_price=material.price,  # <-- price snapshot
                    )
                )

            order_number = self._references.order_number(
                lambda n: self._order_repo.get_by_order_number(n) is not None
            )
            order = Order.create(
                order_number=order_number,
                buyer_id=buyer_id,
                buyer_email=buyer_email,
                seller_id=seller_id,
                items=line_items,
                delivery_method=method,
                delivery_address=delivery_address,
                delivery_notes=delivery_notes,
            )
            self._order_repo.save(order)

            cart.clear()
            try:
                self._cart_repo.save(cart)
            except Exception:
                logger.error(
                    "Clearing cart failed; rolling back order %s", order.order_number
                )
                self._order_repo.delete(order.id)  # type: ignore[arg-type]
                raise

        logger.info(
            "Order %s created for buyer %s (total %s)",
            order.order_number, buyer_id, order.total_amount,
        )
        return order_to_dto(order)

    @staticmethod
    def _parse_delivery_method(value: str) -> DeliveryMethod:
        try:
            return DeliveryMethod(value.strip().upper())
        except (ValueError, AttributeError):
            raise ValidationError(f"Unknown delivery method: {value!r}") from None
