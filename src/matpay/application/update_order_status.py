"""Application service: Update Order Status use case.

Administrative fulfilment moves (PREPARING, READY_FOR_PICKUP,
OUT_FOR_DELIVERY, DELIVERED).  CANCELLED is delegated to the cancel use
case so stock and refunds are handled; CONFIRMED can only be reached by
payment.
"""

from __future__ import annotations

import logging

from matpay.application.cancel_order import CancelOrderHandler
from matpay.application.dto import OrderDTO, order_to_dto
from matpay.application.locking import KeyedLock
from matpay.application.ports import Notifier
from matpay.domain.exceptions import EntityNotFoundError, InvalidTransition
from matpay.domain.model.order import OrderStatus
from matpay.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cancel_handler: CancelOrderHandler,
        notifier: Notifier,
        locks: KeyedLock,
    ) -> None:
        self._order_repo = order_repo
        self._cancel = cancel_handler
        self._notifier = notifier
        self._locks = locks

    def handle(self, order_id: int, status: str, admin_notes: str | None = None) -> OrderDTO:
        target = OrderStatus.parse(status)

        if target == OrderStatus.CANCELLED:
            return self._cancel.handle(order_id, reason=admin_notes)
        if target in (OrderStatus.PENDING, OrderStatus.CONFIRMED):
            raise InvalidTransition(
                f"Orders cannot be moved to {target.value} manually; "
                f"confirmation happens through payment"
            )

        with self._locks.order(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            order.advance_to(target, admin_notes=admin_notes)
            self._order_repo.save(order)

        logger.info("Order %s moved to %s", order.order_number, target.value)
        try:
            self._notifier.notify(
                order.buyer_id,
                "Order Status Update",
                f"Your order {order.order_number} status has been updated to {target.value}",
            )
        except Exception:
            logger.exception("Notification failed for order %s", order.order_number)

        return order_to_dto(order)
