"""Application service: Cancel Order use case.

PENDING and CONFIRMED orders can be cancelled.  A CONFIRMED order has
already withdrawn stock, which is returned; a completed payment is
marked REFUNDED.  Marking the refund records intent only: returning the
money through the gateway is a separate manual process.

The buyer is notified unless the order was cancelled before payment.
"""

from __future__ import annotations

import logging

from matpay.application.dto import OrderDTO, order_to_dto
from matpay.application.locking import KeyedLock
from matpay.application.ports import Notifier
from matpay.domain.exceptions import EntityNotFoundError
from matpay.domain.model.order import OrderStatus
from matpay.domain.model.payment import PaymentStatus
from matpay.domain.repository.order_repository import OrderRepository
from matpay.domain.repository.payment_repository import PaymentRepository
from matpay.domain.service.stock_adjuster import StockAdjuster

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        stock_adjuster: StockAdjuster,
        notifier: Notifier,
        locks: KeyedLock,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._stock = stock_adjuster
        self._notifier = notifier
        self._locks = locks

    def handle(self, order_id: int, reason: str | None = None) -> OrderDTO:
        with self._locks.order(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            # Validates the transition before anything is mutated.
            previous = order.cancel(reason)

            if previous == OrderStatus.CONFIRMED:
                self._stock.release_for_order(order)

            refunded = []
            for payment in self._payment_repo.list_by_order(order_id):
                if payment.status == PaymentStatus.COMPLETED:
                    payment.refund()
                    refunded.append(payment)

            self._order_repo.save(order)
            for payment in refunded:
                self._payment_repo.save(payment)
                logger.info(
                    "Payment %s marked REFUNDED; gateway reversal must be done separately",
                    payment.reference,
                )

        logger.info("Order %s cancelled (was %s)", order.order_number, previous.value)

        if previous != OrderStatus.PENDING:
            try:
                self._notifier.notify(
                    order.buyer_id,
                    "Order Status Update",
                    f"Your order {order.order_number} status has been updated to "
                    f"{order.status.value}",
                )
            except Exception:
                logger.exception("Notification failed for order %s", order.order_number)

        return order_to_dto(order, refunded[0] if refunded else None)
