"""Application service: Initialize Payment use case.

Opens a gateway checkout for a PENDING order and records the PENDING
payment that the webhook and the verification call will later complete.
The payment amounts are copied from the order's frozen split; nothing is
recomputed here.
"""

from __future__ import annotations

import logging

from matpay.application.dto import PaymentInitDTO
from matpay.application.locking import KeyedLock
from matpay.application.ports import PaymentGateway
from matpay.domain.exceptions import EntityNotFoundError, OrderNotPayable
from matpay.domain.model.order import Order
from matpay.domain.model.payment import Payment
from matpay.domain.repository.order_repository import OrderRepository
from matpay.domain.repository.payment_repository import PaymentRepository
from matpay.domain.service.reference_generator import ReferenceGenerator

logger = logging.getLogger(__name__)


class InitializePaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        gateway: PaymentGateway,
        references: ReferenceGenerator,
        locks: KeyedLock,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._gateway = gateway
        self._references = references
        self._locks = locks

    def handle(self, order_id: int) -> PaymentInitDTO:
        order = self._load_payable(order_id)

        reference = self._references.payment_reference(
            lambda r: self._payment_repo.get_by_reference(r) is not None
        )
        amount = order.total_amount.minor_units

        # Gateway call happens outside the order lock.
        init = self._gateway.initialize_payment(
            email=order.buyer_email,
            amount_minor_units=amount,
            reference=reference,
            metadata={
                "order_id": order.id,
                "order_number": order.order_number,
                "buyer_id": order.buyer_id,
                "seller_id": order.seller_id,
            },
        )

        with self._locks.order(order_id):
            # Re-check: a concurrent initialization may have won the race.
            order = self._load_payable(order_id)
            payment = Payment(
                id=None,
                order_id=order.id,  # type: ignore[arg-type]
                seller_id=order.seller_id,
                reference=init.reference,
                amount=order.total_amount,
                processing_fee=order.processing_fee,
                gateway_fee=order.gateway_fee,
                seller_amount=order.seller_amount,
            )
            self._payment_repo.save(payment)

        logger.info(
            "Payment %s initialized for order %s (%d minor units)",
            init.reference, order.order_number, amount,
        )
        return PaymentInitDTO(
            authorization_url=init.authorization_url,
            access_code=init.access_code,
            reference=init.reference,
            amount_minor_units=amount,
        )

    def _load_payable(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        if not order.is_payable:
            raise OrderNotPayable(
                f"Order {order.order_number} cannot be paid for "
                f"(status {order.status.value})"
            )
        if any(p.is_live for p in self._payment_repo.list_by_order(order_id)):
            raise OrderNotPayable(
                f"Order {order.order_number} already has a payment in progress"
            )
        return order
