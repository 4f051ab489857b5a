"""Application service: Apply Charge, the payment state machine entry point.

Both confirmation paths end here: the gateway webhook (``charge.success``)
and the client-side verification call.  The external reference is the
idempotency key.  Under the order lock, the first caller to see the
payment PENDING moves it to COMPLETED and confirms the order, stores
both, then commits stock line by line.  Every later caller sees it
already applied and returns without side effects.

Once the charge is applied the money has moved, so the follow-up steps
(notification, seller payout, receipt) run after the lock is released
and each failure is logged instead of undoing the charge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from matpay.application.dto import ChargeResultDTO, order_to_dto, payment_to_dto
from matpay.application.locking import KeyedLock
from matpay.application.ports import Notifier, ReceiptGenerator
from matpay.application.transfer_orchestrator import TransferOrchestrator
from matpay.domain.exceptions import EntityNotFoundError, UnknownPayment
from matpay.domain.model.gateway_events import ChargeSucceeded
from matpay.domain.model.order import Order, OrderStatus
from matpay.domain.model.payment import Payment
from matpay.domain.repository.order_repository import OrderRepository
from matpay.domain.repository.payment_repository import PaymentRepository
from matpay.domain.service.reference_generator import ReferenceGenerator
from matpay.domain.service.stock_adjuster import StockAdjuster

logger = logging.getLogger(__name__)


@dataclass
class _Applied:
    payment: Payment
    order: Order
    applied: bool
    confirmed: bool


class ApplyChargeHandler:

    def __init__(
        self,
        payment_repo: PaymentRepository,
        order_repo: OrderRepository,
        stock_adjuster: StockAdjuster,
        transfers: TransferOrchestrator,
        notifier: Notifier,
        receipts: ReceiptGenerator,
        references: ReferenceGenerator,
        locks: KeyedLock,
    ) -> None:
        self._payment_repo = payment_repo
        self._order_repo = order_repo
        self._stock = stock_adjuster
        self._transfers = transfers
        self._notifier = notifier
        self._receipts = receipts
        self._references = references
        self._locks = locks

    def handle(self, charge: ChargeSucceeded) -> ChargeResultDTO:
        found = self._payment_repo.get_by_reference(charge.reference)
        if found is None:
            logger.warning("Payment not found for reference: %s", charge.reference)
            raise UnknownPayment(f"No payment with reference {charge.reference}")

        with self._locks.order(found.order_id):
            state = self._apply_locked(charge)

        payment, order = state.payment, state.order
        if not state.applied:
            logger.info("Payment already processed: %s", charge.reference)
            return ChargeResultDTO(
                applied=False,
                order=order_to_dto(order, payment),
                payment=payment_to_dto(payment),
            )

        logger.info(
            "Charge %s applied to order %s", charge.reference, order.order_number
        )

        if state.confirmed:
            self._isolated(
                "notification",
                order,
                lambda: self._notifier.notify(
                    order.buyer_id,
                    "Payment Successful",
                    f"Your payment for order {order.order_number} has been confirmed. "
                    f"Order status: {order.status.value}.",
                    kind="PAYMENT",
                ),
            )
            self._isolated(
                "transfer", order, lambda: self._transfers.initiate_or_fail(payment, order)
            )
        else:
            logger.warning(
                "Charge %s arrived for order %s in status %s; no payout sent, "
                "needs operator follow-up",
                charge.reference, order.order_number, order.status.value,
            )

        self._isolated("receipt", order, lambda: self._issue_receipt(payment.id, order))

        payment = self._payment_repo.get_by_id(payment.id) or payment  # type: ignore[arg-type]
        return ChargeResultDTO(
            applied=True,
            order=order_to_dto(order, payment),
            payment=payment_to_dto(payment),
        )

    # --- Internal helpers -----------------------------------------------------

    def _apply_locked(self, charge: ChargeSucceeded) -> _Applied:
        payment = self._payment_repo.get_by_reference(charge.reference)
        if payment is None:
            raise UnknownPayment(f"No payment with reference {charge.reference}")
        order = self._order_repo.get_by_id(payment.order_id)
        if order is None:
            raise EntityNotFoundError(
                f"Order #{payment.order_id} for payment {payment.reference} not found"
            )

        if payment.is_applied:
            return _Applied(payment, order, applied=False, confirmed=False)

        payment.complete(
            transaction_id=charge.transaction_id,
            authorization_code=charge.authorization_code,
            payload=charge.payload,
        )

        confirmed = order.status == OrderStatus.PENDING
        if confirmed:
            order.confirm()
            self._order_repo.save(order)
        self._payment_repo.save(payment)

        # The transition is stored before any stock moves, so a redelivery
        # after a stock failure is a no-op instead of a second withdrawal.
        if confirmed:
            self._isolated(
                "stock",
                order,
                lambda: self._stock.commit_for_order(order, checkpoint=self._order_repo.save),
            )
        return _Applied(payment, order, applied=True, confirmed=confirmed)

    def _issue_receipt(self, payment_id: int, order: Order) -> None:
        number = self._references.receipt_number()
        payment = self._payment_repo.get_by_id(payment_id)
        if payment is None:
            return
        url = self._receipts.generate(number, order, payment)
        with self._locks.order(order.id):  # type: ignore[arg-type]
            payment = self._payment_repo.get_by_id(payment_id)
            if payment is None:
                return
            payment.attach_receipt(number, url)
            self._payment_repo.save(payment)

    @staticmethod
    def _isolated(step: str, order: Order, action: Callable[[], object]) -> None:
        try:
            action()
        except Exception:
            logger.exception(
                "Post-charge %s step failed for order %s; flagged for operator follow-up",
                step, order.order_number,
            )
