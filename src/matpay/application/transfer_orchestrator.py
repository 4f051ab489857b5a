"""Application service: Transfer Orchestrator.

Sends the seller's share of a completed charge to the seller's
registered payout account.  The payout is deliberately decoupled from
the charge: a failed or missing transfer never changes the payment or
order status, it only leaves the transfer fields unset so an operator
can call ``retry``.

Transfer outcomes (success / failed / reversed) arrive later through the
gateway webhook and are recorded by ``record_outcome``; nothing here
polls the gateway.
"""

from __future__ import annotations

import logging

from matpay.application.dto import PaymentDTO, payment_to_dto
from matpay.application.locking import KeyedLock
from matpay.application.ports import PaymentGateway, TransferInitiation
from matpay.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    PaymentNotFound,
    PayoutDestinationMissing,
)
from matpay.domain.model.gateway_events import TransferOutcome
from matpay.domain.model.order import Order
from matpay.domain.model.payment import Payment, PaymentStatus, TransferStatus
from matpay.domain.model.payout_account import PayoutAccount
from matpay.domain.repository.order_repository import OrderRepository
from matpay.domain.repository.payment_repository import PaymentRepository
from matpay.domain.repository.payout_account_repository import PayoutAccountRepository
from matpay.domain.service.reference_generator import ReferenceGenerator

logger = logging.getLogger(__name__)


class TransferOrchestrator:

    def __init__(
        self,
        payment_repo: PaymentRepository,
        order_repo: OrderRepository,
        payout_repo: PayoutAccountRepository,
        gateway: PaymentGateway,
        references: ReferenceGenerator,
        locks: KeyedLock,
    ) -> None:
        self._payment_repo = payment_repo
        self._order_repo = order_repo
        self._payout_repo = payout_repo
        self._gateway = gateway
        self._references = references
        self._locks = locks

    def initiate_or_fail(self, payment: Payment, order: Order) -> Payment:
        """Attempt the payout for a freshly applied charge.

        Never raises: a missing payout destination or a gateway failure is
        logged and the payment is returned with its transfer fields unset.
        """
        account = self._payout_repo.get_by_seller(payment.seller_id)
        if account is None or not account.is_payout_destination:
            logger.info(
                "Seller %s has no payout destination; transfer for order %s left for retry",
                payment.seller_id, order.order_number,
            )
            return payment

        try:
            result = self._send(payment, order, account, retry=False)
        except Exception:
            logger.exception(
                "Transfer for order %s failed; left unset for operator retry",
                order.order_number,
            )
            return payment

        return self._record(payment, result)

    def retry(self, payment_id: int) -> PaymentDTO:
        """Operator-triggered payout.  Always starts a new transfer."""
        payment = self._payment_repo.get_by_id(payment_id)
        if payment is None:
            raise PaymentNotFound(f"Payment #{payment_id} not found")
        if payment.status != PaymentStatus.COMPLETED:
            raise ConflictError(
                f"Payment {payment.reference} is {payment.status.value}; "
                f"only completed payments can be paid out"
            )
        if payment.transfer is not None and payment.transfer.status == TransferStatus.SUCCESS:
            raise ConflictError(f"Payment {payment.reference} was already paid out")

        order = self._order_repo.get_by_id(payment.order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{payment.order_id} not found")

        account = self._payout_repo.get_by_seller(payment.seller_id)
        if account is None or not account.is_payout_destination:
            raise PayoutDestinationMissing(
                f"Seller {payment.seller_id} payment account not configured"
            )

        result = self._send(payment, order, account, retry=True)
        payment = self._record(payment, result)
        logger.info(
            "Transfer retry %s initiated for order %s", result.reference, order.order_number
        )
        return payment_to_dto(payment)

    def record_outcome(self, outcome: TransferOutcome) -> bool:
        """Apply a transfer notification.  Returns False for unknown codes."""
        payment = self._payment_repo.get_by_transfer_code(outcome.transfer_code)
        if payment is None:
            logger.warning("Payment not found for transfer code: %s", outcome.transfer_code)
            return False

        with self._locks.order(payment.order_id):
            payment = self._payment_repo.get_by_id(payment.id)  # type: ignore[arg-type]
            if payment is None or payment.transfer is None \
                    or payment.transfer.code != outcome.transfer_code:
                # Superseded by a newer attempt while we were waiting.
                logger.warning(
                    "Transfer %s is no longer current; outcome %s ignored",
                    outcome.transfer_code, outcome.status.value,
                )
                return False
            payment.mark_transfer(outcome.status)
            self._payment_repo.save(payment)

        logger.info("Transfer %s: %s", outcome.transfer_code, outcome.status.value)
        return True

    # --- Internal helpers -----------------------------------------------------

    def _send(
        self,
        payment: Payment,
        order: Order,
        account: PayoutAccount,
        retry: bool,
    ) -> TransferInitiation:
        reason = (
            f"Retry payment for order {order.order_number}"
            if retry
            else f"Payment for order {order.order_number}"
        )
        return self._gateway.initiate_transfer(
            amount_minor_units=payment.seller_amount.minor_units,
            recipient_code=account.recipient_code,  # type: ignore[arg-type]
            reason=reason,
            reference=self._references.transfer_reference(retry=retry),
        )

    def _record(self, payment: Payment, result: TransferInitiation) -> Payment:
        with self._locks.order(payment.order_id):
            current = self._payment_repo.get_by_id(payment.id)  # type: ignore[arg-type]
            if current is None:
                raise PaymentNotFound(f"Payment #{payment.id} not found")
            current.record_transfer(result.transfer_code, result.reference)
            self._payment_repo.save(current)
        return current
