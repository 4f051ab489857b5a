"""Payment aggregate: one external charge attempt for one order.

The external ``reference`` is the idempotency key: a payment moves to
COMPLETED at most once no matter how many confirmations arrive for it.
The seller payout (transfer) is embedded but has its own lifecycle and
never changes ``status``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from matpay.domain.exceptions import InvalidTransition
from matpay.domain.model.value_objects import Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"


class TransferStatus(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    REVERSED = "reversed"


@dataclass
class TransferState:
    code: str
    reference: str
    status: TransferStatus = TransferStatus.PENDING
    transferred_at: datetime | None = None


@dataclass
class Payment:
    id: int | None
    order_id: int
    seller_id: str
    reference: str
    amount: Money
    processing_fee: Money
    gateway_fee: Money
    seller_amount: Money
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = None
    authorization_code: str | None = None
    paid_at: datetime | None = None
    gateway_payload: dict[str, Any] | None = None
    transfer: TransferState | None = None
    receipt_number: str | None = None
    receipt_url: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    # --- State transitions ----------------------------------------------------

    def complete(
        self,
        transaction_id: str | None,
        authorization_code: str | None,
        payload: dict[str, Any],
        now: datetime | None = None,
    ) -> None:
        """Transition PENDING -> COMPLETED and keep the raw gateway payload."""
        if self.status != PaymentStatus.PENDING:
            raise InvalidTransition(
                f"Cannot complete payment {self.reference}: status is {self.status.value}"
            )
        self.status = PaymentStatus.COMPLETED
        self.transaction_id = transaction_id
        self.authorization_code = authorization_code
        self.paid_at = now or _utcnow()
        self.gateway_payload = payload

    def refund(self) -> None:
        """Transition COMPLETED -> REFUNDED (records intent only)."""
        if self.status != PaymentStatus.COMPLETED:
            raise InvalidTransition(
                f"Cannot refund payment {self.reference}: status is {self.status.value}"
            )
        self.status = PaymentStatus.REFUNDED

    # --- Transfer sub-state ---------------------------------------------------

    def record_transfer(self, code: str, reference: str) -> None:
        """Start tracking a new payout attempt, replacing any previous one."""
        self.transfer = TransferState(code=code, reference=reference)

    def mark_transfer(self, status: TransferStatus, now: datetime | None = None) -> None:
        if self.transfer is None:
            raise InvalidTransition(f"Payment {self.reference} has no transfer on record")
        self.transfer.status = status
        if status == TransferStatus.SUCCESS:
            self.transfer.transferred_at = now or _utcnow()

    def attach_receipt(self, number: str, url: str) -> None:
        self.receipt_number = number
        self.receipt_url = url

    # --- Computed properties --------------------------------------------------

    @property
    def is_applied(self) -> bool:
        """True once the charge has been applied (COMPLETED, or REFUNDED after it)."""
        return self.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)

    @property
    def is_live(self) -> bool:
        return self.status != PaymentStatus.REFUNDED
