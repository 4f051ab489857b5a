"""JSON-file-backed implementation of PaymentRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from matpay.domain.model.payment import Payment, PaymentStatus, TransferState, TransferStatus
from matpay.domain.model.value_objects import Money
from matpay.domain.repository.payment_repository import PaymentRepository
from matpay.infrastructure.persistence.json_store import JsonFile, dump_dt, load_dt


class JsonPaymentRepository(PaymentRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- PaymentRepository interface ------------------------------------------

    def get_by_id(self, payment_id: int) -> Payment | None:
        return self._find(lambda raw: raw["id"] == payment_id)

    def get_by_reference(self, reference: str) -> Payment | None:
        return self._find(lambda raw: raw["reference"] == reference)

    def get_by_transfer_code(self, transfer_code: str) -> Payment | None:
        return self._find(
            lambda raw: raw.get("transfer") is not None
            and raw["transfer"]["code"] == transfer_code
        )

    def list_by_order(self, order_id: int) -> list[Payment]:
        return [self._to_domain(raw) for raw in self._file.load() if raw["order_id"] == order_id]

    def list_transfers_by_seller(self, seller_id: str) -> list[Payment]:
        payments = [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["seller_id"] == seller_id and raw.get("transfer") is not None
        ]
        return sorted(payments, key=lambda p: (p.created_at, p.id or 0), reverse=True)

    def save(self, payment: Payment) -> None:
        with self._file.lock:
            if payment.id is None:
                payments = self._file.load()
                payment.id = max((p["id"] for p in payments), default=0) + 1
            self._file.upsert(self._to_raw(payment), key="id")

    def _find(self, predicate) -> Payment | None:
        for raw in self._file.load():
            if predicate(raw):
                return self._to_domain(raw)
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(payment: Payment) -> dict:
        transfer = payment.transfer
        return {
            "id": payment.id,
            "order_id": payment.order_id,
            "seller_id": payment.seller_id,
            "reference": payment.reference,
            "currency": payment.amount.currency,
            "amount": str(payment.amount.amount),
            "processing_fee": str(payment.processing_fee.amount),
            "gateway_fee": str(payment.gateway_fee.amount),
            "seller_amount": str(payment.seller_amount.amount),
            "status": payment.status.value,
            "transaction_id": payment.transaction_id,
            "authorization_code": payment.authorization_code,
            "paid_at": dump_dt(payment.paid_at),
            "gateway_payload": payment.gateway_payload,
            "transfer": None if transfer is None else {
                "code": transfer.code,
                "reference": transfer.reference,
                "status": transfer.status.value,
                "transferred_at": dump_dt(transfer.transferred_at),
            },
            "receipt_number": payment.receipt_number,
            "receipt_url": payment.receipt_url,
            "created_at": payment.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Payment:
        currency = raw["currency"]
        transfer = raw.get("transfer")
        return Payment(
            id=raw["id"],
            order_id=raw["order_id"],
            seller_id=raw["seller_id"],
            reference=raw["reference"],
            amount=Money(Decimal(raw["amount"]), currency),
            processing_fee=Money(Decimal(raw["processing_fee"]), currency),
            gateway_fee=Money(Decimal(raw["gateway_fee"]), currency),
            seller_amount=Money(Decimal(raw["seller_amount"]), currency),
            status=PaymentStatus(raw["status"]),
            transaction_id=raw.get("transaction_id"),
            authorization_code=raw.get("authorization_code"),
            paid_at=load_dt(raw.get("paid_at")),
            gateway_payload=raw.get("gateway_payload"),
            transfer=None if transfer is None else TransferState(
                code=transfer["code"],
                reference=transfer["reference"],
                status=TransferStatus(transfer["status"]),
                transferred_at=load_dt(transfer.get("transferred_at")),
            ),
            receipt_number=raw.get("receipt_number"),
            receipt_url=raw.get("receipt_url"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
