"""Application service: Transfer History use case (query)."""

from __future__ import annotations

from matpay.application.dto import PaymentDTO, payment_to_dto
from matpay.domain.repository.payment_repository import PaymentRepository


class TransferHistoryHandler:

    def __init__(self, payment_repo: PaymentRepository) -> None:
        self._payment_repo = payment_repo

    def handle(self, seller_id: str) -> list[PaymentDTO]:
        """Every payment of the seller that has a payout attempt, newest first."""
        return [payment_to_dto(p) for p in self._payment_repo.list_transfers_by_seller(seller_id)]
