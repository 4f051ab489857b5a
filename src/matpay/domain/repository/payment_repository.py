"""Abstract repository for Payment aggregate.

A payment is looked up three ways: by id (operators), by the external
charge reference (webhook and verification) and by the transfer code
(transfer notifications).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from matpay.domain.model.payment import Payment


class PaymentRepository(ABC):

    @abstractmethod
    def get_by_id(self, payment_id: int) -> Payment | None:
        """Return a payment by its ID, or None if not found."""

    @abstractmethod
    def get_by_reference(self, reference: str) -> Payment | None:
        """Return the payment carrying this external charge reference."""

    @abstractmethod
    def get_by_transfer_code(self, transfer_code: str) -> Payment | None:
        """Return the payment whose current transfer has this code."""

    @abstractmethod
    def list_by_order(self, order_id: int) -> list[Payment]:
        """Return every payment attempt for an order."""

    @abstractmethod
    def list_transfers_by_seller(self, seller_id: str) -> list[Payment]:
        """Return a seller's payments that carry a transfer, newest first."""

    @abstractmethod
    def save(self, payment: Payment) -> None:
        """Persist a new or updated payment (assigns an id to new ones)."""
