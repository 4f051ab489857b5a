"""Abstract repository for seller payout accounts."""

from __future__ import annotations

from abc import ABC, abstractmethod

from matpay.domain.model.payout_account import PayoutAccount


class PayoutAccountRepository(ABC):

    @abstractmethod
    def get_by_seller(self, seller_id: str) -> PayoutAccount | None:
        """Return the seller's payout account, or None."""

    @abstractmethod
    def get_by_account(self, bank_code: str, account_number: str) -> PayoutAccount | None:
        """Return the account registered for this bank account, or None."""

    @abstractmethod
    def save(self, account: PayoutAccount) -> None:
        """Create or replace the seller's payout account."""
