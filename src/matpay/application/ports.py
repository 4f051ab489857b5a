"""Collaborator interfaces the application layer depends on.

Concrete adapters (Paystack over HTTP, file-backed receipts and
notifications) live in the infrastructure layer; tests use fakes.
Gateway responses are decoded into the small typed results below so no
handler reads raw gateway JSON except the audit payload it stores.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from matpay.domain.model.order import Order
from matpay.domain.model.payment import Payment


@dataclass(frozen=True)
class PaymentInitialization:
    authorization_url: str
    access_code: str
    reference: str


@dataclass(frozen=True)
class ChargeVerification:
    succeeded: bool
    gateway_status: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransferInitiation:
    transfer_code: str
    reference: str


@dataclass(frozen=True)
class AccountResolution:
    verified: bool
    account_name: str | None = None


class PaymentGateway(ABC):
    """Outbound calls to the payment gateway.

    Every method raises ``ExternalGatewayError`` when the call fails.
    """

    @abstractmethod
    def initialize_payment(
        self,
        email: str,
        amount_minor_units: int,
        reference: str,
        metadata: dict[str, Any],
    ) -> PaymentInitialization:
        """Open a checkout for the buyer."""

    @abstractmethod
    def verify_payment(self, reference: str) -> ChargeVerification:
        """Ask the gateway for the current state of a charge."""

    @abstractmethod
    def initiate_transfer(
        self,
        amount_minor_units: int,
        recipient_code: str,
        reason: str,
        reference: str,
    ) -> TransferInitiation:
        """Send a payout from the platform balance to a recipient."""

    @abstractmethod
    def verify_account_number(self, account_number: str, bank_code: str) -> AccountResolution:
        """Resolve a bank account number."""

    @abstractmethod
    def create_subaccount(
        self,
        business_name: str,
        bank_code: str,
        account_number: str,
        contact_name: str,
        description: str,
    ) -> str:
        """Register a settlement subaccount; return its code."""

    @abstractmethod
    def create_transfer_recipient(
        self,
        name: str,
        account_number: str,
        bank_code: str,
        description: str,
    ) -> str:
        """Register a transfer recipient; return its recipient code."""


class Notifier(ABC):

    @abstractmethod
    def notify(self, user_id: str, title: str, content: str, kind: str = "GENERAL") -> None:
        """Deliver a message to a user."""


class ReceiptGenerator(ABC):

    @abstractmethod
    def generate(self, receipt_number: str, order: Order, payment: Payment) -> str:
        """Render a receipt and return the url it can be fetched from."""
