"""Paystack implementation of the PaymentGateway port over HTTPS.

All amounts go over the wire in minor units.  Every failure (network,
non-2xx status, ``"status": false`` in the body) surfaces as
``ExternalGatewayError`` carrying the gateway's message.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from matpay.application.ports import (
    AccountResolution,
    ChargeVerification,
    PaymentGateway,
    PaymentInitialization,
    TransferInitiation,
)
from matpay.domain.exceptions import ExternalGatewayError

logger = logging.getLogger(__name__)


class PaystackClient(PaymentGateway):

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        currency: str = "GHS",
        callback_url: str | None = None,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._currency = currency
        self._callback_url = callback_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {secret_key}",
                "Content-Type": "application/json",
            }
        )

    # --- Charges --------------------------------------------------------------

    def initialize_payment(
        self,
        email: str,
        amount_minor_units: int,
        reference: str,
        metadata: dict[str, Any],
    ) -> PaymentInitialization:
        payload: dict[str, Any] = {
            "email": email,
            "amount": amount_minor_units,
            "currency": self._currency,
            "reference": reference,
            "metadata": metadata,
        }
        if self._callback_url:
            payload["callback_url"] = self._callback_url
        data = self._request("POST", "/transaction/initialize", json=payload)
        return PaymentInitialization(
            authorization_url=data["authorization_url"],
            access_code=data["access_code"],
            reference=data.get("reference", reference),
        )

    def verify_payment(self, reference: str) -> ChargeVerification:
        data = self._request("GET", f"/transaction/verify/{reference}")
        status = str(data.get("status", "unknown"))
        return ChargeVerification(succeeded=status == "success", gateway_status=status, data=data)

    # --- Transfers ------------------------------------------------------------

    def initiate_transfer(
        self,
        amount_minor_units: int,
        recipient_code: str,
        reason: str,
        reference: str,
    ) -> TransferInitiation:
        data = self._request(
            "POST",
            "/transfer",
            json={
                "source": "balance",
                "amount": amount_minor_units,
                "recipient": recipient_code,
                "reason": reason,
                "currency": self._currency,
                "reference": reference,
            },
        )
        return TransferInitiation(
            transfer_code=data["transfer_code"],
            reference=data.get("reference", reference),
        )

    # --- Payout accounts ------------------------------------------------------

    def verify_account_number(self, account_number: str, bank_code: str) -> AccountResolution:
        try:
            data = self._request(
                "GET",
                "/bank/resolve",
                params={"account_number": account_number, "bank_code": bank_code},
            )
        except ExternalGatewayError as exc:
            # Paystack answers an unknown account with a 422, not a transport error.
            if exc.status_code == 422:
                return AccountResolution(verified=False)
            raise
        return AccountResolution(verified=True, account_name=data.get("account_name"))

    def create_subaccount(
        self,
        business_name: str,
        bank_code: str,
        account_number: str,
        contact_name: str,
        description: str,
    ) -> str:
        data = self._request(
            "POST",
            "/subaccount",
            json={
                "business_name": business_name,
                "settlement_bank": bank_code,
                "account_number": account_number,
                "percentage_charge": 0,
                "description": description,
                "primary_contact_name": contact_name,
            },
        )
        return data["subaccount_code"]

    def create_transfer_recipient(
        self,
        name: str,
        account_number: str,
        bank_code: str,
        description: str,
    ) -> str:
        data = self._request(
            "POST",
            "/transferrecipient",
            json={
                "type": "nuban",
                "name": name,
                "account_number": account_number,
                "bank_code": bank_code,
                "currency": self._currency,
                "description": description,
            },
        )
        return data["recipient_code"]

    # --- HTTP -----------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Paystack %s %s failed: %s", method, path, exc)
            raise ExternalGatewayError(f"Payment gateway unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok or not body.get("status", False):
            message = body.get("message") or response.reason or "Unknown gateway error"
            logger.error(
                "Paystack %s %s returned %s: %s", method, path, response.status_code, message
            )
            raise ExternalGatewayError(message, status_code=response.status_code)

        return body.get("data") or {}
