"""Application service: Verify Payment use case.

The client-side confirmation path.  Asks the gateway for the charge's
current state and, only when the gateway reports success, feeds it into
the same ``ApplyChargeHandler`` the webhook uses.
"""

from __future__ import annotations

from matpay.application.apply_charge import ApplyChargeHandler
from matpay.application.dto import ChargeResultDTO
from matpay.application.ports import PaymentGateway
from matpay.domain.exceptions import ValidationError
from matpay.domain.model.gateway_events import ChargeSucceeded


class VerifyPaymentHandler:

    def __init__(self, gateway: PaymentGateway, apply_charge: ApplyChargeHandler) -> None:
        self._gateway = gateway
        self._apply_charge = apply_charge

    def handle(self, reference: str) -> ChargeResultDTO:
        if not reference or not reference.strip():
            raise ValidationError("Payment reference is required")
        reference = reference.strip()

        verification = self._gateway.verify_payment(reference)
        if not verification.succeeded:
            raise ValidationError(
                f"Payment verification failed (gateway status: {verification.gateway_status})"
            )

        data = dict(verification.data)
        data.setdefault("reference", reference)
        if data["reference"] != reference:
            raise ValidationError(
                f"Gateway returned reference {data['reference']!r} for {reference!r}"
            )

        return self._apply_charge.handle(ChargeSucceeded.from_data(data))
