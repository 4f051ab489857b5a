"""Application service: gateway webhook ingestion.

The signature is an HMAC-SHA512 of the exact raw request body keyed with
the gateway secret.  Only a signature mismatch is reported back as a
failure.  Anything the gateway could not fix by redelivering (unknown
references, duplicates, event types we do not handle, undecodable
bodies) is logged and acknowledged so the gateway stops retrying.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass

from matpay.application.apply_charge import ApplyChargeHandler
from matpay.application.transfer_orchestrator import TransferOrchestrator
from matpay.domain.exceptions import AuthenticationError, EntityNotFoundError, ValidationError
from matpay.domain.model.gateway_events import (
    ChargeSucceeded,
    TransferOutcome,
    parse_event,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-paystack-signature"


@dataclass(frozen=True)
class WebhookResult:
    event_type: str
    outcome: str  # applied | duplicate | updated | unknown_reference | ignored


def compute_signature(secret: str, raw_body: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha512).hexdigest()


def verify_signature(secret: str, raw_body: bytes, signature: str | None) -> None:
    if not signature or not secret:
        raise AuthenticationError("Invalid signature")
    expected = compute_signature(secret, raw_body)
    if not hmac.compare_digest(expected, signature.strip().lower()):
        raise AuthenticationError("Invalid signature")


class WebhookHandler:

    def __init__(
        self,
        secret: str,
        apply_charge: ApplyChargeHandler,
        transfers: TransferOrchestrator,
    ) -> None:
        self._secret = secret
        self._apply_charge = apply_charge
        self._transfers = transfers

    def handle(self, raw_body: bytes, signature: str | None) -> WebhookResult:
        try:
            verify_signature(self._secret, raw_body, signature)
        except AuthenticationError:
            logger.warning("Rejected webhook with invalid signature")
            raise

        try:
            event = parse_event(json.loads(raw_body))
        except (ValueError, ValidationError) as exc:
            logger.warning("Ignoring undecodable webhook body: %s", exc)
            return WebhookResult(event_type="unknown", outcome="ignored")

        if isinstance(event, ChargeSucceeded):
            try:
                result = self._apply_charge.handle(event)
            except EntityNotFoundError as exc:
                # Unknown references and payments whose order is gone.
                logger.warning("Acknowledging charge.success without effect: %s", exc)
                return WebhookResult("charge.success", "unknown_reference")
            return WebhookResult(
                "charge.success", "applied" if result.applied else "duplicate"
            )

        if isinstance(event, TransferOutcome):
            event_type = f"transfer.{event.status.value}"
            updated = self._transfers.record_outcome(event)
            return WebhookResult(event_type, "updated" if updated else "unknown_reference")

        logger.info("Unhandled webhook event: %s", event.event_type)
        return WebhookResult(event.event_type, "ignored")
