"""Typed gateway events.

Webhook bodies (``{"event": ..., "data": {...}}``) and verification
responses are decoded into one of these variants before anything acts
on them.  Event types this system does not understand become an
``UnhandledEvent`` instead of flowing through untyped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from matpay.domain.exceptions import ValidationError
from matpay.domain.model.payment import TransferStatus

CHARGE_SUCCESS = "charge.success"
TRANSFER_EVENTS = {
    "transfer.success": TransferStatus.SUCCESS,
    "transfer.failed": TransferStatus.FAILED,
    "transfer.reversed": TransferStatus.REVERSED,
}


@dataclass(frozen=True)
class ChargeSucceeded:
    reference: str
    transaction_id: str | None
    authorization_code: str | None
    payload: dict[str, Any]

    @staticmethod
    def from_data(data: dict[str, Any]) -> ChargeSucceeded:
        """Decode the ``data`` object of a charge (webhook or verification)."""
        reference = data.get("reference")
        if not reference:
            raise ValidationError("Charge data carries no reference")
        if not isinstance(reference, str):
            raise ValidationError(f"Charge reference must be a string, got {reference!r}")
        raw_id = data.get("id")
        if raw_id is not None and not isinstance(raw_id, (str, int)):
            raise ValidationError(f"Charge id must be a string or number, got {raw_id!r}")
        authorization = data.get("authorization") or {}
        if not isinstance(authorization, dict):
            raise ValidationError("Charge authorization must be an object")
        code = authorization.get("authorization_code")
        if code is not None and not isinstance(code, str):
            raise ValidationError("Authorization code must be a string")
        return ChargeSucceeded(
            reference=reference,
            transaction_id=str(raw_id) if raw_id is not None else None,
            authorization_code=code,
            payload=data,
        )


@dataclass(frozen=True)
class TransferOutcome:
    transfer_code: str
    status: TransferStatus
    payload: dict[str, Any]


@dataclass(frozen=True)
class UnhandledEvent:
    event_type: str
    payload: dict[str, Any]


GatewayEvent = Union[ChargeSucceeded, TransferOutcome, UnhandledEvent]


def parse_event(body: Any) -> GatewayEvent:
    """Decode a webhook body into a typed event."""
    if not isinstance(body, dict):
        raise ValidationError("Webhook body must be a JSON object")
    event_type = body.get("event")
    data = body.get("data")
    if not isinstance(event_type, str) or not isinstance(data, dict):
        raise ValidationError("Webhook body must carry 'event' and 'data'")

    if event_type == CHARGE_SUCCESS:
        return ChargeSucceeded.from_data(data)

    if event_type in TRANSFER_EVENTS:
        code = data.get("transfer_code")
        if not code:
            raise ValidationError(f"{event_type} carries no transfer_code")
        if not isinstance(code, str):
            raise ValidationError(f"{event_type} transfer_code must be a string")
        return TransferOutcome(
            transfer_code=str(code),
            status=TRANSFER_EVENTS[event_type],
            payload=data,
        )

    return UnhandledEvent(event_type=event_type, payload=data)
