"""Domain service: fee split between platform and seller.

The buyer pays the processing fee on top of the cart subtotal, so the
seller always receives the full subtotal.  The gateway fee is an
estimate kept for reporting; no party is charged for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from matpay.domain.exceptions import InvalidAmount
from matpay.domain.model.value_objects import Money

PROCESSING_RATE = Decimal("0.029")
GATEWAY_RATE_ESTIMATE = Decimal("0.015")


@dataclass(frozen=True)
class Split:
    subtotal: Money
    processing_fee: Money
    gateway_fee_estimate: Money
    total_amount: Money
    seller_amount: Money


def compute_split(subtotal: Money) -> Split:
    """Compute fees, buyer total and seller payout for a subtotal."""
    if subtotal.amount <= Decimal("0"):
        raise InvalidAmount(f"Subtotal must be positive, got {subtotal}")

    subtotal = subtotal.rounded()
    processing_fee = subtotal.apply_rate(PROCESSING_RATE)
    total_amount = subtotal + processing_fee
    return Split(
        subtotal=subtotal,
        processing_fee=processing_fee,
        gateway_fee_estimate=total_amount.apply_rate(GATEWAY_RATE_ESTIMATE),
        total_amount=total_amount,
        seller_amount=subtotal,
    )
