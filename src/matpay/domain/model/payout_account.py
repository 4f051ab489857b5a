"""PayoutAccount: a seller's registered destination for transfers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PayoutMethod(Enum):
    BANK_ACCOUNT = "BANK_ACCOUNT"
    MOBILE_MONEY = "MOBILE_MONEY"


@dataclass
class PayoutAccount:
    seller_id: str
    account_name: str
    account_number: str
    bank_code: str
    bank_name: str | None = None
    momo_provider: str | None = None
    momo_number: str | None = None
    preferred_method: PayoutMethod = PayoutMethod.BANK_ACCOUNT
    subaccount_code: str | None = None
    recipient_code: str | None = None
    is_verified: bool = False
    verified_at: datetime | None = None
    is_active: bool = True

    @property
    def is_payout_destination(self) -> bool:
        """A transfer can only target a verified, active, gateway-registered account."""
        return self.is_verified and self.is_active and bool(self.recipient_code)
