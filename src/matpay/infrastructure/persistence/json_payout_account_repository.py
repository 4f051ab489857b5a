"""JSON-file-backed implementation of PayoutAccountRepository."""

from __future__ import annotations

from pathlib import Path

from matpay.domain.model.payout_account import PayoutAccount, PayoutMethod
from matpay.domain.repository.payout_account_repository import PayoutAccountRepository
from matpay.infrastructure.persistence.json_store import JsonFile, dump_dt, load_dt


class JsonPayoutAccountRepository(PayoutAccountRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- PayoutAccountRepository interface ------------------------------------

    def get_by_seller(self, seller_id: str) -> PayoutAccount | None:
        for raw in self._file.load():
            if raw["seller_id"] == seller_id:
                return self._to_domain(raw)
        return None

    def get_by_account(self, bank_code: str, account_number: str) -> PayoutAccount | None:
        for raw in self._file.load():
            if raw["bank_code"] == bank_code and raw["account_number"] == account_number:
                return self._to_domain(raw)
        return None

    def save(self, account: PayoutAccount) -> None:
        self._file.upsert(self._to_raw(account), key="seller_id")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(a: PayoutAccount) -> dict:
        return {
            "seller_id": a.seller_id,
            "account_name": a.account_name,
            "account_number": a.account_number,
            "bank_code": a.bank_code,
            "bank_name": a.bank_name,
            "momo_provider": a.momo_provider,
            "momo_number": a.momo_number,
            "preferred_method": a.preferred_method.value,
            "subaccount_code": a.subaccount_code,
            "recipient_code": a.recipient_code,
            "is_verified": a.is_verified,
            "verified_at": dump_dt(a.verified_at),
            "is_active": a.is_active,
        }

    @staticmethod
    def _to_domain(raw: dict) -> PayoutAccount:
        return PayoutAccount(
            seller_id=raw["seller_id"],
            account_name=raw["account_name"],
            account_number=raw["account_number"],
            bank_code=raw["bank_code"],
            bank_name=raw.get("bank_name"),
            momo_provider=raw.get("momo_provider"),
            momo_number=raw.get("momo_number"),
            preferred_method=PayoutMethod(raw.get("preferred_method", "BANK_ACCOUNT")),
            subaccount_code=raw.get("subaccount_code"),
            recipient_code=raw.get("recipient_code"),
            is_verified=raw.get("is_verified", False),
            verified_at=load_dt(raw.get("verified_at")),
            is_active=raw.get("is_active", True),
        )
