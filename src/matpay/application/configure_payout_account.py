"""Application service: Configure Payout Account use case.

Registers where a seller's share of each sale is sent.  The account
number is resolved with the gateway first; only then are the settlement
subaccount and the transfer recipient created, and the account is stored
as verified.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from matpay.application.dto import PayoutAccountDTO, payout_account_to_dto
from matpay.application.ports import PaymentGateway
from matpay.domain.exceptions import ConflictError, ExternalGatewayError, ValidationError
from matpay.domain.model.payout_account import PayoutAccount, PayoutMethod
from matpay.domain.repository.payout_account_repository import PayoutAccountRepository

logger = logging.getLogger(__name__)


class ConfigurePayoutAccountHandler:

    def __init__(self, payout_repo: PayoutAccountRepository, gateway: PaymentGateway) -> None:
        self._payout_repo = payout_repo
        self._gateway = gateway

    def handle(
        self,
        seller_id: str,
        account_name: str,
        account_number: str,
        bank_code: str,
        bank_name: str | None = None,
        momo_provider: str | None = None,
        momo_number: str | None = None,
        preferred_method: str = "BANK_ACCOUNT",
    ) -> PayoutAccountDTO:
        if not account_name or not account_number or not bank_code:
            raise ValidationError("Account name, account number and bank code are required")
        try:
            method = PayoutMethod(preferred_method)
        except ValueError:
            raise ValidationError(f"Unknown payout method: {preferred_method}") from None

        try:
            resolution = self._gateway.verify_account_number(account_number, bank_code)
        except ExternalGatewayError as exc:
            logger.warning("Account resolution failed for seller %s: %s", seller_id, exc)
            raise ValidationError("Could not verify account details") from exc
        if not resolution.verified:
            raise ValidationError("Invalid account details")

        holder = self._payout_repo.get_by_account(bank_code, account_number)
        if holder is not None and holder.seller_id != seller_id:
            raise ConflictError("This bank account is already registered to another seller")

        description = f"Payout account for seller {seller_id}"
        subaccount_code = self._gateway.create_subaccount(
            business_name=account_name,
            bank_code=bank_code,
            account_number=account_number,
            contact_name=account_name,
            description=description,
        )
        recipient_code = self._gateway.create_transfer_recipient(
            name=account_name,
            account_number=account_number,
            bank_code=bank_code,
            description=description,
        )

        account = self._payout_repo.get_by_seller(seller_id) or PayoutAccount(
            seller_id=seller_id,
            account_name=account_name,
            account_number=account_number,
            bank_code=bank_code,
        )
        account.account_name = account_name
        account.account_number = account_number
        account.bank_code = bank_code
        account.bank_name = bank_name
        account.momo_provider = momo_provider
        account.momo_number = momo_number
        account.preferred_method = method
        account.subaccount_code = subaccount_code
        account.recipient_code = recipient_code
        account.is_verified = True
        account.is_active = True
        account.verified_at = datetime.now(timezone.utc)
        self._payout_repo.save(account)

        logger.info("Payout account configured for seller %s", seller_id)
        return payout_account_to_dto(account)
