"""Integration tests for operator-triggered transfer retries."""

import pytest

from matpay.domain.exceptions import (
    ConflictError,
    ExternalGatewayError,
    PaymentNotFound,
    PayoutDestinationMissing,
)
from matpay.domain.model.gateway_events import ChargeSucceeded, TransferOutcome
from matpay.domain.model.order import OrderStatus
from matpay.domain.model.payment import PaymentStatus, TransferStatus
from matpay.domain.model.payout_account import PayoutAccount
from tests.fakes import SELLER, charge_body, make_container, place_and_initialize


def _paid(c, fail_transfer: bool = False):
    order, ref = place_and_initialize(c)
    c.gateway.fail_transfers = fail_transfer
    c.apply_charge.handle(ChargeSucceeded.from_data(charge_body(ref)["data"]))
    c.gateway.fail_transfers = False
    return order, c.payment_repo.get_by_reference(ref)


class TestRetryAfterFailure:

    def test_network_error_then_retry(self):
        c = make_container()
        order, payment = _paid(c, fail_transfer=True)
        assert payment.transfer is None
        assert payment.status == PaymentStatus.COMPLETED
        assert c.order_repo.get_by_id(order.id).status == OrderStatus.CONFIRMED

        dto = c.transfers.retry(payment.id)

        assert dto.transfer_code == "TRF_1"
        assert dto.transfer_reference.startswith("RTY-")
        assert dto.transfer_status == "pending"
        last = c.gateway.transfers[-1]
        assert last["reason"] == f"Retry payment for order {order.order_number}"
        assert last["amount"] == 10000
        stored = c.payment_repo.get_by_id(payment.id)
        assert stored.transfer.code == "TRF_1"
        assert stored.status == PaymentStatus.COMPLETED

    def test_retry_after_missing_account_is_configured(self):
        c = make_container(with_payout_account=False)
        _, payment = _paid(c)

        with pytest.raises(PayoutDestinationMissing, match="payment account not configured"):
            c.transfers.retry(payment.id)

        c.payout_repo.save(
            PayoutAccount(
                seller_id=SELLER, account_name="Ama", account_number="1", bank_code="B",
                recipient_code="RCP_late", is_verified=True,
            )
        )
        dto = c.transfers.retry(payment.id)
        assert dto.transfer_code == "TRF_1"
        assert c.gateway.transfers[-1]["recipient"] == "RCP_late"

    def test_unverified_account_is_not_a_destination(self):
        c = make_container(with_payout_account=False)
        _, payment = _paid(c)
        c.payout_repo.save(
            PayoutAccount(seller_id=SELLER, account_name="Ama", account_number="1",
                          bank_code="B", recipient_code="RCP_x", is_verified=False)
        )
        with pytest.raises(PayoutDestinationMissing):
            c.transfers.retry(payment.id)

    def test_gateway_failure_on_retry_propagates(self):
        c = make_container()
        _, payment = _paid(c, fail_transfer=True)
        c.gateway.fail_transfers = True
        with pytest.raises(ExternalGatewayError):
            c.transfers.retry(payment.id)
        assert c.payment_repo.get_by_id(payment.id).transfer is None

    def test_retry_replaces_failed_transfer(self):
        c = make_container()
        _, payment = _paid(c)
        c.transfers.record_outcome(TransferOutcome("TRF_1", TransferStatus.FAILED, {}))

        dto = c.transfers.retry(payment.id)

        assert dto.transfer_code == "TRF_2"
        assert dto.transfer_status == "pending"
        # the superseded attempt no longer resolves
        assert c.transfers.record_outcome(
            TransferOutcome("TRF_1", TransferStatus.SUCCESS, {})
        ) is False


class TestRetryGuards:

    def test_unknown_payment(self):
        with pytest.raises(PaymentNotFound):
            make_container().transfers.retry(99)

    def test_pending_payment_cannot_be_paid_out(self):
        c = make_container()
        _, ref = place_and_initialize(c)
        payment = c.payment_repo.get_by_reference(ref)
        with pytest.raises(ConflictError, match="only completed payments"):
            c.transfers.retry(payment.id)

    def test_successful_transfer_not_repeated(self):
        c = make_container()
        _, payment = _paid(c)
        c.transfers.record_outcome(TransferOutcome("TRF_1", TransferStatus.SUCCESS, {}))

        with pytest.raises(ConflictError, match="already paid out"):
            c.transfers.retry(payment.id)
        assert len(c.gateway.transfers) == 1

    def test_refunded_payment_cannot_be_paid_out(self):
        c = make_container()
        order, payment = _paid(c, fail_transfer=True)
        c.cancel_order.handle(order.id)
        with pytest.raises(ConflictError):
            c.transfers.retry(payment.id)


class TestTransferHistory:

    def test_lists_payments_with_transfers(self):
        c = make_container()
        _paid(c)
        _paid(c, fail_transfer=True)

        history = c.transfer_history.handle(SELLER)

        assert len(history) == 1
        assert history[0].transfer_code == "TRF_1"
        assert history[0].seller_amount == "100.00"

    def test_empty_for_unknown_seller(self):
        assert make_container().transfer_history.handle("seller-9") == []
