"""Integration tests for charge application: the payment state machine.

Covers the shared path behind the webhook and verification entry points:
idempotency, the order transition, stock, payout, notification and
receipt side effects, and their isolation from each other.
"""

import pytest

from matpay.domain.exceptions import UnknownPayment
from matpay.domain.model.gateway_events import ChargeSucceeded
from matpay.domain.model.order import OrderStatus
from matpay.domain.model.payment import PaymentStatus, TransferStatus
from tests.fakes import (
    BUYER,
    FakeReceiptGenerator,
    RecordingNotifier,
    charge_body,
    make_container,
    place_and_initialize,
)


def _charge(reference: str, transaction_id: int = 9001) -> ChargeSucceeded:
    return ChargeSucceeded.from_data(charge_body(reference, transaction_id)["data"])


class TestFirstApplication:

    def test_payment_completed_and_order_confirmed(self):
        c = make_container()
        order, ref = place_and_initialize(c)

        result = c.apply_charge.handle(_charge(ref))

        assert result.applied is True
        assert result.order.status == "CONFIRMED"
        payment = c.payment_repo.get_by_reference(ref)
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.transaction_id == "9001"
        assert payment.authorization_code == "AUTH_abc123"
        assert payment.paid_at is not None
        assert payment.gateway_payload["reference"] == ref
        assert c.order_repo.get_by_id(order.id).confirmed_at is not None

    def test_stock_withdrawn(self):
        c = make_container()
        _, ref = place_and_initialize(c)
        c.apply_charge.handle(_charge(ref))
        assert c.material_repo.stock_of("M1") == 8
        assert c.material_repo.stock_of("M2") == 4

    def test_seller_paid_the_subtotal(self):
        c = make_container()
        order, ref = place_and_initialize(c)

        c.apply_charge.handle(_charge(ref))

        assert len(c.gateway.transfers) == 1
        transfer = c.gateway.transfers[0]
        assert transfer["amount"] == 10000
        assert transfer["recipient"] == "RCP_seller1"
        assert transfer["reason"] == f"Payment for order {order.order_number}"
        assert transfer["reference"].startswith("TXF-")

        payment = c.payment_repo.get_by_reference(ref)
        assert payment.transfer.code == "TRF_1"
        assert payment.transfer.reference == transfer["reference"]
        assert payment.transfer.status == TransferStatus.PENDING

    def test_buyer_notified_and_receipt_issued(self):
        c = make_container()
        _, ref = place_and_initialize(c)

        result = c.apply_charge.handle(_charge(ref))

        assert c.notifier.sent[0][0] == BUYER
        assert c.notifier.sent[0][1] == "Payment Successful"
        assert c.notifier.sent[0][3] == "PAYMENT"
        assert result.payment.receipt_number.startswith("RCP-")
        assert result.payment.receipt_url == f"https://receipts.test/{result.payment.receipt_number}"

    def test_unknown_reference(self):
        c = make_container()
        with pytest.raises(UnknownPayment):
            c.apply_charge.handle(_charge("PAY-does-not-exist"))


class TestIdempotency:

    def test_second_application_is_a_no_op(self):
        c = make_container()
        _, ref = place_and_initialize(c)

        first = c.apply_charge.handle(_charge(ref, 9001))
        second = c.apply_charge.handle(_charge(ref, 9002))

        assert first.applied is True
        assert second.applied is False
        assert second.order.status == "CONFIRMED"
        # one stock decrement, one transfer attempt, one notification
        assert c.material_repo.stock_of("M1") == 8
        assert len(c.gateway.transfers) == 1
        assert c.notifier.titles() == ["Payment Successful"]
        # original transaction id retained
        assert c.payment_repo.get_by_reference(ref).transaction_id == "9001"

    def test_refunded_payment_is_not_reapplied(self):
        c = make_container()
        order, ref = place_and_initialize(c)
        c.apply_charge.handle(_charge(ref))
        c.cancel_order.handle(order.id)

        result = c.apply_charge.handle(_charge(ref))

        assert result.applied is False
        assert c.payment_repo.get_by_reference(ref).status == PaymentStatus.REFUNDED
        assert c.order_repo.get_by_id(order.id).status == OrderStatus.CANCELLED
        assert c.material_repo.stock_of("M1") == 10


class TestLateCharge:

    def test_charge_for_cancelled_order_completes_payment_without_payout(self):
        c = make_container()
        order, ref = place_and_initialize(c)
        c.cancel_order.handle(order.id)

        result = c.apply_charge.handle(_charge(ref))

        assert result.applied is True
        assert c.payment_repo.get_by_reference(ref).status == PaymentStatus.COMPLETED
        assert c.order_repo.get_by_id(order.id).status == OrderStatus.CANCELLED
        assert c.gateway.transfers == []
        assert c.material_repo.stock_of("M1") == 10


class TestSideEffectIsolation:

    def test_transfer_failure_keeps_charge_applied(self):
        c = make_container()
        order, ref = place_and_initialize(c)
        c.gateway.fail_transfers = True

        result = c.apply_charge.handle(_charge(ref))

        assert result.applied is True
        payment = c.payment_repo.get_by_reference(ref)
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.transfer is None
        assert c.order_repo.get_by_id(order.id).status == OrderStatus.CONFIRMED
        assert c.notifier.titles() == ["Payment Successful"]

    def test_missing_payout_account_skips_transfer(self):
        c = make_container(with_payout_account=False)
        _, ref = place_and_initialize(c)

        c.apply_charge.handle(_charge(ref))

        assert c.gateway.transfers == []
        assert c.payment_repo.get_by_reference(ref).transfer is None

    def test_notification_failure_does_not_block_payout(self):
        c = make_container(notifier=RecordingNotifier(fail=True))
        _, ref = place_and_initialize(c)

        c.apply_charge.handle(_charge(ref))

        assert len(c.gateway.transfers) == 1
        assert c.payment_repo.get_by_reference(ref).status == PaymentStatus.COMPLETED

    def test_receipt_failure_leaves_receipt_unset(self):
        c = make_container(receipts=FakeReceiptGenerator(fail=True))
        _, ref = place_and_initialize(c)

        result = c.apply_charge.handle(_charge(ref))

        assert result.applied is True
        assert result.payment.receipt_number is None
        assert result.payment.transfer_code == "TRF_1"

    def test_stock_failure_mid_order_never_withdraws_twice(self):
        c = make_container()
        order, ref = place_and_initialize(c)  # 2 x M1, 1 x M2
        withdraw = c.material_repo.withdraw_stock
        calls = []

        def failing_on_second_line(material_id, quantity):
            calls.append(material_id)
            if len(calls) == 2:
                raise OSError("disk full")
            return withdraw(material_id, quantity)

        c.material_repo.withdraw_stock = failing_on_second_line

        first = c.apply_charge.handle(_charge(ref))
        second = c.apply_charge.handle(_charge(ref))

        assert first.applied is True
        assert second.applied is False
        assert c.payment_repo.get_by_reference(ref).status == PaymentStatus.COMPLETED
        stored = c.order_repo.get_by_id(order.id)
        assert stored.status == OrderStatus.CONFIRMED
        assert {line.material_id: line.stock_committed for line in stored.items} == {
            "M1": 2, "M2": 0,
        }
        assert c.material_repo.stock_of("M1") == 8
        assert c.material_repo.stock_of("M2") == 5
        assert len(c.gateway.transfers) == 1

        c.cancel_order.handle(order.id)
        assert c.material_repo.stock_of("M1") == 10
        assert c.material_repo.stock_of("M2") == 5
