"""Integration tests for the client-side verification path."""

import pytest

from matpay.domain.exceptions import UnknownPayment, ValidationError
from matpay.domain.model.payment import PaymentStatus
from tests.fakes import make_container, place_and_initialize


class TestVerifyPayment:

    def test_successful_verification_applies_charge(self):
        c = make_container()
        _, ref = place_and_initialize(c)

        result = c.verify_payment.handle(ref)

        assert result.applied is True
        assert result.order.status == "CONFIRMED"
        assert result.payment.transaction_id == "7001"

    def test_verification_after_webhook_is_a_no_op(self):
        c = make_container()
        _, ref = place_and_initialize(c)
        c.verify_payment.handle(ref)

        result = c.verify_payment.handle(ref)

        assert result.applied is False
        assert len(c.gateway.transfers) == 1
        assert c.material_repo.stock_of("M1") == 8

    def test_failed_gateway_status_rejected(self):
        c = make_container()
        _, ref = place_and_initialize(c)
        c.gateway.verify_status = "abandoned"

        with pytest.raises(ValidationError, match=r"gateway status: abandoned"):
            c.verify_payment.handle(ref)
        assert c.payment_repo.get_by_reference(ref).status == PaymentStatus.PENDING

    def test_blank_reference_rejected(self):
        with pytest.raises(ValidationError, match="required"):
            make_container().verify_payment.handle("  ")

    def test_reference_mismatch_rejected(self):
        c = make_container()
        _, ref = place_and_initialize(c)
        c.gateway.verify_data[ref] = {"id": 1, "reference": "PAY-other"}

        with pytest.raises(ValidationError, match="Gateway returned reference"):
            c.verify_payment.handle(ref)

    def test_unknown_reference(self):
        with pytest.raises(UnknownPayment):
            make_container().verify_payment.handle("PAY-nope")
