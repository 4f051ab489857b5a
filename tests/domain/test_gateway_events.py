"""Unit tests for decoding gateway webhook bodies."""

import pytest

from matpay.domain.exceptions import ValidationError
from matpay.domain.model.gateway_events import (
    ChargeSucceeded,
    TransferOutcome,
    UnhandledEvent,
    parse_event,
)
from matpay.domain.model.payment import TransferStatus


class TestParseEvent:

    def test_charge_success(self):
        event = parse_event(
            {
                "event": "charge.success",
                "data": {
                    "id": 302961,
                    "reference": "PAY-1",
                    "authorization": {"authorization_code": "AUTH_8dfhjjdt"},
                },
            }
        )
        assert isinstance(event, ChargeSucceeded)
        assert event.reference == "PAY-1"
        assert event.transaction_id == "302961"
        assert event.authorization_code == "AUTH_8dfhjjdt"

    def test_charge_without_authorization(self):
        event = parse_event({"event": "charge.success", "data": {"reference": "PAY-1"}})
        assert event.authorization_code is None
        assert event.transaction_id is None

    def test_charge_without_reference_rejected(self):
        with pytest.raises(ValidationError, match="no reference"):
            parse_event({"event": "charge.success", "data": {"id": 1}})

    @pytest.mark.parametrize(
        "name, status",
        [
            ("transfer.success", TransferStatus.SUCCESS),
            ("transfer.failed", TransferStatus.FAILED),
            ("transfer.reversed", TransferStatus.REVERSED),
        ],
    )
    def test_transfer_events(self, name, status):
        event = parse_event({"event": name, "data": {"transfer_code": "TRF_1"}})
        assert event == TransferOutcome("TRF_1", status, {"transfer_code": "TRF_1"})

    def test_unknown_event_type_is_explicit(self):
        event = parse_event({"event": "subscription.create", "data": {}})
        assert isinstance(event, UnhandledEvent)
        assert event.event_type == "subscription.create"

    @pytest.mark.parametrize("body", [[], {"event": "charge.success"}, {"data": {}}])
    def test_malformed_bodies_rejected(self, body):
        with pytest.raises(ValidationError):
            parse_event(body)

    @pytest.mark.parametrize(
        "data, message",
        [
            ({"reference": "PAY-1", "authorization": "AUTH_x"}, "authorization must be an object"),
            ({"reference": "PAY-1", "authorization": ["AUTH_x"]}, "authorization must be an object"),
            ({"reference": "PAY-1", "authorization": {"authorization_code": 5}}, "must be a string"),
            ({"reference": ["PAY-1"]}, "reference must be a string"),
            ({"reference": "PAY-1", "id": {"n": 1}}, "id must be a string or number"),
        ],
    )
    def test_charge_with_mistyped_fields_rejected(self, data, message):
        with pytest.raises(ValidationError, match=message):
            parse_event({"event": "charge.success", "data": data})

    def test_transfer_code_must_be_a_string(self):
        with pytest.raises(ValidationError, match="transfer_code must be a string"):
            parse_event({"event": "transfer.success", "data": {"transfer_code": ["TRF_1"]}})
