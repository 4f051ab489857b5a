"""Tests for the Paystack HTTP client against a mocked requests session."""

from unittest.mock import Mock

import pytest
import requests

from matpay.domain.exceptions import ExternalGatewayError
from matpay.infrastructure.gateway.paystack_client import PaystackClient


def _response(status_code: int = 200, body=None, reason: str = "OK"):
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.reason = reason
    if body is None:
        resp.json = Mock(side_effect=ValueError("no json"))
    else:
        resp.json = Mock(return_value=body)
    return resp


def _client(*responses, **kwargs):
    session = Mock()
    session.headers = {}
    session.request = Mock(side_effect=list(responses))
    client = PaystackClient(
        secret_key="sk_test_123",
        base_url="https://api.paystack.test/",
        currency="GHS",
        session=session,
        **kwargs,
    )
    return client, session


class TestCharges:

    def test_initialize_payment(self):
        client, session = _client(
            _response(body={
                "status": True,
                "data": {
                    "authorization_url": "https://checkout.paystack.com/abc",
                    "access_code": "abc",
                    "reference": "PAY-1",
                },
            }),
            callback_url="https://shop.test/paid",
        )

        result = client.initialize_payment("kofi@example.com", 10290, "PAY-1", {"order_id": 1})

        assert result.authorization_url == "https://checkout.paystack.com/abc"
        assert result.reference == "PAY-1"
        method, url = session.request.call_args.args
        payload = session.request.call_args.kwargs["json"]
        assert (method, url) == ("POST", "https://api.paystack.test/transaction/initialize")
        assert payload["amount"] == 10290
        assert payload["currency"] == "GHS"
        assert payload["callback_url"] == "https://shop.test/paid"
        assert session.request.call_args.kwargs["timeout"] == 30.0
        assert session.headers["Authorization"] == "Bearer sk_test_123"

    def test_verify_success(self):
        client, session = _client(
            _response(body={"status": True, "data": {"status": "success", "reference": "PAY-1"}})
        )
        result = client.verify_payment("PAY-1")
        assert result.succeeded is True
        assert result.data["reference"] == "PAY-1"
        assert session.request.call_args.args[1].endswith("/transaction/verify/PAY-1")

    def test_verify_abandoned(self):
        client, _ = _client(_response(body={"status": True, "data": {"status": "abandoned"}}))
        result = client.verify_payment("PAY-1")
        assert result.succeeded is False
        assert result.gateway_status == "abandoned"


class TestTransfers:

    def test_initiate_transfer_from_balance(self):
        client, session = _client(
            _response(body={"status": True, "data": {"transfer_code": "TRF_1", "reference": "TXF-1"}})
        )
        result = client.initiate_transfer(10000, "RCP_1", "Payment for order ORD-1", "TXF-1")
        assert result.transfer_code == "TRF_1"
        payload = session.request.call_args.kwargs["json"]
        assert payload["source"] == "balance"
        assert payload["recipient"] == "RCP_1"
        assert payload["amount"] == 10000


class TestPayoutAccounts:

    def test_resolve_account(self):
        client, session = _client(
            _response(body={"status": True, "data": {"account_name": "AMA MENSAH"}})
        )
        result = client.verify_account_number("0123456789", "GH001")
        assert result.verified is True
        assert result.account_name == "AMA MENSAH"
        assert session.request.call_args.kwargs["params"] == {
            "account_number": "0123456789", "bank_code": "GH001",
        }

    def test_unresolvable_account(self):
        client, _ = _client(
            _response(422, {"status": False, "message": "Could not resolve account name"})
        )
        assert client.verify_account_number("000", "GH001").verified is False

    def test_subaccount_and_recipient(self):
        client, session = _client(
            _response(body={"status": True, "data": {"subaccount_code": "ACCT_1"}}),
            _response(body={"status": True, "data": {"recipient_code": "RCP_1"}}),
        )
        assert client.create_subaccount("Ama", "GH001", "0123", "Ama", "d") == "ACCT_1"
        assert session.request.call_args.kwargs["json"]["percentage_charge"] == 0
        assert client.create_transfer_recipient("Ama", "0123", "GH001", "d") == "RCP_1"
        assert session.request.call_args.kwargs["json"]["type"] == "nuban"


class TestFailures:

    def test_network_error(self):
        client, _ = _client(requests.ConnectionError("connection reset"))
        with pytest.raises(ExternalGatewayError, match="unreachable"):
            client.initiate_transfer(100, "RCP_1", "r", "TXF-1")

    def test_non_2xx_carries_gateway_message(self):
        client, _ = _client(_response(400, {"status": False, "message": "Insufficient balance"}))
        with pytest.raises(ExternalGatewayError, match="Insufficient balance") as info:
            client.initiate_transfer(100, "RCP_1", "r", "TXF-1")
        assert info.value.status_code == 400

    def test_non_json_error_body(self):
        client, _ = _client(_response(502, None, reason="Bad Gateway"))
        with pytest.raises(ExternalGatewayError, match="Bad Gateway"):
            client.verify_payment("PAY-1")

    def test_status_false_in_2xx(self):
        client, _ = _client(_response(200, {"status": False, "message": "Invalid key"}))
        with pytest.raises(ExternalGatewayError, match="Invalid key"):
            client.verify_payment("PAY-1")
