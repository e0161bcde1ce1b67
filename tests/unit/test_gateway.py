"""
Unit Tests for DarajaGateway

All HTTP goes through gateway._session; tests patch its get / post.
"""

import base64
import json
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest
import requests

from mpesa_service.daraja.gateway import DEFAULT_BASE_URLS, DarajaGateway, resolve_base_url
from mpesa_service.errors import ErrorCode
from mpesa_service.models import (
    ConversationResponse,
    Environment,
    OperationKind,
    QRCodeResponse,
    StkPushResponse,
    StkStatusResponse,
    TokenResponse,
)

STK_BODY = {
    "MerchantRequestID": "mrq-001",
    "CheckoutRequestID": "ws_CO_ABC123",
    "ResponseCode": "0",
    "ResponseDescription": "Success. Request accepted for processing",
    "CustomerMessage": "Success",
}


@pytest.fixture
def gateway():
    return DarajaGateway(connect_timeout=5, read_timeout=10)


class TestResolveBaseUrl:

    def test_sandbox(self):
        assert resolve_base_url(Environment.SANDBOX) == "https://sandbox.safaricom.co.ke"

    def test_production(self):
        assert resolve_base_url("production") == "https://api.safaricom.co.ke"

    def test_configured_urls(self):
        urls = {**DEFAULT_BASE_URLS, Environment.SANDBOX: "http://localhost:8089/"}
        assert resolve_base_url(Environment.SANDBOX, urls) == "http://localhost:8089"

    def test_unknown_environment(self):
        with pytest.raises(ValueError):
            resolve_base_url("staging")

    def test_gateway_overrides_only_given_environments(self):
        gateway = DarajaGateway(base_urls={Environment.SANDBOX: "http://localhost:8089", Environment.PRODUCTION: None})
        assert gateway.base_url_for(Environment.SANDBOX) == "http://localhost:8089"
        assert gateway.base_url_for(Environment.PRODUCTION) == "https://api.safaricom.co.ke"


class TestAuthenticate:

    def test_client_credentials_request(self, gateway, token_response):
        with patch.object(gateway._session, "get", return_value=token_response) as mock_get:
            outcome = gateway.authenticate(Environment.SANDBOX, "key", "secret")

        assert outcome.ok
        assert outcome.value == TokenResponse(access_token="daraja_tok_abc", expires_in=3599)

        args, kwargs = mock_get.call_args
        assert args[0] == "https://sandbox.safaricom.co.ke/oauth/v1/generate"
        assert kwargs["params"] == {"grant_type": "client_credentials"}
        assert kwargs["headers"]["Authorization"] == "Basic " + base64.b64encode(b"key:secret").decode()
        assert kwargs["timeout"] == (5, 10)

    def test_production_host(self, gateway, token_response):
        with patch.object(gateway._session, "get", return_value=token_response) as mock_get:
            gateway.authenticate(Environment.PRODUCTION, "key", "secret")

        assert mock_get.call_args[0][0] == "https://api.safaricom.co.ke/oauth/v1/generate"

    def test_unauthorized(self, gateway, http_response):
        resp = http_response({"errorCode": "401.002.01", "errorMessage": "Invalid credentials"}, 401)
        with patch.object(gateway._session, "get", return_value=resp):
            outcome = gateway.authenticate(Environment.SANDBOX, "key", "bad")

        assert outcome.error.code == ErrorCode.CLIENT_ERROR
        assert "Invalid credentials" not in outcome.error.message

    def test_malformed_token_body(self, gateway, http_response):
        with patch.object(gateway._session, "get", return_value=http_response({"expires_in": "soon"})):
            outcome = gateway.authenticate(Environment.SANDBOX, "key", "secret")

        assert outcome.error.code == ErrorCode.INTERNAL_ERROR


class TestCall:

    def test_stk_push_posts_to_sandbox_endpoint(self, gateway, http_response):
        with patch.object(gateway._session, "post", return_value=http_response(STK_BODY)) as mock_post:
            outcome = gateway.call(Environment.SANDBOX, OperationKind.STK_PUSH, "tok", {"Amount": Decimal("100.00")})

        assert outcome.ok
        assert outcome.value == StkPushResponse(
            merchant_request_id="mrq-001",
            checkout_request_id="ws_CO_ABC123",
            response_code="0",
            response_description="Success. Request accepted for processing",
            customer_message="Success",
        )

        args, kwargs = mock_post.call_args
        assert args[0] == "https://sandbox.safaricom.co.ke/mpesa/stkpush/v1/processrequest"
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == (5, 10)
        assert json.loads(kwargs["data"]) == {"Amount": 100}

    def test_fractional_amount_serialised_as_number(self, gateway, http_response):
        with patch.object(gateway._session, "post", return_value=http_response(STK_BODY)) as mock_post:
            gateway.call(Environment.SANDBOX, OperationKind.STK_PUSH, "tok", {"Amount": Decimal("100.50")})

        assert json.loads(mock_post.call_args[1]["data"]) == {"Amount": 100.5}

    @pytest.mark.parametrize("kind, path", [
        (OperationKind.STK_QUERY, "/mpesa/stkpushquery/v1/query"),
        (OperationKind.C2B_REGISTER, "/mpesa/c2b/v1/registerurl"),
        (OperationKind.B2C_PAYMENT, "/mpesa/b2c/v1/paymentrequest"),
        (OperationKind.B2B_TRANSFER, "/mpesa/b2b/v1/paymentrequest"),
        (OperationKind.TRANSACTION_STATUS, "/mpesa/transactionstatus/v1/query"),
        (OperationKind.ACCOUNT_BALANCE, "/mpesa/accountbalance/v1/query"),
        (OperationKind.REVERSAL, "/mpesa/reversal/v1/request"),
        (OperationKind.QR_CODE, "/mpesa/qrcode/v1/generate"),
    ])
    def test_production_endpoints(self, gateway, http_response, kind, path):
        with patch.object(gateway._session, "post", return_value=http_response({})) as mock_post:
            gateway.call(Environment.PRODUCTION, kind, "tok", {})

        assert mock_post.call_args[0][0] == "https://api.safaricom.co.ke" + path

    def test_stk_status_codes_normalised(self, gateway, http_response):
        body = {"CheckoutRequestID": "ws_CO_1", "ResponseCode": 0, "ResultCode": 1032,
                "ResultDesc": "Request cancelled by user"}
        with patch.object(gateway._session, "post", return_value=http_response(body)):
            outcome = gateway.call(Environment.SANDBOX, OperationKind.STK_QUERY, "tok", {})

        assert isinstance(outcome.value, StkStatusResponse)
        assert outcome.value.result_code == "1032"
        assert outcome.value.was_cancelled()

    def test_conversation_response_accepts_misspelt_key(self, gateway, http_response):
        body = {"ConversationID": "AG_1", "OriginatorCoversationID": "123-456", "ResponseCode": "0"}
        with patch.object(gateway._session, "post", return_value=http_response(body)):
            outcome = gateway.call(Environment.SANDBOX, OperationKind.B2C_PAYMENT, "tok", {})

        assert outcome.value == ConversationResponse(
            conversation_id="AG_1", originator_conversation_id="123-456", response_code="0"
        )

    def test_qr_response(self, gateway, http_response):
        body = {"ResponseCode": "AG_20191219_000043fdf61864fe9ff5", "RequestID": "16738-27456357-1",
                "ResponseDescription": "QR Code Successfully Generated.", "QRCode": "iVBORw0KGgo="}
        with patch.object(gateway._session, "post", return_value=http_response(body)):
            outcome = gateway.call(Environment.SANDBOX, OperationKind.QR_CODE, "tok", {})

        assert isinstance(outcome.value, QRCodeResponse)
        assert outcome.value.qr_code == "iVBORw0KGgo="

    def test_c2b_simulate_refused_in_production_without_http(self, gateway):
        with patch.object(gateway._session, "post") as mock_post:
            outcome = gateway.call(Environment.PRODUCTION, OperationKind.C2B_SIMULATE, "tok", {})

        assert outcome.error.code == ErrorCode.INVALID_ENVIRONMENT
        assert outcome.error.http_status == 400
        mock_post.assert_not_called()

    def test_c2b_simulate_allowed_in_sandbox(self, gateway, http_response):
        with patch.object(gateway._session, "post", return_value=http_response({"ResponseCode": "0"})) as mock_post:
            outcome = gateway.call(Environment.SANDBOX, OperationKind.C2B_SIMULATE, "tok", {})

        assert outcome.ok
        assert mock_post.call_args[0][0] == "https://sandbox.safaricom.co.ke/mpesa/c2b/v1/simulate"


class TestErrorClassification:

    def _call(self, gateway, **post_kwargs):
        with patch.object(gateway._session, "post", **post_kwargs):
            return gateway.call(Environment.SANDBOX, OperationKind.STK_PUSH, "tok", {})

    def test_client_error(self, gateway, http_response):
        resp = http_response({"requestId": "1", "errorCode": "400.002.02",
                              "errorMessage": "Bad Request - Invalid PhoneNumber"}, 400)
        outcome = self._call(gateway, return_value=resp)

        assert outcome.error.code == ErrorCode.CLIENT_ERROR
        assert outcome.error.http_status == 400
        assert "400.002.02" in outcome.error.message
        assert "Invalid PhoneNumber" not in outcome.error.message

    def test_server_error(self, gateway, http_response):
        outcome = self._call(gateway, return_value=http_response({"errorMessage": "boom"}, 503))

        assert outcome.error.code == ErrorCode.SERVER_ERROR
        assert outcome.error.http_status == 502

    def test_timeout(self, gateway):
        outcome = self._call(gateway, side_effect=requests.Timeout("read timed out"))

        assert outcome.error.code == ErrorCode.SERVER_ERROR
        assert outcome.error.http_status == 504

    def test_connection_error(self, gateway):
        outcome = self._call(gateway, side_effect=requests.ConnectionError("refused"))

        assert outcome.error.code == ErrorCode.SERVER_ERROR
        assert outcome.error.http_status == 502

    def test_other_request_exception(self, gateway):
        outcome = self._call(gateway, side_effect=requests.RequestException("bad"))

        assert outcome.error.code == ErrorCode.INTERNAL_ERROR

    @pytest.mark.parametrize("error_code, expected", [
        ("500.001.1001", ErrorCode.SERVER_ERROR),
        ("404.001.03", ErrorCode.CLIENT_ERROR),
    ])
    def test_error_code_in_200_response(self, gateway, http_response, error_code, expected):
        outcome = self._call(gateway, return_value=http_response({"errorCode": error_code}))

        assert outcome.error.code == expected

    def test_non_json_success_body(self, gateway):
        resp = Mock(status_code=200, text="<html>gateway</html>")
        resp.json.side_effect = ValueError("no json")

        outcome = self._call(gateway, return_value=resp)

        assert outcome.error.code == ErrorCode.INTERNAL_ERROR
        assert outcome.error.http_status == 500
