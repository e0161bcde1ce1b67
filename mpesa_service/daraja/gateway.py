"""
Daraja HTTP gateway

Performs the outbound HTTP calls for every operation. The target host is a
pure function of the credential set's environment:

    sandbox     https://sandbox.safaricom.co.ke
    production  https://api.safaricom.co.ke

Authentication
    GET  /oauth/v1/generate?grant_type=client_credentials  (Basic auth)

Business endpoints (all POST, Bearer auth)
    /mpesa/stkpush/v1/processrequest      STK Push
    /mpesa/stkpushquery/v1/query          STK Push status
    /mpesa/c2b/v1/registerurl             C2B URL registration
    /mpesa/c2b/v1/simulate                C2B simulation (sandbox only)
    /mpesa/b2c/v1/paymentrequest          B2C payment
    /mpesa/b2b/v1/paymentrequest          B2B transfer
    /mpesa/transactionstatus/v1/query     Transaction status
    /mpesa/accountbalance/v1/query        Account balance
    /mpesa/reversal/v1/request            Reversal
    /mpesa/qrcode/v1/generate             Dynamic QR

Every call returns an Outcome. HTTP 4xx maps to CLIENT_ERROR, 5xx and
timeouts to SERVER_ERROR; response bodies are logged, never returned.
"""

import base64
import json
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

import requests
from marshmallow import ValidationError

from mpesa_service.errors import ErrorCode, Outcome
from mpesa_service.models.enums import Environment, OperationKind
from mpesa_service.schemas.daraja_schema import (
    TokenResponseSchema,
    StkPushResponseSchema,
    StkStatusResponseSchema,
    ConversationResponseSchema,
    QRCodeResponseSchema,
)
from mpesa_service.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URLS: Dict[Environment, str] = {
    Environment.SANDBOX:    "https://sandbox.safaricom.co.ke",
    Environment.PRODUCTION: "https://api.safaricom.co.ke",
}

AUTH_PATH = "/oauth/v1/generate"

ENDPOINTS: Dict[OperationKind, str] = {
    OperationKind.STK_PUSH:           "/mpesa/stkpush/v1/processrequest",
    OperationKind.STK_QUERY:          "/mpesa/stkpushquery/v1/query",
    OperationKind.C2B_REGISTER:       "/mpesa/c2b/v1/registerurl",
    OperationKind.C2B_SIMULATE:       "/mpesa/c2b/v1/simulate",
    OperationKind.B2C_PAYMENT:        "/mpesa/b2c/v1/paymentrequest",
    OperationKind.B2B_TRANSFER:       "/mpesa/b2b/v1/paymentrequest",
    OperationKind.TRANSACTION_STATUS: "/mpesa/transactionstatus/v1/query",
    OperationKind.ACCOUNT_BALANCE:    "/mpesa/accountbalance/v1/query",
    OperationKind.REVERSAL:           "/mpesa/reversal/v1/request",
    OperationKind.QR_CODE:            "/mpesa/qrcode/v1/generate",
}

_conversation_schema = ConversationResponseSchema()

RESPONSE_SCHEMAS = {
    OperationKind.STK_PUSH:           StkPushResponseSchema(),
    OperationKind.STK_QUERY:          StkStatusResponseSchema(),
    OperationKind.C2B_REGISTER:       _conversation_schema,
    OperationKind.C2B_SIMULATE:       _conversation_schema,
    OperationKind.B2C_PAYMENT:        _conversation_schema,
    OperationKind.B2B_TRANSFER:       _conversation_schema,
    OperationKind.TRANSACTION_STATUS: _conversation_schema,
    OperationKind.ACCOUNT_BALANCE:    _conversation_schema,
    OperationKind.REVERSAL:           _conversation_schema,
    OperationKind.QR_CODE:            QRCodeResponseSchema(),
}

_token_schema = TokenResponseSchema()


def resolve_base_url(environment, base_urls: Optional[Mapping[Environment, str]] = None) -> str:
    """Pick the Daraja host for an environment; nothing else influences the choice."""
    urls = base_urls or DEFAULT_BASE_URLS
    return urls[Environment(environment)].rstrip('/')


def _json_default(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class DarajaGateway:
    """Single parameterised HTTP client for both Daraja environments."""

    def __init__(
        self,
        base_urls: Optional[Mapping[Environment, str]] = None,
        connect_timeout: float = 30,
        read_timeout: float = 60,
        session: Optional[requests.Session] = None,
    ):
        self.base_urls = dict(DEFAULT_BASE_URLS)
        if base_urls:
            self.base_urls.update({Environment(k): v for k, v in base_urls.items() if v})
        self.timeout = (connect_timeout, read_timeout)

        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def base_url_for(self, environment) -> str:
        return resolve_base_url(environment, self.base_urls)

    # Public API

    def authenticate(self, environment, api_key: str, api_secret: str) -> Outcome:
        """OAuth client-credentials exchange. Returns Outcome[TokenResponse]."""
        credentials = base64.b64encode(f"{api_key}:{api_secret}".encode("utf-8")).decode("utf-8")
        url = f"{self.base_url_for(environment)}{AUTH_PATH}"

        outcome = self._send(
            "get",
            url,
            context="auth",
            params={"grant_type": "client_credentials"},
            headers={"Authorization": f"Basic {credentials}"},
        )
        if not outcome.ok:
            return outcome

        try:
            return Outcome.success(_token_schema.load(outcome.value))
        except ValidationError as exc:
            logger.error("Daraja [auth] malformed token response: %s", exc.messages)
            return Outcome.failure(ErrorCode.INTERNAL_ERROR, "Malformed token response from the M-Pesa API")

    def call(self, environment, kind: OperationKind, token: str, payload: Dict[str, Any]) -> Outcome:
        """POST a built payload to the endpoint for kind. Returns Outcome[typed response]."""
        environment = Environment(environment)

        if kind == OperationKind.C2B_SIMULATE and environment != Environment.SANDBOX:
            return Outcome.failure(
                ErrorCode.INVALID_ENVIRONMENT,
                "C2B simulation is only available in the sandbox environment",
            )

        url = f"{self.base_url_for(environment)}{ENDPOINTS[kind]}"
        outcome = self._send(
            "post",
            url,
            context=kind.value,
            data=json.dumps(payload, default=_json_default),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type":  "application/json",
            },
        )
        if not outcome.ok:
            return outcome

        try:
            return Outcome.success(RESPONSE_SCHEMAS[kind].load(outcome.value))
        except ValidationError as exc:
            logger.error("Daraja [%s] unexpected response shape: %s", kind.value, exc.messages)
            return Outcome.failure(ErrorCode.INTERNAL_ERROR, "Unexpected response from the M-Pesa API")

    # Private – HTTP helpers

    def _send(self, method: str, url: str, context: str, **kwargs) -> Outcome:
        logger.debug("Daraja [%s] request: %s %s", context, method.upper(), url)
        try:
            resp = getattr(self._session, method)(url, timeout=self.timeout, **kwargs)
        except requests.Timeout:
            logger.error("Daraja [%s] timed out (connect/read timeout %s)", context, self.timeout)
            return Outcome.failure(ErrorCode.SERVER_ERROR, "M-Pesa API request timed out", 504)
        except requests.ConnectionError as exc:
            logger.error("Daraja [%s] connection error: %s", context, exc)
            return Outcome.failure(ErrorCode.SERVER_ERROR, "Could not reach the M-Pesa API")
        except requests.RequestException as exc:
            logger.error("Daraja [%s] request failed: %s", context, exc)
            return Outcome.failure(ErrorCode.INTERNAL_ERROR, "M-Pesa API request failed")

        return self._classify(resp, context)

    def _classify(self, resp: requests.Response, context: str) -> Outcome:
        """Map an HTTP response to an Outcome carrying the decoded JSON body."""
        status = resp.status_code
        try:
            data = resp.json()
        except ValueError:
            data = None

        provider_code = data.get("errorCode") if isinstance(data, dict) else None
        suffix = f", error {provider_code}" if provider_code else ""

        if 400 <= status < 500:
            logger.error("Daraja [%s] client error HTTP %s: %s", context, status, resp.text[:500])
            return Outcome.failure(
                ErrorCode.CLIENT_ERROR,
                f"M-Pesa API rejected the request (HTTP {status}{suffix})",
            )

        if status >= 500:
            logger.error("Daraja [%s] server error HTTP %s: %s", context, status, resp.text[:500])
            return Outcome.failure(
                ErrorCode.SERVER_ERROR,
                f"M-Pesa API server error (HTTP {status}{suffix})",
            )

        if not 200 <= status < 300 or not isinstance(data, dict):
            logger.error("Daraja [%s] unreadable response HTTP %s: %s", context, status, resp.text[:500])
            return Outcome.failure(ErrorCode.INTERNAL_ERROR, "Unreadable response from the M-Pesa API")

        # Daraja sometimes returns 200 with an error in the body (e.g. "500.001.1001")
        if provider_code:
            logger.error("Daraja [%s] error in 200 response: %s", context, resp.text[:500])
            code = ErrorCode.SERVER_ERROR if str(provider_code).startswith("5") else ErrorCode.CLIENT_ERROR
            return Outcome.failure(code, f"M-Pesa API returned error {provider_code}")

        logger.debug("Daraja [%s] HTTP %s", context, status)
        return Outcome.success(data)
