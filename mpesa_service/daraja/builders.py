"""
Daraja request payload builders

Pure construction of the JSON body for each operation from a credential set
and the caller's request parameters. Field names are Daraja's own and must
not change. ``RequestBuilder.build`` never raises for configuration or
parameter problems; it returns a failed Outcome instead.
"""

import base64
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from mpesa_service.daraja.security import SecurityCredentialGenerator
from mpesa_service.errors import (
    AppError,
    ClassifiedError,
    InvalidConfigurationError,
    InvalidRequestError,
    Outcome,
)
from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.models.enums import OperationKind, QRTransactionType, ShortcodeType
from mpesa_service.utils.logger import get_logger
from mpesa_service.utils.validators import is_valid_url, normalise_phone, to_amount, validate_phone_number

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
SANDBOX_INITIATOR_NAME = "testapi"

# Daraja field limits
ACCOUNT_REFERENCE_MAX = 12
TRANSACTION_DESC_MAX = 13

# Action M-Pesa takes when the validation URL is unreachable
C2B_RESPONSE_TYPES = ("Completed", "Cancelled")


def generate_password(shortcode: str, passkey: str, timestamp: str) -> str:
    """Password = Base64(BusinessShortCode + Passkey + Timestamp)"""
    raw = f"{shortcode}{passkey}{timestamp}"
    return base64.b64encode(raw.encode("utf-8")).decode("utf-8")


class RequestBuilder:
    """
    Args:
        security: generator for initiator security credentials
        clock: returns the current local time, used for the Timestamp field
    """

    def __init__(
        self,
        security: Optional[SecurityCredentialGenerator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.security = security or SecurityCredentialGenerator()
        self._clock = clock
        self._builders = {
            OperationKind.STK_PUSH:           self.stk_push,
            OperationKind.STK_QUERY:          self.stk_query,
            OperationKind.C2B_REGISTER:       self.c2b_register,
            OperationKind.C2B_SIMULATE:       self.c2b_simulate,
            OperationKind.B2C_PAYMENT:        self.b2c_payment,
            OperationKind.B2B_TRANSFER:       self.b2b_transfer,
            OperationKind.TRANSACTION_STATUS: self.transaction_status,
            OperationKind.ACCOUNT_BALANCE:    self.account_balance,
            OperationKind.REVERSAL:           self.reversal,
            OperationKind.QR_CODE:            self.qr_code,
        }

    def build(self, credential: CredentialSet, request) -> Outcome:
        """Return Outcome[dict] with the payload for request.kind."""
        try:
            return Outcome.success(self._builders[request.kind](credential, request))
        except AppError as exc:
            logger.warning("Cannot build %s payload for shortcode %s: %s",
                           request.kind.value, credential.id, exc.message)
            return Outcome.from_error(ClassifiedError.from_exception(exc))

    # Shared pieces

    def timestamp(self) -> str:
        return self._clock().strftime(TIMESTAMP_FORMAT)

    def generate_security_credential(self, credential: CredentialSet) -> str:
        return self.security.generate(credential)

    def _stk_auth(self, credential: CredentialSet) -> Dict[str, str]:
        if not credential.stk_push_enabled:
            raise InvalidConfigurationError("STK Push not enabled for this shortcode: passkey is not configured")

        timestamp = self.timestamp()
        return {
            "BusinessShortCode": credential.shortcode,
            "Password":          generate_password(credential.shortcode, credential.passkey, timestamp),
            "Timestamp":         timestamp,
        }

    def _initiator(self, credential: CredentialSet) -> Dict[str, str]:
        security_credential = self.generate_security_credential(credential)

        name = credential.initiator_name
        if not name:
            if not credential.is_sandbox:
                raise InvalidConfigurationError("initiator_name is required for production initiator operations")
            name = SANDBOX_INITIATOR_NAME

        return {"name": name, "security_credential": security_credential}

    @staticmethod
    def _result_urls(credential: CredentialSet) -> Dict[str, str]:
        return {
            "ResultURL":       credential.result_url or credential.callback_url,
            "QueueTimeOutURL": credential.queue_timeout_url or credential.callback_url,
        }

    @staticmethod
    def _identifier_type(credential: CredentialSet) -> str:
        return "2" if credential.shortcode_type == ShortcodeType.TILL else "4"

    @staticmethod
    def _amount(value) -> Decimal:
        try:
            return to_amount(value)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc

    @staticmethod
    def _phone(value) -> str:
        phone = normalise_phone(value)
        valid, message = validate_phone_number(phone)
        if not valid:
            raise InvalidRequestError(message)
        return phone

    @staticmethod
    def _required(value: Optional[str], name: str) -> str:
        if not value or not str(value).strip():
            raise InvalidRequestError(f"{name} is required")
        return value

    @staticmethod
    def _account_reference(credential: CredentialSet, value: Optional[str]) -> str:
        return value or credential.account_reference or credential.shortcode

    # STK Push

    def stk_push(self, credential: CredentialSet, request) -> Dict[str, Any]:
        stk_auth = self._stk_auth(credential)
        phone = self._phone(request.phone_number)

        transaction_type = (
            "CustomerBuyGoodsOnline" if credential.shortcode_type == ShortcodeType.TILL
            else "CustomerPayBillOnline"
        )
        account_reference = self._account_reference(credential, request.account_reference)
        transaction_desc = request.transaction_desc or credential.transaction_desc or "Payment"

        return {
            **stk_auth,
            "TransactionType":  transaction_type,
            "Amount":           self._amount(request.amount),
            "PartyA":           phone,
            "PartyB":           credential.shortcode,
            "PhoneNumber":      phone,
            "CallBackURL":      credential.callback_url,
            "AccountReference": account_reference[:ACCOUNT_REFERENCE_MAX],
            "TransactionDesc":  transaction_desc[:TRANSACTION_DESC_MAX],
        }

    def stk_query(self, credential: CredentialSet, request) -> Dict[str, Any]:
        return {
            **self._stk_auth(credential),
            "CheckoutRequestID": self._required(request.checkout_request_id, "checkout_request_id"),
        }

    # C2B

    def c2b_register(self, credential: CredentialSet, request) -> Dict[str, Any]:
        confirmation_url = request.confirmation_url or credential.confirmation_url
        validation_url = request.validation_url or credential.validation_url

        for name, url in (("confirmation_url", confirmation_url), ("validation_url", validation_url)):
            if not is_valid_url(url):
                raise InvalidConfigurationError(f"{name} must be an absolute http(s) URL for C2B registration")

        if request.response_type not in C2B_RESPONSE_TYPES:
            raise InvalidRequestError(
                f"response_type must be one of {', '.join(C2B_RESPONSE_TYPES)}, got {request.response_type!r}"
            )

        return {
            "ShortCode":       credential.shortcode,
            "ResponseType":    request.response_type,
            "ConfirmationURL": confirmation_url,
            "ValidationURL":   validation_url,
        }

    def c2b_simulate(self, credential: CredentialSet, request) -> Dict[str, Any]:
        command_id = (
            "CustomerBuyGoodsOnline" if credential.shortcode_type == ShortcodeType.TILL
            else "CustomerPayBillOnline"
        )
        return {
            "ShortCode":     credential.shortcode,
            "CommandID":     command_id,
            "Amount":        self._amount(request.amount),
            "Msisdn":        self._phone(request.phone_number),
            "BillRefNumber": self._account_reference(credential, request.bill_ref_number),
        }

    # Initiator operations

    def b2c_payment(self, credential: CredentialSet, request) -> Dict[str, Any]:
        initiator = self._initiator(credential)
        urls = self._result_urls(credential)
        return {
            "InitiatorName":      initiator["name"],
            "SecurityCredential": initiator["security_credential"],
            "CommandID":          request.command_id,
            "Amount":             self._amount(request.amount),
            "PartyA":             credential.shortcode,
            "PartyB":             self._phone(request.phone_number),
            "Remarks":            request.remarks or "B2C Payment",
            "QueueTimeOutURL":    urls["QueueTimeOutURL"],
            "ResultURL":          urls["ResultURL"],
            "Occasion":           request.occasion or "Payment",
        }

    def b2b_transfer(self, credential: CredentialSet, request) -> Dict[str, Any]:
        initiator = self._initiator(credential)
        urls = self._result_urls(credential)
        return {
            "Initiator":              initiator["name"],
            "SecurityCredential":     initiator["security_credential"],
            "CommandID":              "BusinessToBusinessTransfer",
            "SenderIdentifierType":   self._identifier_type(credential),
            "RecieverIdentifierType": "4",
            "Amount":                 self._amount(request.amount),
            "PartyA":                 credential.shortcode,
            "PartyB":                 self._required(request.receiver_shortcode, "receiver_shortcode"),
            "AccountReference":       self._account_reference(credential, request.account_reference),
            "Remarks":                request.remarks or "B2B Transfer",
            "QueueTimeOutURL":        urls["QueueTimeOutURL"],
            "ResultURL":              urls["ResultURL"],
        }

    def transaction_status(self, credential: CredentialSet, request) -> Dict[str, Any]:
        initiator = self._initiator(credential)
        urls = self._result_urls(credential)
        return {
            "Initiator":          initiator["name"],
            "SecurityCredential": initiator["security_credential"],
            "CommandID":          "TransactionStatusQuery",
            "TransactionID":      self._required(request.transaction_id, "transaction_id"),
            "PartyA":             credential.shortcode,
            "IdentifierType":     self._identifier_type(credential),
            "ResultURL":          urls["ResultURL"],
            "QueueTimeOutURL":    urls["QueueTimeOutURL"],
            "Remarks":            request.remarks or "Transaction Status Query",
            "Occasion":           "TransactionStatusQuery",
        }

    def account_balance(self, credential: CredentialSet, request) -> Dict[str, Any]:
        initiator = self._initiator(credential)
        urls = self._result_urls(credential)
        return {
            "Initiator":          initiator["name"],
            "SecurityCredential": initiator["security_credential"],
            "CommandID":          "AccountBalance",
            "PartyA":             credential.shortcode,
            "IdentifierType":     self._identifier_type(credential),
            "Remarks":            request.remarks or "Account Balance Query",
            "QueueTimeOutURL":    urls["QueueTimeOutURL"],
            "ResultURL":          urls["ResultURL"],
        }

    def reversal(self, credential: CredentialSet, request) -> Dict[str, Any]:
        initiator = self._initiator(credential)
        urls = self._result_urls(credential)
        return {
            "Initiator":              initiator["name"],
            "SecurityCredential":     initiator["security_credential"],
            "CommandID":              "TransactionReversal",
            "TransactionID":          self._required(request.transaction_id, "transaction_id"),
            "Amount":                 self._amount(request.amount),
            "ReceiverParty":          credential.shortcode,
            "RecieverIdentifierType": "11",
            "ResultURL":              urls["ResultURL"],
            "QueueTimeOutURL":        urls["QueueTimeOutURL"],
            "Remarks":                request.remarks or "Transaction Reversal",
            "Occasion":               "TransactionReversal",
        }

    # QR

    def qr_code(self, credential: CredentialSet, request) -> Dict[str, Any]:
        merchant_name = request.merchant_name or credential.business_name
        if not merchant_name:
            raise InvalidConfigurationError("business_name is required to generate a QR code")

        transaction_type = request.transaction_type or (
            QRTransactionType.BUY_GOODS if credential.shortcode_type == ShortcodeType.TILL
            else QRTransactionType.PAY_BILL
        )
        if isinstance(transaction_type, str):
            try:
                transaction_type = QRTransactionType.from_code(transaction_type)
            except ValueError as exc:
                raise InvalidRequestError(str(exc)) from exc
        amount = self._amount(request.amount) if request.amount is not None else Decimal("0")

        return {
            "MerchantName": merchant_name,
            "RefNo":        self._account_reference(credential, request.account_reference),
            "Amount":       amount,
            "TrxCode":      transaction_type.code,
            "CPI":          credential.shortcode,
            "Size":         str(request.size or 300),
        }
