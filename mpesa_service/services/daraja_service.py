"""
Daraja orchestration service

Entry point for every outbound M-Pesa operation. Each call resolves the
credential set, checks its preconditions, obtains a bearer token, builds the
payload, sends it through the gateway and wraps the result in a
ResponseEnvelope together with the elapsed time. Operations never raise and
never retry.
"""

import time
from typing import Callable, Optional

from mpesa_service.daraja.builders import RequestBuilder
from mpesa_service.daraja.gateway import DarajaGateway
from mpesa_service.daraja.token_manager import TokenManager
from mpesa_service.errors import (
    AppError,
    ClassifiedError,
    ErrorCode,
    InvalidConfigurationError,
    InvalidEnvironmentError,
)
from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.models.enums import OperationKind
from mpesa_service.models.requests import (
    STKPushRequest,
    STKQueryRequest,
    C2BRegisterRequest,
    C2BSimulateRequest,
    B2CPaymentRequest,
    B2BTransferRequest,
    TransactionStatusRequest,
    AccountBalanceRequest,
    ReversalRequest,
    QRCodeRequest,
)
from mpesa_service.models.responses import ResponseEnvelope
from mpesa_service.services.credential_store import CredentialStore
from mpesa_service.utils.logger import get_logger

logger = get_logger(__name__)

STK_OPERATIONS = (OperationKind.STK_PUSH, OperationKind.STK_QUERY)


class DarajaService:
    """
    Args:
        credential_store: resolves credential-set identifiers
        token_manager: supplies cached bearer tokens
        gateway: sends requests to the sandbox or production host
        builder: builds request payloads; a default RequestBuilder if omitted
        clock: monotonic clock in seconds, used for processing_time_ms
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        token_manager: TokenManager,
        gateway: DarajaGateway,
        builder: Optional[RequestBuilder] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.credential_store = credential_store
        self.token_manager = token_manager
        self.gateway = gateway
        self.builder = builder or RequestBuilder()
        self._clock = clock

    # STK Push

    def initiate_stk_push(self, credential_id, phone_number, amount,
                          account_reference=None, transaction_desc=None) -> ResponseEnvelope:
        """Prompt the customer's handset to authorise a payment to the shortcode."""
        return self.execute(credential_id, STKPushRequest(
            phone_number=phone_number,
            amount=amount,
            account_reference=account_reference,
            transaction_desc=transaction_desc,
        ))

    def query_stk_push_status(self, credential_id, checkout_request_id) -> ResponseEnvelope:
        return self.execute(credential_id, STKQueryRequest(checkout_request_id=checkout_request_id))

    # C2B

    def register_c2b_urls(self, credential_id, confirmation_url=None, validation_url=None,
                          response_type="Completed") -> ResponseEnvelope:
        """Register confirmation and validation URLs; defaults come from the credential set."""
        return self.execute(credential_id, C2BRegisterRequest(
            confirmation_url=confirmation_url,
            validation_url=validation_url,
            response_type=response_type,
        ))

    def simulate_c2b_payment(self, credential_id, phone_number, amount,
                             bill_ref_number=None) -> ResponseEnvelope:
        """Sandbox only. Production credential sets fail with INVALID_ENVIRONMENT."""
        return self.execute(credential_id, C2BSimulateRequest(
            phone_number=phone_number,
            amount=amount,
            bill_ref_number=bill_ref_number,
        ))

    # Initiator operations

    def send_b2c_payment(self, credential_id, phone_number, amount, remarks=None,
                         occasion=None, command_id="BusinessPayment") -> ResponseEnvelope:
        return self.execute(credential_id, B2CPaymentRequest(
            phone_number=phone_number,
            amount=amount,
            remarks=remarks,
            occasion=occasion,
            command_id=command_id,
        ))

    def transfer_b2b(self, credential_id, receiver_shortcode, amount, remarks=None,
                     account_reference=None) -> ResponseEnvelope:
        return self.execute(credential_id, B2BTransferRequest(
            receiver_shortcode=receiver_shortcode,
            amount=amount,
            remarks=remarks,
            account_reference=account_reference,
        ))

    def query_transaction_status(self, credential_id, transaction_id, remarks=None) -> ResponseEnvelope:
        return self.execute(credential_id, TransactionStatusRequest(
            transaction_id=transaction_id,
            remarks=remarks,
        ))

    def query_account_balance(self, credential_id, remarks=None) -> ResponseEnvelope:
        return self.execute(credential_id, AccountBalanceRequest(remarks=remarks))

    def reverse_transaction(self, credential_id, transaction_id, amount, remarks=None) -> ResponseEnvelope:
        return self.execute(credential_id, ReversalRequest(
            transaction_id=transaction_id,
            amount=amount,
            remarks=remarks,
        ))

    # QR

    def generate_qr_code(self, credential_id, amount=None, transaction_type=None,
                         merchant_name=None, account_reference=None, size=300) -> ResponseEnvelope:
        """
        Generate a dynamic QR code for the shortcode

        Args:
            transaction_type: QRTransactionType or its Daraja code ("BG", "PB", ...);
                defaults by shortcode type
        """
        return self.execute(credential_id, QRCodeRequest(
            amount=amount,
            transaction_type=transaction_type,
            merchant_name=merchant_name,
            account_reference=account_reference,
            size=size,
        ))

    # Pipeline

    def execute(self, credential_id, request) -> ResponseEnvelope:
        """Run one outbound request through resolve, validate, token, build and call."""
        started = self._clock()
        kind = request.kind

        try:
            error, result = self._run(credential_id, request)
        except AppError as e:
            error, result = ClassifiedError.from_exception(e), None
        except Exception:
            logger.exception(f'Unexpected error during {kind.value} for credential set {credential_id}')
            error = ClassifiedError(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")
            result = None

        elapsed_ms = int((self._clock() - started) * 1000)

        if error is not None:
            logger.warning(
                f'{kind.value} failed for credential set {credential_id}: '
                f'{error.code.value} {error.message} ({elapsed_ms}ms)'
            )
            return ResponseEnvelope.failed(error, elapsed_ms)

        logger.info(f'{kind.value} succeeded for credential set {credential_id} ({elapsed_ms}ms)')
        return ResponseEnvelope.ok(result, elapsed_ms)

    def _run(self, credential_id, request):
        """Return (error, response); exactly one is set."""
        kind = request.kind

        credential = self.credential_store.get(credential_id)
        self._check_preconditions(credential, kind)

        token = self.token_manager.get_access_token(credential)
        if not token.ok:
            return token.error, None

        payload = self.builder.build(credential, request)
        if not payload.ok:
            return payload.error, None

        response = self.gateway.call(credential.environment, kind, token.value, payload.value)
        if not response.ok:
            return response.error, None

        return None, response.value

    @staticmethod
    def _check_preconditions(credential: CredentialSet, kind: OperationKind) -> None:
        """
        Raises:
            InvalidConfigurationError: inactive or inconsistent credential set, or
                STK operation without a passkey
            InvalidEnvironmentError: C2B simulation outside the sandbox
        """
        if not credential.is_active:
            raise InvalidConfigurationError(f"Shortcode {credential.shortcode} is not active")

        problems = credential.validation_errors()
        if problems:
            raise InvalidConfigurationError("; ".join(problems))

        if kind in STK_OPERATIONS and not credential.stk_push_enabled:
            raise InvalidConfigurationError("STK Push not enabled for this shortcode: passkey is not configured")

        if kind == OperationKind.C2B_SIMULATE and not credential.is_sandbox:
            raise InvalidEnvironmentError("C2B simulation is only available in the sandbox environment")
