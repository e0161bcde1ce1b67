from mpesa_service.models.enums import Environment, ShortcodeType, OperationKind, QRTransactionType
from mpesa_service.models.credential_set import CredentialSet
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
    OutboundRequest,
)
from mpesa_service.models.responses import (
    TokenResponse,
    StkPushResponse,
    StkStatusResponse,
    ConversationResponse,
    QRCodeResponse,
    ResponseEnvelope,
)
from mpesa_service.models.shortcode import ShortCode

__all__ = [
    'Environment', 'ShortcodeType', 'OperationKind', 'QRTransactionType',
    'CredentialSet',
    'STKPushRequest', 'STKQueryRequest', 'C2BRegisterRequest', 'C2BSimulateRequest',
    'B2CPaymentRequest', 'B2BTransferRequest', 'TransactionStatusRequest',
    'AccountBalanceRequest', 'ReversalRequest', 'QRCodeRequest', 'OutboundRequest',
    'TokenResponse', 'StkPushResponse', 'StkStatusResponse', 'ConversationResponse',
    'QRCodeResponse', 'ResponseEnvelope',
    'ShortCode',
]
