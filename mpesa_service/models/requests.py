"""
Outbound request parameters, one dataclass per Daraja operation.

These are built by the service facade from caller arguments and consumed by
the request builder within the same call; they are never persisted.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from mpesa_service.models.enums import OperationKind, QRTransactionType


@dataclass(frozen=True)
class STKPushRequest:
    kind = OperationKind.STK_PUSH

    phone_number: str
    amount: Union[Decimal, float, int, str]
    account_reference: Optional[str] = None
    transaction_desc: Optional[str] = None


@dataclass(frozen=True)
class STKQueryRequest:
    kind = OperationKind.STK_QUERY

    checkout_request_id: str


@dataclass(frozen=True)
class C2BRegisterRequest:
    kind = OperationKind.C2B_REGISTER

    confirmation_url: Optional[str] = None
    validation_url: Optional[str] = None
    response_type: str = "Completed"


@dataclass(frozen=True)
class C2BSimulateRequest:
    kind = OperationKind.C2B_SIMULATE

    phone_number: str
    amount: Union[Decimal, float, int, str]
    bill_ref_number: Optional[str] = None


@dataclass(frozen=True)
class B2CPaymentRequest:
    kind = OperationKind.B2C_PAYMENT

    phone_number: str
    amount: Union[Decimal, float, int, str]
    remarks: Optional[str] = None
    occasion: Optional[str] = None
    command_id: str = "BusinessPayment"


@dataclass(frozen=True)
class B2BTransferRequest:
    kind = OperationKind.B2B_TRANSFER

    receiver_shortcode: str
    amount: Union[Decimal, float, int, str]
    remarks: Optional[str] = None
    account_reference: Optional[str] = None


@dataclass(frozen=True)
class TransactionStatusRequest:
    kind = OperationKind.TRANSACTION_STATUS

    transaction_id: str
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AccountBalanceRequest:
    kind = OperationKind.ACCOUNT_BALANCE

    remarks: Optional[str] = None


@dataclass(frozen=True)
class ReversalRequest:
    kind = OperationKind.REVERSAL

    transaction_id: str
    amount: Union[Decimal, float, int, str]
    remarks: Optional[str] = None


@dataclass(frozen=True)
class QRCodeRequest:
    kind = OperationKind.QR_CODE

    amount: Optional[Union[Decimal, float, int, str]] = None
    transaction_type: Optional[Union[QRTransactionType, str]] = None
    merchant_name: Optional[str] = None
    account_reference: Optional[str] = None
    size: int = 300


OutboundRequest = Union[
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
]
