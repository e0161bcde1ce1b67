from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

from mpesa_service.errors import ClassifiedError

T = TypeVar("T")


@dataclass(frozen=True)
class TokenResponse:
    access_token: Optional[str]
    expires_in: Optional[int]
    token_type: Optional[str] = None

    def is_valid(self) -> bool:
        return bool(self.access_token and self.access_token.strip()) \
            and self.expires_in is not None and self.expires_in > 0


@dataclass(frozen=True)
class StkPushResponse:
    merchant_request_id: Optional[str]
    checkout_request_id: Optional[str]
    response_code: Optional[str] = None
    response_description: Optional[str] = None
    customer_message: Optional[str] = None


@dataclass(frozen=True)
class StkStatusResponse:
    merchant_request_id: Optional[str]
    checkout_request_id: Optional[str]
    response_code: Optional[str] = None
    response_description: Optional[str] = None
    result_code: Optional[str] = None
    result_desc: Optional[str] = None

    def is_successful(self) -> bool:
        return self.result_code == "0"

    def was_cancelled(self) -> bool:
        return self.result_code == "1032"

    def has_insufficient_funds(self) -> bool:
        return self.result_code == "1"


@dataclass(frozen=True)
class ConversationResponse:
    """Acknowledgement for asynchronous requests whose result arrives on ResultURL."""

    conversation_id: Optional[str]
    originator_conversation_id: Optional[str] = None
    response_code: Optional[str] = None
    response_description: Optional[str] = None


@dataclass(frozen=True)
class QRCodeResponse:
    response_code: Optional[str]
    request_id: Optional[str] = None
    response_description: Optional[str] = None
    qr_code: Optional[str] = None


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """Uniform result returned by every DarajaService operation."""

    success: bool
    data: Optional[T] = None
    error: Optional[ClassifiedError] = None
    http_status: int = 200
    processing_time_ms: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def ok(cls, data: T, processing_time_ms: Optional[int] = None,
           http_status: int = 200) -> "ResponseEnvelope[T]":
        return cls(success=True, data=data, http_status=http_status,
                   processing_time_ms=processing_time_ms)

    @classmethod
    def failed(cls, error: ClassifiedError,
               processing_time_ms: Optional[int] = None) -> "ResponseEnvelope[T]":
        return cls(success=False, error=error, http_status=error.http_status,
                   processing_time_ms=processing_time_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'data': asdict(self.data) if self.data is not None else None,
            'error': self.error.to_dict() if self.error else None,
            'timestamp': self.timestamp.isoformat(),
            'http_status': self.http_status,
            'processing_time_ms': self.processing_time_ms,
        }
