"""
Tagged results passed between the Daraja components.

Each layer (token manager, request builder, gateway) returns an ``Outcome``
instead of raising, so the service facade only has to look at
``outcome.ok`` and ``outcome.error.code``.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from mpesa_service.errors.exceptions import AppError, ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class ClassifiedError:
    code: ErrorCode
    message: str
    http_status: int = field(default=0)

    def __post_init__(self):
        if not self.http_status:
            object.__setattr__(self, "http_status", self.code.http_status)

    @classmethod
    def from_exception(cls, exc: AppError) -> "ClassifiedError":
        return cls(code=exc.code, message=exc.message)

    def to_dict(self):
        return {"code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[ClassifiedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, code: ErrorCode, message: str, http_status: int = 0) -> "Outcome[T]":
        return cls(error=ClassifiedError(code, message, http_status))

    @classmethod
    def from_error(cls, error: ClassifiedError) -> "Outcome[T]":
        return cls(error=error)
