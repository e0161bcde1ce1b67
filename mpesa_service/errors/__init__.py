from mpesa_service.errors.exceptions import (
    AppError,
    CredentialSetNotFound,
    ErrorCode,
    InvalidConfigurationError,
    InvalidEnvironmentError,
    InvalidRequestError,
    SecurityCredentialNotImplemented,
)
from mpesa_service.errors.outcome import ClassifiedError, Outcome

__all__ = [
    'AppError',
    'ClassifiedError',
    'CredentialSetNotFound',
    'ErrorCode',
    'InvalidConfigurationError',
    'InvalidEnvironmentError',
    'InvalidRequestError',
    'Outcome',
    'SecurityCredentialNotImplemented',
]
