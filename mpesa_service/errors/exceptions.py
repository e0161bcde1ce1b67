from enum import Enum


class ErrorCode(str, Enum):
    """Error taxonomy surfaced to callers through the response envelope."""

    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    NOT_FOUND = "NOT_FOUND"
    AUTH_FAILURE = "AUTH_FAILURE"
    INVALID_ENVIRONMENT = "INVALID_ENVIRONMENT"
    CLIENT_ERROR = "CLIENT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorCode.INVALID_CONFIGURATION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.AUTH_FAILURE: 401,
    ErrorCode.INVALID_ENVIRONMENT: 400,
    ErrorCode.CLIENT_ERROR: 400,
    ErrorCode.SERVER_ERROR: 502,
    ErrorCode.NOT_IMPLEMENTED: 501,
    ErrorCode.INTERNAL_ERROR: 500,
}


class AppError(Exception):
    status_code = 500
    error = "Application error"
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message, status_code=None):
        super().__init__(message)
        if status_code:
            self.status_code = status_code
        self.message = message


class InvalidConfigurationError(AppError):
    status_code = 400
    error = "Invalid configuration"
    code = ErrorCode.INVALID_CONFIGURATION


class InvalidEnvironmentError(AppError):
    status_code = 400
    error = "Invalid environment"
    code = ErrorCode.INVALID_ENVIRONMENT


class CredentialSetNotFound(AppError):
    status_code = 404
    error = "Shortcode not found"
    code = ErrorCode.NOT_FOUND


class SecurityCredentialNotImplemented(AppError):
    status_code = 501
    error = "Not implemented"
    code = ErrorCode.NOT_IMPLEMENTED


class InvalidRequestError(AppError):
    status_code = 400
    error = "Bad request"
    code = ErrorCode.CLIENT_ERROR
