"""
Model backend exceptions for codemate.

A backend failure aborts the turn before any tool dispatch happens.
"""

from enum import Enum


class FailureType(Enum):
    """Classification of backend failures."""

    RATE_LIMIT = "rate_limit"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    CONTEXT_LENGTH = "context_length"
    INVALID_REQUEST = "invalid_request"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class BackendError(Exception):
    """Base exception for model backend errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class AuthenticationError(BackendError):
    """API key invalid or missing."""

    pass


class RateLimitError(BackendError):
    """Provider rate limit exceeded."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retry_after: int | None = None,
    ):
        super().__init__(message, provider)
        self.retry_after = retry_after


class ContextLengthExceededError(BackendError):
    """Request exceeded the model's context length."""

    pass


class NetworkError(BackendError):
    """Network-related error (connection, unavailable service)."""

    pass


class ServerError(BackendError):
    """Provider server error (5xx status codes)."""

    pass


class InvalidRequestError(BackendError):
    """Invalid request sent to provider."""

    pass


class BackendTimeoutError(BackendError):
    """The model did not answer within the configured timeout."""

    pass


def classify_error(error: Exception) -> FailureType:
    """
    Classify an exception into a failure type.

    Args:
        error: The exception to classify.

    Returns:
        The failure type classification.
    """
    from litellm.exceptions import (
        APIConnectionError,
        APIError,
        AuthenticationError as LiteLLMAuthError,
        ContextWindowExceededError,
        RateLimitError as LiteLLMRateLimitError,
        ServiceUnavailableError,
        Timeout,
    )

    if isinstance(error, (LiteLLMRateLimitError, RateLimitError)):
        return FailureType.RATE_LIMIT
    if isinstance(error, (LiteLLMAuthError, AuthenticationError)):
        return FailureType.AUTH_ERROR
    if isinstance(error, (ContextWindowExceededError, ContextLengthExceededError)):
        return FailureType.CONTEXT_LENGTH
    if isinstance(error, (Timeout, BackendTimeoutError)):
        return FailureType.TIMEOUT
    if isinstance(error, (APIConnectionError, ServiceUnavailableError, NetworkError)):
        return FailureType.NETWORK_ERROR
    if isinstance(error, ServerError):
        return FailureType.SERVER_ERROR
    if isinstance(error, InvalidRequestError):
        return FailureType.INVALID_REQUEST
    if isinstance(error, APIError):
        status = getattr(error, "status_code", None)
        if status and 500 <= status < 600:
            return FailureType.SERVER_ERROR
        if status and 400 <= status < 500:
            return FailureType.INVALID_REQUEST

    return FailureType.UNKNOWN


_ERRORS_BY_TYPE: dict[FailureType, type[BackendError]] = {
    FailureType.RATE_LIMIT: RateLimitError,
    FailureType.AUTH_ERROR: AuthenticationError,
    FailureType.CONTEXT_LENGTH: ContextLengthExceededError,
    FailureType.TIMEOUT: BackendTimeoutError,
    FailureType.NETWORK_ERROR: NetworkError,
    FailureType.SERVER_ERROR: ServerError,
    FailureType.INVALID_REQUEST: InvalidRequestError,
}


def wrap_error(error: Exception, provider: str | None = None) -> BackendError:
    """
    Convert any backend-side exception into a BackendError.

    BackendError instances are returned unchanged.
    """
    if isinstance(error, BackendError):
        return error
    error_cls = _ERRORS_BY_TYPE.get(classify_error(error), BackendError)
    return error_cls(str(error), provider)
