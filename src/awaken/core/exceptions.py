# src/awaken/core/exceptions.py
from typing import Optional, Any


RATE_LIMIT_STATUS = 429


class AwakenException(Exception):
    """Base exception for the awaken package"""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class LLMConfigurationError(AwakenException):
    """Raised when required configuration is missing or invalid"""
    pass


class LLMProviderError(AwakenException):
    """Raised when the LLM gateway call fails"""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code


class LLMRateLimitError(LLMProviderError):
    """Raised when the gateway answers with HTTP 429"""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, status_code=RATE_LIMIT_STATUS, details=details)


class LLMAuthenticationError(LLMProviderError):
    """Raised when authentication fails"""
    pass


class LLMConnectionError(LLMProviderError):
    """Raised when connection to the gateway fails"""
    pass


class LLMTimeoutError(LLMProviderError):
    """Raised when a request times out"""
    pass


class AnalysisError(AwakenException):
    """Raised when a structured analysis response cannot be parsed"""
    pass


def status_code_of(error: BaseException) -> Optional[int]:
    """Numeric status carried by an error, if any"""
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def is_rate_limited(error: BaseException) -> bool:
    """True when the error signals rate limiting (HTTP 429)"""
    return status_code_of(error) == RATE_LIMIT_STATUS
