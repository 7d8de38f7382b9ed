"""Exceptions raised by the SagaPay client and webhook verifier.

Provides a clear hierarchy so integrating code can tell a rejected request
(validation, API error) apart from a connectivity problem (transport error)
and a forged notification (signature error).
"""

from typing import Any, Dict, Optional


class SagaPayError(Exception):
    """Base exception for all sagapay errors.

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SagaPayError):
    """Client or verifier was configured with bad or missing values.

    Raised when:
    - API key or API secret is empty
    - Base URL is not an absolute http(s) URL
    - Webhook secret is empty
    """


class ValidationError(SagaPayError):
    """Call parameters failed local validation.

    Always raised before any network I/O takes place.

    Attributes:
        field: Wire name of the offending parameter, if known
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class TransportError(SagaPayError):
    """The request could not be completed at the HTTP level.

    Raised when:
    - DNS resolution or connection fails
    - The gateway answers >= 400 with a body that is not a structured error

    Attributes:
        status_code: HTTP status, when a response was received
        cause: Underlying httpx exception, when there was one
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class RequestTimeoutError(TransportError):
    """The request exceeded its timeout."""


class APIError(SagaPayError):
    """Structured error response returned by the gateway.

    Attributes:
        code: Error code/category reported by the gateway (e.g. "unauthorized")
        message: Human-readable message from the gateway
        data: Optional auxiliary data attached to the error
        status_code: HTTP status of the response
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(f"API error: {code} - {message}")
        self.code = code
        self.message = message
        self.status_code = status_code
        self.data = data


class DecodeError(SagaPayError):
    """A successful response body could not be decoded."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class WebhookError(SagaPayError):
    """Base exception for inbound notification failures."""


class MissingSignatureError(WebhookError):
    """The notification carried no signature header."""

    def __init__(self, message: str = "missing SagaPay signature in headers"):
        super().__init__(message)


class SignatureError(WebhookError):
    """The notification signature did not match the body."""

    def __init__(self, message: str = "invalid webhook signature"):
        super().__init__(message)


class PayloadError(WebhookError):
    """An authenticated notification body could not be decoded."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"failed to parse webhook payload: {message}")
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
