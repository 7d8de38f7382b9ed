"""Standardized exit codes for the sagapay CLI.

Following POSIX conventions and common CLI practices.
"""

from enum import IntEnum

from .errors import (
    ConfigurationError,
    SagaPayError,
    TransportError,
    ValidationError,
    WebhookError,
)


class ExitCode(IntEnum):
    """Exit codes for sagapay CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    USER_ERROR = 1
    """User error: missing credentials, invalid arguments, unreadable input."""

    SYSTEM_ERROR = 2
    """System error: connection failure, timeout."""

    PROCESSING_ERROR = 3
    """Processing error: gateway rejected the request or answered garbage."""

    INTERRUPTED = 130
    """User interrupted with SIGINT (Ctrl+C)."""


def exit_code_for(error: SagaPayError) -> ExitCode:
    """Map a sagapay error to the exit code the CLI should return."""
    if isinstance(error, (ConfigurationError, ValidationError, WebhookError)):
        return ExitCode.USER_ERROR
    if isinstance(error, TransportError):
        return ExitCode.SYSTEM_ERROR
    return ExitCode.PROCESSING_ERROR
