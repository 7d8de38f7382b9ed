"""
Structured logging for sagapay.

Library modules log through ``get_logger``; nothing is emitted until an
application (or the CLI) calls ``setup_logging``. Credential and signature
values never reach a renderer.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.typing import EventDict, Processor

from .config import get_config

REDACTED = "***"

SENSITIVE_KEYS = frozenset(
    {
        "api_key",
        "api_secret",
        "secret",
        "webhook_secret",
        "signature",
        "x-api-key",
        "x-api-secret",
        "x-sagapay-signature",
    }
)


def redact_credentials(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential and signature values, including inside a headers mapping."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED

    headers = event_dict.get("headers")
    if isinstance(headers, dict):
        event_dict["headers"] = {
            name: REDACTED if name.lower() in SENSITIVE_KEYS else value
            for name, value in headers.items()
        }
    return event_dict


def _renderer(log_format: str) -> List[Processor]:
    if log_format == "json":
        return [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Route sagapay logs to stderr through structlog.

    Args:
        level: Log level name; defaults to SAGAPAY_LOG_LEVEL
        log_format: "console" or "json"; defaults to SAGAPAY_LOG_FORMAT

    Raises:
        pydantic.ValidationError: If the SAGAPAY_* settings are invalid
    """
    settings = get_config()
    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()

    # stdout is reserved for command output (e.g. --json)
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger("sagapay").setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            redact_credentials,
            structlog.processors.format_exc_info,
            *_renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "sagapay") -> structlog.stdlib.BoundLogger:
    """Get a sagapay logger."""
    return structlog.get_logger(name)
