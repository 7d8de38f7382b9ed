"""Receiving SagaPay instant payment notifications.

Verifies notification signatures, decodes payloads and acknowledges the
gateway with HTTP 200.
"""

from .app import create_webhook_app, create_webhook_router
from .responses import error_body, error_response, success_body, success_response
from .verifier import SIGNATURE_HEADER, WebhookVerifier

__all__ = [
    "SIGNATURE_HEADER",
    "WebhookVerifier",
    "create_webhook_app",
    "create_webhook_router",
    "error_body",
    "error_response",
    "success_body",
    "success_response",
]
