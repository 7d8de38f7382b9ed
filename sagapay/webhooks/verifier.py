"""Signature verification for SagaPay instant payment notifications."""

import hashlib
import hmac
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from sagapay.errors import (
    ConfigurationError,
    MissingSignatureError,
    PayloadError,
    SignatureError,
)
from sagapay.logging import get_logger
from sagapay.models import WebhookPayload

logger = get_logger(__name__)

SIGNATURE_HEADER = "x-sagapay-signature"


class WebhookVerifier:
    """Authenticates and decodes notifications pushed by the gateway.

    The signature is the hex-encoded HMAC-SHA256 of the raw request body,
    keyed with the configured secret. A payload is only ever decoded after
    the signature has been checked.

    Holds nothing but the secret, so one instance can serve concurrent
    requests.
    """

    def __init__(self, secret: str):
        """Initialize the verifier.

        Args:
            secret: Shared secret the gateway signs notifications with (the
                API secret, or a dedicated webhook secret)

        Raises:
            ConfigurationError: If the secret is empty
        """
        if not secret:
            raise ConfigurationError("webhook secret is required")
        self._secret = secret.encode("utf-8")

    def compute_signature(self, body: Union[bytes, str]) -> str:
        """Compute the hex HMAC-SHA256 signature of a body.

        Args:
            body: Raw request body exactly as sent

        Returns:
            Hex-encoded HMAC signature
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        return hmac.new(self._secret, body, hashlib.sha256).hexdigest()

    def verify_signature(self, body: Union[bytes, str], signature: Optional[str]) -> bool:
        """Check a signature against a body in constant time.

        Args:
            body: Raw request body exactly as sent
            signature: Signature provided with the notification

        Returns:
            True if the signature matches, False otherwise
        """
        if not signature:
            return False
        expected = self.compute_signature(body)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))

    def process_webhook(
        self, body: Union[bytes, str], signature: Optional[str]
    ) -> WebhookPayload:
        """Verify a notification and decode its payload.

        Args:
            body: Raw request body exactly as sent
            signature: Signature provided with the notification

        Returns:
            Decoded WebhookPayload

        Raises:
            SignatureError: If the signature does not match (body is not parsed)
            PayloadError: If the authenticated body is not a valid payload
        """
        if not self.verify_signature(body, signature):
            logger.warning("Rejected webhook with invalid signature", body_length=len(body))
            raise SignatureError()

        try:
            payload = WebhookPayload.model_validate_json(body)
        except PydanticValidationError as e:
            logger.warning("Webhook payload could not be decoded", error=str(e))
            raise PayloadError(str(e), cause=e) from e

        logger.info(
            "Webhook verified",
            transaction_id=payload.id,
            type=payload.type.value,
            status=payload.status.value,
        )
        return payload

    async def handle_incoming(self, request: Request) -> WebhookPayload:
        """Verify and decode a notification straight from an HTTP request.

        The body bytes are read once and verified as received.

        Args:
            request: Incoming Starlette/FastAPI request

        Returns:
            Decoded WebhookPayload

        Raises:
            MissingSignatureError: If the signature header is absent
            SignatureError: If the signature does not match
            PayloadError: If the authenticated body is not a valid payload
        """
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Webhook received without signature header")
            raise MissingSignatureError()

        body = await request.body()
        return self.process_webhook(body, signature)
