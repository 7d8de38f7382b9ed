"""Tests for webhook verification and the receiver app."""

import functools
import hashlib
import hmac
import json

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from sagapay.errors import (
    ConfigurationError,
    MissingSignatureError,
    PayloadError,
    SignatureError,
)
from sagapay.models import NetworkType, TransactionStatus, TransactionType, WebhookPayload
from sagapay.webhooks import (
    SIGNATURE_HEADER,
    WebhookVerifier,
    create_webhook_app,
    error_response,
    success_response,
)

BODY = (
    b'{"id":"t1","type":"deposit","status":"COMPLETED","address":"a",'
    b'"networkType":"ERC20","amount":"5","timestamp":"2025-01-01T00:00:00Z"}'
)


def sign(body: bytes, secret: str = "s2") -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def make_request(body: bytes, headers: dict) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/webhook",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def verifier() -> WebhookVerifier:
    return WebhookVerifier("s2")


class TestVerifySignature:
    """Test WebhookVerifier.verify_signature."""

    def test_empty_secret_rejected(self):
        """Test that an empty secret is rejected."""
        with pytest.raises(ConfigurationError):
            WebhookVerifier("")

    def test_matching_signature(self, verifier):
        """Test verifying a correct signature."""
        assert verifier.verify_signature(BODY, sign(BODY)) is True

    def test_compute_signature_matches_hmac(self, verifier):
        """Test HMAC signature generation."""
        assert verifier.compute_signature(BODY) == sign(BODY)

    def test_wrong_secret(self, verifier):
        """Test a signature made with another secret."""
        assert verifier.verify_signature(BODY, sign(BODY, secret="other")) is False

    def test_body_bit_flip(self, verifier):
        """Test that a single changed body bit fails verification."""
        signature = sign(BODY)
        flipped = bytearray(BODY)
        flipped[10] ^= 0x01

        assert verifier.verify_signature(bytes(flipped), signature) is False

    def test_signature_char_flip(self, verifier):
        """Test that a single changed signature character fails verification."""
        signature = sign(BODY)
        flipped = ("1" if signature[0] != "1" else "2") + signature[1:]

        assert verifier.verify_signature(BODY, flipped) is False

    @pytest.mark.parametrize("signature", ["", None, "not-hex", "é" * 64])
    def test_garbage_signature_is_false(self, verifier, signature):
        """Test that malformed signatures return False."""
        assert verifier.verify_signature(BODY, signature) is False

    def test_empty_body(self, verifier):
        """Test signing an empty body."""
        assert verifier.verify_signature(b"", sign(b"")) is True


class TestProcessWebhook:
    """Test WebhookVerifier.process_webhook."""

    def test_valid_notification(self, verifier):
        """Test processing a valid notification."""
        payload = verifier.process_webhook(BODY, sign(BODY))

        assert payload.id == "t1"
        assert payload.type is TransactionType.DEPOSIT
        assert payload.status is TransactionStatus.COMPLETED
        assert payload.network_type is NetworkType.ERC20
        assert payload.amount == "5"
        assert payload.udf is None

    def test_invalid_signature(self, verifier):
        """Test that an invalid signature raises SignatureError."""
        with pytest.raises(SignatureError):
            verifier.process_webhook(BODY, "deadbeef")

    def test_body_never_parsed_without_valid_signature(self, verifier, monkeypatch):
        """Test that the body is not parsed before verification."""
        def fail(*args, **kwargs):
            raise AssertionError("payload parsed before signature check")

        monkeypatch.setattr(WebhookPayload, "model_validate_json", fail)

        with pytest.raises(SignatureError):
            verifier.process_webhook(b"not json at all", "bad")

    def test_signed_garbage(self, verifier):
        """Test that a signed non-JSON body raises PayloadError."""
        body = b"not json at all"

        with pytest.raises(PayloadError):
            verifier.process_webhook(body, sign(body))

    def test_signed_unknown_status(self, verifier):
        """Test that a signed payload with an unknown status raises PayloadError."""
        body = BODY.replace(b"COMPLETED", b"REFUNDED")

        with pytest.raises(PayloadError):
            verifier.process_webhook(body, sign(body))

    def test_signed_non_decimal_amount(self, verifier):
        """Test that a signed payload with a non-numeric amount is rejected."""
        body = BODY.replace(b'"amount":"5"', b'"amount":"abc"')

        with pytest.raises(PayloadError):
            verifier.process_webhook(body, sign(body))


class TestHandleIncoming:
    """Test WebhookVerifier.handle_incoming."""

    @pytest.mark.asyncio
    async def test_reads_signature_header(self, verifier):
        """Test reading the signature header from a request."""
        request = make_request(BODY, {SIGNATURE_HEADER: sign(BODY)})

        payload = await verifier.handle_incoming(request)

        assert payload.id == "t1"

    @pytest.mark.asyncio
    async def test_missing_signature(self, verifier):
        """Test that a missing signature header raises MissingSignatureError."""
        request = make_request(BODY, {})

        with pytest.raises(MissingSignatureError):
            await verifier.handle_incoming(request)


class TestResponses:
    """Test acknowledgment helpers."""

    def test_success_response(self):
        """Test the success acknowledgment."""
        response = success_response()

        assert response.status_code == 200
        assert json.loads(response.body) == {"received": True}

    def test_error_response_is_still_200(self):
        """Test that failure acknowledgments still use HTTP 200."""
        response = error_response(SignatureError())

        assert response.status_code == 200
        assert json.loads(response.body) == {
            "received": False,
            "error": "invalid webhook signature",
        }


class TestWebhookApp:
    """Test the FastAPI receiver."""

    @pytest.mark.asyncio
    async def test_accepts_signed_notification(self, verifier):
        """Test receiving a signed notification."""
        received = []
        app = create_webhook_app(verifier, received.append)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)}
            )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert [p.id for p in received] == ["t1"]

    @pytest.mark.asyncio
    async def test_async_handler(self, verifier):
        """Test that an async handler function is awaited."""
        received = []

        async def on_payload(payload):
            received.append(payload.status)

        app = create_webhook_app(verifier, on_payload)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.post("/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)})

        assert received == [TransactionStatus.COMPLETED]

    @pytest.mark.asyncio
    async def test_missing_signature_acknowledged_with_200(self, verifier):
        """Test acknowledging a notification without a signature."""
        received = []
        app = create_webhook_app(verifier, received.append)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/webhook", content=BODY)

        assert response.status_code == 200
        assert response.json() == {
            "received": False,
            "error": "missing SagaPay signature in headers",
        }
        assert received == []

    @pytest.mark.asyncio
    async def test_bad_signature_acknowledged_with_200(self, verifier):
        """Test acknowledging a notification with a bad signature."""
        received = []
        app = create_webhook_app(verifier, received.append)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY, "wrong")}
            )

        assert response.status_code == 200
        assert response.json()["received"] is False
        assert response.json()["error"] == "invalid webhook signature"
        assert received == []

    @pytest.mark.asyncio
    async def test_handler_failure_acknowledged_with_200(self, verifier):
        """Test acknowledging a notification whose handler fails."""
        def on_payload(payload):
            raise RuntimeError("order not found")

        app = create_webhook_app(verifier, on_payload)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)}
            )

        assert response.status_code == 200
        assert response.json() == {"received": False, "error": "order not found"}

    @pytest.mark.asyncio
    async def test_custom_path_and_method_not_allowed(self, verifier):
        """Test a custom route path, method checks and the health route."""
        app = create_webhook_app(verifier, path="/ipn")

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            ok = await client.post("/ipn", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)})
            wrong_method = await client.get("/ipn")
            health = await client.get("/health")

        assert ok.json() == {"received": True}
        assert wrong_method.status_code == 405
        assert health.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_async_callable_object_handler(self, verifier):
        """Test that an object with an async __call__ is awaited."""

        class Recorder:
            def __init__(self):
                self.seen = []

            async def __call__(self, payload):
                self.seen.append(payload.id)

        handler = Recorder()
        app = create_webhook_app(verifier, handler)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)}
            )

        assert response.json() == {"received": True}
        assert handler.seen == ["t1"]

    @pytest.mark.asyncio
    async def test_partial_async_handler(self, verifier):
        """Test that a partial wrapping an async function is awaited."""
        seen = []

        async def record(sink, payload):
            sink.append(payload.id)

        app = create_webhook_app(verifier, functools.partial(record, seen))

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.post("/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)})

        assert seen == ["t1"]

    @pytest.mark.asyncio
    async def test_async_handler_failure_acknowledged_with_200(self, verifier):
        """Test that an error raised by an async callable object is reported."""

        class Failing:
            async def __call__(self, payload):
                raise RuntimeError("ledger unavailable")

        app = create_webhook_app(verifier, Failing())

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/webhook", content=BODY, headers={SIGNATURE_HEADER: sign(BODY)}
            )

        assert response.status_code == 200
        assert response.json() == {"received": False, "error": "ledger unavailable"}
