"""FastAPI integration for receiving SagaPay notifications.

Provides a router that verifies each notification, hands the payload to an
application callback and always acknowledges with HTTP 200.
"""

import functools
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sagapay import __version__
from sagapay.errors import WebhookError
from sagapay.logging import get_logger
from sagapay.models import WebhookPayload

from .responses import error_response, success_response
from .verifier import WebhookVerifier

logger = get_logger(__name__)

PayloadHandler = Callable[[WebhookPayload], Union[None, Awaitable[None]]]


def _is_async_callable(handler: Any) -> bool:
    while isinstance(handler, functools.partial):
        handler = handler.func
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    )


async def _invoke(handler: PayloadHandler, payload: WebhookPayload) -> None:
    """Run a payload handler, awaiting whatever awaitable it hands back."""
    if _is_async_callable(handler):
        result = handler(payload)
    else:
        result = await run_in_threadpool(handler, payload)
    if inspect.isawaitable(result):
        await result


def create_webhook_router(
    verifier: WebhookVerifier,
    on_payload: Optional[PayloadHandler] = None,
    path: str = "/webhook",
) -> APIRouter:
    """Create a router with a POST endpoint for gateway notifications.

    Args:
        verifier: Verifier configured with the signing secret
        on_payload: Optional callback (sync or async) run with each verified
            payload; sync callbacks run in a worker thread
        path: Route path of the endpoint

    Returns:
        APIRouter to include in an application
    """
    router = APIRouter()

    @router.post(path)
    async def receive_webhook(request: Request) -> JSONResponse:
        try:
            payload = await verifier.handle_incoming(request)
        except WebhookError as e:
            logger.warning("Webhook rejected", error=str(e))
            return error_response(e)

        if on_payload is not None:
            try:
                await _invoke(on_payload, payload)
            except Exception as e:
                logger.exception("Webhook handler failed", transaction_id=payload.id)
                return error_response(e)

        return success_response()

    return router


def create_webhook_app(
    verifier: WebhookVerifier,
    on_payload: Optional[PayloadHandler] = None,
    path: str = "/webhook",
) -> FastAPI:
    """Create a standalone FastAPI application receiving notifications.

    Args:
        verifier: Verifier configured with the signing secret
        on_payload: Optional callback run with each verified payload
        path: Route path of the webhook endpoint

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="SagaPay Webhook Receiver",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(create_webhook_router(verifier, on_payload, path), tags=["Webhooks"])

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy"}

    return app
