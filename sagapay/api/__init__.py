"""Gateway API clients.

Basic usage:
    >>> from sagapay.api import ClientConfig, SagaPayClient
    >>> client = SagaPayClient(ClientConfig(api_key="key", api_secret="secret"))
    >>> status = client.check_transaction_status("0xabc...", "deposit")
    >>> print(status.count)
"""

from .async_client import AsyncSagaPayClient
from .config import ClientConfig
from .sync_client import SagaPayClient

__all__ = ["ClientConfig", "SagaPayClient", "AsyncSagaPayClient"]
