"""Asynchronous API client for the SagaPay gateway."""

from __future__ import annotations

from typing import Any, Optional, Union

import httpx

from ..models import (
    DepositRequest,
    DepositResponse,
    NetworkType,
    TransactionStatusResponse,
    TransactionType,
    WalletBalanceResponse,
    WithdrawalRequest,
    WithdrawalResponse,
)
from ._base import BaseSagaPayClient, Call
from .config import ClientConfig


class AsyncSagaPayClient(BaseSagaPayClient):
    """Asyncio client for the SagaPay gateway API.

    Same operations and errors as SagaPayClient. Cancelling the awaiting
    task aborts the in-flight request and re-raises asyncio.CancelledError
    untouched.

    Examples:
        >>> async with AsyncSagaPayClient(config) as client:
        ...     balance = await client.fetch_wallet_balance(
        ...         "0x742d35Cc6634C0532925a3b844Bc454e4438f44e", NetworkType.ERC20
        ...     )
        ...     print(balance.balance.formatted)
    """

    def __init__(
        self, config: ClientConfig, http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the client.

        Args:
            config: Client configuration (validated here)
            http_client: Optional pre-built httpx.AsyncClient; when omitted one
                is created with the configured timeout and closed by aclose()

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        super().__init__(config)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncSagaPayClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def create_deposit(
        self, params: DepositRequest, timeout: Optional[float] = None
    ) -> DepositResponse:
        """Create a deposit address. See SagaPayClient.create_deposit."""
        return await self._execute(self._deposit_call(params), timeout)

    async def create_withdrawal(
        self, params: WithdrawalRequest, timeout: Optional[float] = None
    ) -> WithdrawalResponse:
        """Create a withdrawal. See SagaPayClient.create_withdrawal."""
        return await self._execute(self._withdrawal_call(params), timeout)

    async def check_transaction_status(
        self,
        address: str,
        transaction_type: Union[TransactionType, str],
        timeout: Optional[float] = None,
    ) -> TransactionStatusResponse:
        """Get transactions for an address. See SagaPayClient.check_transaction_status."""
        return await self._execute(
            self._transaction_status_call(address, transaction_type), timeout
        )

    async def fetch_wallet_balance(
        self,
        address: str,
        network_type: Union[NetworkType, str],
        contract_address: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> WalletBalanceResponse:
        """Get a wallet balance. See SagaPayClient.fetch_wallet_balance."""
        return await self._execute(
            self._wallet_balance_call(address, network_type, contract_address), timeout
        )

    async def _execute(self, call: Call, timeout: Optional[float]) -> Any:
        request = self._build_request(self._client, call, timeout)
        try:
            response = await self._client.send(request)
        except httpx.RequestError as e:
            raise self._transport_error(call, e) from e
        return self._decode(call, response)
