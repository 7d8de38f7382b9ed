"""Synchronous API client for the SagaPay gateway."""

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


class SagaPayClient(BaseSagaPayClient):
    """Blocking client for the SagaPay gateway API.

    Holds only immutable configuration and an httpx.Client, so one instance
    can be shared by several threads issuing overlapping calls. Connection
    reuse is left to httpx. Failed calls are never retried.

    Examples:
        >>> config = ClientConfig(api_key="key", api_secret="secret")
        >>> with SagaPayClient(config) as client:
        ...     deposit = client.create_deposit(
        ...         DepositRequest(
        ...             network_type=NetworkType.BEP20,
        ...             contract_address="0",
        ...             amount="1.5",
        ...             ipn_url="https://example.com/webhook",
        ...         )
        ...     )
        ...     print(deposit.address)
    """

    def __init__(self, config: ClientConfig, http_client: Optional[httpx.Client] = None):
        """Initialize the client.

        Args:
            config: Client configuration (validated here)
            http_client: Optional pre-built httpx.Client; when omitted one is
                created with the configured timeout and closed by close()

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        super().__init__(config)
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=config.timeout)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SagaPayClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def create_deposit(
        self, params: DepositRequest, timeout: Optional[float] = None
    ) -> DepositResponse:
        """Create a deposit address for receiving cryptocurrency.

        Args:
            params: Deposit parameters
            timeout: Optional per-call timeout in seconds

        Returns:
            DepositResponse with the address to pay into

        Raises:
            ValidationError: If a required parameter is missing (no request is sent)
            APIError: If the gateway rejects the request
            TransportError: If the request could not be completed
            DecodeError: If the response body is malformed
        """
        return self._execute(self._deposit_call(params), timeout)

    def create_withdrawal(
        self, params: WithdrawalRequest, timeout: Optional[float] = None
    ) -> WithdrawalResponse:
        """Create a cryptocurrency withdrawal.

        Args:
            params: Withdrawal parameters
            timeout: Optional per-call timeout in seconds

        Returns:
            WithdrawalResponse with the withdrawal id, status and fee

        Raises:
            ValidationError: If a required parameter is missing (no request is sent)
            APIError: If the gateway rejects the request
            TransportError: If the request could not be completed
            DecodeError: If the response body is malformed
        """
        return self._execute(self._withdrawal_call(params), timeout)

    def check_transaction_status(
        self,
        address: str,
        transaction_type: Union[TransactionType, str],
        timeout: Optional[float] = None,
    ) -> TransactionStatusResponse:
        """Get the transactions of a given type for an address.

        Args:
            address: Blockchain address to look up
            transaction_type: deposit or withdrawal
            timeout: Optional per-call timeout in seconds

        Returns:
            TransactionStatusResponse, transactions in gateway order
        """
        return self._execute(
            self._transaction_status_call(address, transaction_type), timeout
        )

    def fetch_wallet_balance(
        self,
        address: str,
        network_type: Union[NetworkType, str],
        contract_address: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> WalletBalanceResponse:
        """Get the balance of a wallet for a token or the native asset.

        Args:
            address: Wallet address
            network_type: Network the wallet lives on
            contract_address: Token contract; omitted from the query when empty
            timeout: Optional per-call timeout in seconds

        Returns:
            WalletBalanceResponse with raw and formatted balance
        """
        return self._execute(
            self._wallet_balance_call(address, network_type, contract_address), timeout
        )

    def _execute(self, call: Call, timeout: Optional[float]) -> Any:
        request = self._build_request(self._client, call, timeout)
        try:
            response = self._client.send(request)
        except httpx.RequestError as e:
            raise self._transport_error(call, e) from e
        return self._decode(call, response)
