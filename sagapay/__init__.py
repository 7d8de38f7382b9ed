"""SagaPay Python SDK.

Client library and webhook receiver for the SagaPay blockchain payment
gateway:
- Create deposit addresses and withdrawals
- Look up transaction status and wallet balances
- Verify and decode instant payment notifications (IPN)

Quick Start:
    >>> from sagapay import ClientConfig, DepositRequest, NetworkType, SagaPayClient
    >>> client = SagaPayClient(ClientConfig(api_key="key", api_secret="secret"))
    >>> deposit = client.create_deposit(
    ...     DepositRequest(
    ...         network_type=NetworkType.BEP20,
    ...         contract_address="0",
    ...         amount="1.5",
    ...         ipn_url="https://example.com/webhook",
    ...     )
    ... )
    >>> print(deposit.address)
"""

# Version
__version__ = "1.0.0"

# Clients
from sagapay.api import AsyncSagaPayClient, ClientConfig, SagaPayClient

# Configuration
from sagapay.config import get_config

# Error types
from sagapay.errors import (
    APIError,
    ConfigurationError,
    DecodeError,
    MissingSignatureError,
    PayloadError,
    RequestTimeoutError,
    SagaPayError,
    SignatureError,
    TransportError,
    ValidationError,
    WebhookError,
)

# Wire models and enumerations
from sagapay.models import (
    NATIVE_CONTRACT_ADDRESS,
    AddressType,
    Balance,
    DepositRequest,
    DepositResponse,
    NetworkType,
    Token,
    Transaction,
    TransactionStatus,
    TransactionStatusResponse,
    TransactionType,
    WalletBalanceResponse,
    WebhookPayload,
    WithdrawalRequest,
    WithdrawalResponse,
)

# Webhooks
from sagapay.webhooks import WebhookVerifier

__all__ = [
    # Version
    "__version__",
    # Clients
    "AsyncSagaPayClient",
    "ClientConfig",
    "SagaPayClient",
    "WebhookVerifier",
    # Models
    "NATIVE_CONTRACT_ADDRESS",
    "AddressType",
    "Balance",
    "DepositRequest",
    "DepositResponse",
    "NetworkType",
    "Token",
    "Transaction",
    "TransactionStatus",
    "TransactionStatusResponse",
    "TransactionType",
    "WalletBalanceResponse",
    "WebhookPayload",
    "WithdrawalRequest",
    "WithdrawalResponse",
    # Errors
    "APIError",
    "ConfigurationError",
    "DecodeError",
    "MissingSignatureError",
    "PayloadError",
    "RequestTimeoutError",
    "SagaPayError",
    "SignatureError",
    "TransportError",
    "ValidationError",
    "WebhookError",
    # Config
    "get_config",
]
