"""Wire models for the SagaPay gateway.

This module provides Pydantic models for requests, responses and webhook
notifications to ensure:
- Closed enumerations (unknown values fail decoding instead of slipping through)
- Amounts and balances kept as strings so no precision is lost
- camelCase on the wire, snake_case in Python
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .errors import ValidationError

NATIVE_CONTRACT_ADDRESS = "0"
"""Contract address sentinel that selects the chain's native asset."""


class NetworkType(str, Enum):
    """Blockchain networks supported by the gateway."""

    ERC20 = "ERC20"
    BEP20 = "BEP20"
    TRC20 = "TRC20"
    POLYGON = "POLYGON"
    SOLANA = "SOLANA"


class TransactionType(str, Enum):
    """Direction of a transaction."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionStatus(str, Enum):
    """Gateway-reported transaction status.

    Lifecycle is PENDING -> PROCESSING -> COMPLETED | FAILED | CANCELLED.
    The client only reflects what the gateway reports; it does not enforce
    transitions.
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        """Whether no further status change is expected."""
        return self in (
            TransactionStatus.COMPLETED,
            TransactionStatus.FAILED,
            TransactionStatus.CANCELLED,
        )


class AddressType(str, Enum):
    """Deposit address lifetime hint."""

    TEMPORARY = "TEMPORARY"
    PERMANENT = "PERMANENT"


class WireModel(BaseModel):
    """Base for all gateway models (camelCase aliases, immutable)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON-ready dict sent to or received from the gateway."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _require(value: Any, field: str) -> None:
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field=field)


def _decimal_to_str(value: Any) -> Any:
    # Decimal keeps its exact textual form; floats are left for pydantic to reject
    if isinstance(value, Decimal):
        return str(value)
    return value


DecimalString = Annotated[str, BeforeValidator(_decimal_to_str)]


class DepositRequest(WireModel):
    """Parameters for creating a deposit address.

    Attributes:
        network_type: Network the deposit is received on
        contract_address: Token contract, or "0" for the native asset
        amount: Expected amount as a decimal string
        ipn_url: URL the gateway notifies on status changes
        udf: Opaque user-defined value echoed back in notifications
        type: Address lifetime hint
    """

    network_type: Optional[NetworkType] = None
    contract_address: str = ""
    amount: DecimalString = ""
    ipn_url: str = ""
    udf: Optional[str] = None
    type: Optional[AddressType] = None

    def validate_required(self) -> None:
        """Check that every required parameter is present.

        Raises:
            ValidationError: Naming the first missing parameter
        """
        _require(self.network_type, "networkType")
        _require(self.contract_address, "contractAddress")
        _require(self.amount, "amount")
        _require(self.ipn_url, "ipnUrl")

    def to_wire(self) -> Dict[str, Any]:
        data = super().to_wire()
        if not self.udf:
            data.pop("udf", None)
        return data


class WithdrawalRequest(WireModel):
    """Parameters for creating a withdrawal.

    Attributes:
        network_type: Network the funds are sent on
        contract_address: Token contract, or "0" for the native asset
        address: Destination wallet address
        amount: Amount as a decimal string
        ipn_url: URL the gateway notifies on status changes
        udf: Opaque user-defined value echoed back in notifications
    """

    network_type: Optional[NetworkType] = None
    contract_address: str = ""
    address: str = ""
    amount: DecimalString = ""
    ipn_url: str = ""
    udf: Optional[str] = None

    def validate_required(self) -> None:
        """Check that every required parameter is present.

        Raises:
            ValidationError: Naming the first missing parameter
        """
        _require(self.network_type, "networkType")
        _require(self.contract_address, "contractAddress")
        _require(self.address, "address")
        _require(self.amount, "amount")
        _require(self.ipn_url, "ipnUrl")

    def to_wire(self) -> Dict[str, Any]:
        data = super().to_wire()
        if not self.udf:
            data.pop("udf", None)
        return data


class DepositResponse(WireModel):
    """Response from the deposit-creation endpoint."""

    id: str
    address: str = ""
    expires_at: Optional[datetime] = None
    amount: str = ""
    status: TransactionStatus


class WithdrawalResponse(WireModel):
    """Response from the withdrawal-creation endpoint."""

    id: str
    status: TransactionStatus
    fee: str = ""


class Token(WireModel):
    """Token metadata."""

    network_type: NetworkType
    contract_address: str = ""
    symbol: str = ""
    name: str = ""
    decimals: int = Field(0, ge=0)


class Transaction(WireModel):
    """A transaction record as reported by the gateway."""

    id: str
    transaction_type: TransactionType
    status: TransactionStatus
    amount: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tx_hash: Optional[str] = None
    network_type: NetworkType
    contract_address: str = ""
    address: str = ""
    token: Optional[Token] = None


class TransactionStatusResponse(WireModel):
    """Transactions for an address, in the order the gateway returned them."""

    address: str
    transaction_type: TransactionType
    count: int = Field(0, ge=0)
    transactions: List[Transaction] = Field(default_factory=list)


class Balance(WireModel):
    """Balance in smallest units (raw) and human-readable form (formatted)."""

    raw: str
    formatted: str


class WalletBalanceResponse(WireModel):
    """Response from the wallet-balance endpoint."""

    address: str
    network_type: NetworkType
    contract_address: str = ""
    token: Optional[Token] = None
    balance: Balance


class WebhookPayload(WireModel):
    """Body of an instant payment notification.

    Only ever built from a body whose signature has already been verified.
    """

    id: str
    type: TransactionType
    status: TransactionStatus
    address: str
    network_type: NetworkType
    amount: str
    udf: Optional[str] = None
    tx_hash: Optional[str] = None
    timestamp: datetime

    @field_validator("amount")
    @classmethod
    def amount_is_decimal(cls, v: str) -> str:
        try:
            value = Decimal(v)
        except InvalidOperation:
            raise ValueError(f"amount must be a decimal string (got {v!r})") from None
        if not value.is_finite():
            raise ValueError(f"amount must be a finite decimal (got {v!r})")
        return v

    @property
    def amount_decimal(self) -> Decimal:
        """Amount as an exact Decimal."""
        return Decimal(self.amount)


class APIErrorBody(WireModel):
    """Structured error body returned with 4xx/5xx responses."""

    error: str = ""
    message: str = ""
    data: Optional[Dict[str, Any]] = None

    @field_validator("data", mode="before")
    @classmethod
    def wrap_non_object_data(cls, v: Any) -> Any:
        if v is None or isinstance(v, dict):
            return v
        return {"value": v}
