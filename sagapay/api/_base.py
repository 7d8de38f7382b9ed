"""Request building and response decoding shared by the sync and async clients."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Type, TypeVar, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..errors import (
    APIError,
    DecodeError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)
from ..logging import get_logger
from ..models import (
    APIErrorBody,
    DepositRequest,
    DepositResponse,
    NetworkType,
    TransactionStatusResponse,
    TransactionType,
    WalletBalanceResponse,
    WireModel,
    WithdrawalRequest,
    WithdrawalResponse,
)
from .config import ClientConfig

logger = get_logger(__name__)

CREATE_DEPOSIT_PATH = "/create-deposit"
CREATE_WITHDRAWAL_PATH = "/create-withdrawal"
CHECK_TRANSACTION_STATUS_PATH = "/check-transaction-status"
FETCH_WALLET_BALANCE_PATH = "/fetch-wallet-balance"

API_KEY_HEADER = "x-api-key"
API_SECRET_HEADER = "x-api-secret"

E = TypeVar("E", bound=Enum)


class Call(NamedTuple):
    """A validated gateway call, ready to be turned into an HTTP request."""

    method: str
    path: str
    response_model: Type[WireModel]
    params: Optional[Dict[str, str]] = None
    body: Optional[Dict[str, Any]] = None


def _coerce_enum(enum_cls: Type[E], value: Union[E, str, None], field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"{field} must be one of: {allowed} (got {value!r})", field=field
        ) from None


class BaseSagaPayClient:
    """Holds the immutable configuration and builds validated calls.

    Subclasses only differ in how a prepared request is sent.
    """

    def __init__(self, config: ClientConfig):
        config.validate()
        self.config = config
        self.base_url = config.resolved_base_url
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            API_KEY_HEADER: config.api_key,
            API_SECRET_HEADER: config.api_secret,
        }

    # ------------------------------------------------------------------
    # Call preparation (no I/O)
    # ------------------------------------------------------------------

    def _deposit_call(self, params: DepositRequest) -> Call:
        params.validate_required()
        return Call("POST", CREATE_DEPOSIT_PATH, DepositResponse, body=params.to_wire())

    def _withdrawal_call(self, params: WithdrawalRequest) -> Call:
        params.validate_required()
        return Call(
            "POST", CREATE_WITHDRAWAL_PATH, WithdrawalResponse, body=params.to_wire()
        )

    def _transaction_status_call(
        self, address: str, transaction_type: Union[TransactionType, str]
    ) -> Call:
        if not address:
            raise ValidationError("address is required", field="address")
        tx_type = _coerce_enum(TransactionType, transaction_type, "type")
        return Call(
            "GET",
            CHECK_TRANSACTION_STATUS_PATH,
            TransactionStatusResponse,
            params={"address": address, "type": tx_type.value},
        )

    def _wallet_balance_call(
        self,
        address: str,
        network_type: Union[NetworkType, str],
        contract_address: Optional[str],
    ) -> Call:
        if not address:
            raise ValidationError("address is required", field="address")
        network = _coerce_enum(NetworkType, network_type, "networkType")
        params = {"address": address, "networkType": network.value}
        if contract_address:
            params["contractAddress"] = contract_address
        return Call("GET", FETCH_WALLET_BALANCE_PATH, WalletBalanceResponse, params=params)

    # ------------------------------------------------------------------
    # Request/response handling
    # ------------------------------------------------------------------

    def _build_request(
        self,
        client: Union[httpx.Client, httpx.AsyncClient],
        call: Call,
        timeout: Optional[float],
    ) -> httpx.Request:
        kwargs: Dict[str, Any] = {"headers": self._headers}
        if call.params is not None:
            kwargs["params"] = call.params
        if call.body is not None:
            kwargs["json"] = call.body
        if timeout is not None:
            kwargs["timeout"] = timeout

        logger.debug("Sending request", method=call.method, path=call.path)
        url = self.base_url.copy_with(path=self.base_url.path.rstrip("/") + call.path)
        return client.build_request(call.method, url, **kwargs)

    def _transport_error(self, call: Call, error: httpx.RequestError) -> TransportError:
        logger.warning("Request failed", path=call.path, error=str(error))
        if isinstance(error, httpx.TimeoutException):
            return RequestTimeoutError(f"request to {call.path} timed out", cause=error)
        return TransportError(f"request to {call.path} failed: {error}", cause=error)

    def _decode(self, call: Call, response: httpx.Response) -> Any:
        logger.debug("Received response", path=call.path, status=response.status_code)

        if response.status_code >= 400:
            raise self._error_from_response(call, response)

        try:
            return call.response_model.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise DecodeError(
                f"failed to decode {call.response_model.__name__}: {e}", cause=e
            ) from e

    def _error_from_response(self, call: Call, response: httpx.Response) -> Exception:
        status = response.status_code
        try:
            body = APIErrorBody.model_validate_json(response.content)
        except PydanticValidationError:
            logger.warning("Unparseable error response", path=call.path, status=status)
            return TransportError(
                f"HTTP error: {status} - failed to parse error response",
                status_code=status,
            )

        logger.warning("Gateway returned error", path=call.path, status=status, code=body.error)
        return APIError(
            code=body.error,
            message=body.message,
            status_code=status,
            data=body.data,
        )
