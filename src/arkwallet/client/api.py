"""HTTP client for the remote wallet service.

Every call is made exactly once; there are no retries at this layer. Any
failure is published to the shared error slot and raised as an ``ApiError``
subclass. Typed wrappers validate payloads into the wallet contracts and
raise ``ShapeError`` when fields are missing or mistyped.
"""

import logging
from enum import Enum
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from arkwallet.client.errors import ApiError, HttpError, ShapeError, TransportError
from arkwallet.config import get_settings
from arkwallet.contracts.wallet import (
    Balances,
    DepositRequest,
    FaucetReceipt,
    FaucetRequest,
    FeeQuote,
    Network,
    SendPaymentRequest,
    TransactionReceipt,
    Utxo,
    WalletAddresses,
    WithdrawRequest,
)
from arkwallet.state.errors import ErrorSlot

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Endpoint(str, Enum):
    """Logical wallet service endpoints."""

    CREATE_WALLET = "create-wallet"
    GET_BALANCE = "get-balance"
    GET_UTXOS = "get-utxos"
    ESTIMATE_FEES = "estimate-fees"
    SEND_PAYMENT = "send-payment"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    FAUCET = "faucet"


# Endpoint -> (HTTP method, path)
ROUTES: dict[Endpoint, tuple[str, str]] = {
    Endpoint.CREATE_WALLET: ("POST", "/wallet/create"),
    Endpoint.GET_BALANCE: ("GET", "/wallet/balance"),
    Endpoint.GET_UTXOS: ("GET", "/wallet/utxos"),
    Endpoint.ESTIMATE_FEES: ("GET", "/payment/estimate"),
    Endpoint.SEND_PAYMENT: ("POST", "/payment/send"),
    Endpoint.DEPOSIT: ("POST", "/wallet/deposit"),
    Endpoint.WITHDRAW: ("POST", "/wallet/withdraw"),
    Endpoint.FAUCET: ("POST", "/wallet/faucet"),
}

_UTXO_LIST = TypeAdapter(list[Utxo])


class WalletApiClient:
    """Typed wrapper around the wallet service HTTP API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        errors: Optional[ErrorSlot] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Wallet service URL (defaults to settings)
            errors: Error slot failures are published to
            timeout: Transport timeout in seconds (defaults to settings)
            transport: Custom httpx transport (mock or ASGI in tests)
        """
        settings = get_settings()
        self.base_url = base_url or settings.wallet_api_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.errors: Optional[ErrorSlot] = errors or ErrorSlot()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "WalletApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def _fail(self, error: ApiError) -> ApiError:
        """Publish a failure to the error slot and hand it back for raising.

        Nothing is published when ``errors`` is None; the caller then owns
        publication.
        """
        if self.errors is not None:
            self.errors.publish(error.detail, operation=error.endpoint)
        return error

    async def call(
        self,
        endpoint: Endpoint,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make one call to the wallet service and return the parsed JSON.

        Args:
            endpoint: Logical endpoint identifier
            body: JSON body for POST calls
            params: Query parameters

        Returns:
            Decoded JSON payload (untyped)

        Raises:
            TransportError: Service unreachable
            HttpError: Non-success status
            ShapeError: Body is not JSON
        """
        method, path = ROUTES[endpoint]
        client = await self._get_client()

        logger.debug(f"{method} {path} params={params} body={body}")

        try:
            response = await client.request(method, path, json=body, params=params)
        except httpx.HTTPError as e:
            raise self._fail(TransportError(str(e) or type(e).__name__, endpoint.value)) from e

        if not response.is_success:
            logger.debug(f"{method} {path} -> {response.status_code}")
            raise self._fail(HttpError(response.status_code, response.text, endpoint.value))

        try:
            return response.json()
        except ValueError as e:
            raise self._fail(
                ShapeError(f"Invalid JSON from {endpoint.value}: {e}", endpoint.value)
            ) from e

    def _parse(self, endpoint: Endpoint, model: type[ModelT], data: Any) -> ModelT:
        """Validate a payload into a contract model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise self._fail(ShapeError(_describe(endpoint, e), endpoint.value)) from e

    # ======================
    # Typed operations
    # ======================

    async def create_wallet(self) -> WalletAddresses:
        """Issue (or re-issue) the wallet's address pair."""
        data = await self.call(Endpoint.CREATE_WALLET)
        return self._parse(Endpoint.CREATE_WALLET, WalletAddresses, data)

    async def get_balance(self) -> Balances:
        data = await self.call(Endpoint.GET_BALANCE)
        return self._parse(Endpoint.GET_BALANCE, Balances, data)

    async def get_utxos(self) -> list[Utxo]:
        """Fetch the UTXO list. A JSON ``null`` means no UTXOs."""
        data = await self.call(Endpoint.GET_UTXOS)
        if data is None:
            return []
        try:
            return _UTXO_LIST.validate_python(data)
        except ValidationError as e:
            raise self._fail(
                ShapeError(_describe(Endpoint.GET_UTXOS, e), Endpoint.GET_UTXOS.value)
            ) from e

    async def estimate_fees(self, amount: int, network: Network) -> FeeQuote:
        data = await self.call(
            Endpoint.ESTIMATE_FEES,
            params={"amount": amount, "network": network.value},
        )
        return self._parse(Endpoint.ESTIMATE_FEES, FeeQuote, data)

    async def send_payment(self, request: SendPaymentRequest) -> TransactionReceipt:
        data = await self.call(Endpoint.SEND_PAYMENT, body=request.model_dump(mode="json"))
        return self._parse(Endpoint.SEND_PAYMENT, TransactionReceipt, data)

    async def deposit(self, request: DepositRequest) -> TransactionReceipt:
        """Settle off-chain funds.

        Only fields explicitly set on the request are sent, so
        ``DepositRequest()`` produces ``{}`` (settle everything).
        """
        data = await self.call(
            Endpoint.DEPOSIT, body=request.model_dump(mode="json", exclude_unset=True)
        )
        return self._parse(Endpoint.DEPOSIT, TransactionReceipt, data)

    async def withdraw(self, request: WithdrawRequest) -> TransactionReceipt:
        data = await self.call(Endpoint.WITHDRAW, body=request.model_dump(mode="json"))
        return self._parse(Endpoint.WITHDRAW, TransactionReceipt, data)

    async def faucet(self, request: FaucetRequest) -> FaucetReceipt:
        data = await self.call(Endpoint.FAUCET, body=request.model_dump(mode="json"))
        return self._parse(Endpoint.FAUCET, FaucetReceipt, data)


def _describe(endpoint: Endpoint, error: ValidationError) -> str:
    """Summarize a validation error in one line."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in error.errors()
    )
    return f"Malformed {endpoint.value} response ({problems})"
