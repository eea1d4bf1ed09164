"""Pytest configuration and fixtures."""

import inspect
import json
import os
from typing import Any, Callable, Union

import httpx
import pytest
import pytest_asyncio

# Set test environment
os.environ["ARKWALLET_ENVIRONMENT"] = "test"
os.environ["ARKWALLET_WALLET_API_URL"] = "http://wallet.test"
os.environ["ARKWALLET_DISCARD_STALE_RESPONSES"] = "false"
os.environ["ARKWALLET_DEBUG"] = "true"

from arkwallet.client.api import WalletApiClient
from arkwallet.services.orchestrator import WalletOrchestrator
from arkwallet.state.errors import ErrorSlot

Responder = Union[httpx.Response, Callable[[httpx.Request], Any]]


class ScriptedBackend:
    """Wallet service double driven by per-route response scripts.

    Each route holds a queue of responses; the last one is reused once the
    queue is down to a single entry. A response may be a callable taking the
    request (sync or async), which lets tests hold a call in flight.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responses: Responder) -> "ScriptedBackend":
        self.routes[(method.upper(), path)] = list(responses)
        return self

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, text="404 page not found")

        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(item):
            item = item(request)
            if inspect.isawaitable(item):
                item = await item
        return item

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests if r.method == method.upper() and r.url.path == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """JSON response that also supports a literal ``null`` body."""
    return httpx.Response(
        status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json"},
    )


UTXOS = [
    {"amount": 1000, "locked": False, "spendable": True},
    {"amount": 300, "locked": True, "spendable": False},
]


@pytest.fixture
def backend() -> ScriptedBackend:
    """Backend double with every endpoint answering successfully."""
    return (
        ScriptedBackend()
        .on("POST", "/wallet/create", json_response(
            {"offchain_address": "tark1qoff", "boarding_address": "bcrt1qboard"}
        ))
        .on("GET", "/wallet/balance", json_response(
            {"offchain_balance": 1300, "onchain_balance": 500}
        ))
        .on("GET", "/wallet/utxos", json_response(UTXOS))
        .on("GET", "/payment/estimate", json_response(
            {"total": 200, "breakdown": {"network": 160, "service": 40}}
        ))
        .on("POST", "/payment/send", json_response({"txid": "pay-tx"}))
        .on("POST", "/wallet/deposit", json_response({"txid": "settle-tx"}))
        .on("POST", "/wallet/withdraw", json_response({"txid": "withdraw-tx"}))
        .on("POST", "/wallet/faucet", json_response({"message": "sent 100000 sats"}))
    )


@pytest.fixture
def errors() -> ErrorSlot:
    return ErrorSlot()


@pytest_asyncio.fixture
async def api_client(backend: ScriptedBackend, errors: ErrorSlot):
    """API client wired to the scripted backend."""
    client = WalletApiClient(
        base_url="http://wallet.test",
        errors=errors,
        transport=httpx.MockTransport(backend.handler),
    )
    yield client
    await client.close()


@pytest.fixture
def orchestrator(api_client: WalletApiClient) -> WalletOrchestrator:
    return WalletOrchestrator(api_client, multiplier=10, discard_stale_responses=False)
