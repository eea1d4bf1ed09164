"""FastAPI application serving the dry-run wallet.

Implements the wallet service HTTP contract so the orchestrator can be run
end to end without a real backend. Errors are answered as plain text.
"""

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from arkwallet.config import get_settings
from arkwallet.simulator.wallet import DryRunError, DryRunWallet

logger = logging.getLogger(__name__)


class SendBody(BaseModel):
    network: str = ""
    to: str = ""
    amount: Optional[int] = None


class DepositBody(BaseModel):
    amount: Optional[int] = None


class WithdrawBody(BaseModel):
    to: str = ""
    amount: Optional[int] = None


class FaucetBody(BaseModel):
    address: str = ""


def create_router(wallet: DryRunWallet) -> APIRouter:
    """Build the wallet service routes over a dry-run wallet."""
    router = APIRouter()

    @router.post("/wallet/create")
    async def create_wallet():
        return wallet.receive()

    @router.get("/wallet/balance")
    async def balance():
        return wallet.balance()

    @router.get("/wallet/utxos")
    async def list_utxos():
        return wallet.list_utxos()

    @router.get("/payment/estimate")
    async def estimate_fee(amount: int = Query(..., ge=0), network: str = Query("offchain")):
        return wallet.estimate_fee()

    @router.post("/payment/send")
    async def send_payment(body: SendBody):
        return {"txid": wallet.send(body.network, body.to, body.amount)}

    @router.post("/wallet/deposit")
    async def deposit(body: Optional[DepositBody] = None):
        # Partial amounts are accepted but every settlement covers all funds.
        return {"txid": wallet.settle()}

    @router.post("/wallet/withdraw")
    async def withdraw(body: WithdrawBody):
        return {"txid": wallet.withdraw(body.to, body.amount)}

    @router.post("/wallet/faucet")
    async def faucet(body: FaucetBody):
        return {"message": wallet.faucet(body.address)}

    return router


def create_app(wallet: Optional[DryRunWallet] = None) -> FastAPI:
    """Create and configure the dry-run wallet service."""
    settings = get_settings()
    wallet = wallet or DryRunWallet(fee_rate=settings.simulator_fee_rate)

    app = FastAPI(
        title="arkwallet dry-run backend",
        description="Simulated wallet service for development and tests",
        version="0.1.0",
        debug=settings.debug,
    )
    app.state.wallet = wallet

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(DryRunError)
    async def dry_run_error_handler(request: Request, exc: DryRunError):
        logger.warning(f"[dry-run] {request.method} {request.url.path}: {exc.message}")
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    app.include_router(create_router(wallet))
    return app
