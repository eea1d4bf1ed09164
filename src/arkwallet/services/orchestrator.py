"""Wallet operation orchestrator.

Sequences calls to the wallet service, updates the state store and runs the
consolidation heuristic on the send path.

Every operation:
- makes at most one call per remote step (no retries)
- catches its own ``ApiError`` and returns None; the failure lands in the
  error slot (published by the client, or by the orchestrator after the
  ticket check when stale responses are discarded)
- never rolls back state written by an earlier step of the same operation

Operations are independent and may overlap. Same-operation races are
last-write-wins unless stale response discarding is enabled, in which case
only the newest invocation of an operation may write state.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from arkwallet.client.api import Endpoint, WalletApiClient
from arkwallet.client.errors import ApiError
from arkwallet.config import get_settings
from arkwallet.contracts.wallet import (
    Balances,
    DepositRequest,
    FaucetRequest,
    FeeQuote,
    Network,
    SendPaymentRequest,
    Utxo,
    WalletAddresses,
    WithdrawRequest,
)
from arkwallet.risk.heuristic import needs_consolidation_warning
from arkwallet.state.store import WalletStateStore
from arkwallet.utils.amounts import AmountInput, is_blank, parse_amount
from arkwallet.utils.sequencing import OperationSequencer

logger = logging.getLogger(__name__)


class WalletOrchestrator:
    """Named wallet operations over a wallet service client and a state store."""

    def __init__(
        self,
        client: WalletApiClient,
        store: Optional[WalletStateStore] = None,
        multiplier: Optional[int] = None,
        discard_stale_responses: Optional[bool] = None,
        default_network: Optional[Network] = None,
    ):
        """Initialize the orchestrator.

        Args:
            client: Wallet service client
            store: State store (a new one sharing the client's error slot if None)
            multiplier: Consolidation warning multiplier (defaults to settings)
            discard_stale_responses: Drop superseded same-operation responses
                (defaults to settings)
            default_network: Network used when an operation gets none
        """
        settings = get_settings()

        self.client = client
        self.store = store or WalletStateStore(errors=client.errors)
        # Client failures must land in the slot the store exposes.
        self.client.errors = self.store.errors

        self.multiplier = multiplier if multiplier is not None else settings.consolidation_multiplier
        self.discard_stale_responses = (
            discard_stale_responses
            if discard_stale_responses is not None
            else settings.discard_stale_responses
        )
        self.default_network = default_network or Network.parse(settings.default_network)
        self.sequencer = OperationSequencer()

        if self.discard_stale_responses:
            # Failures are published by _execute, after the ticket check.
            self.client.errors = None

    async def _execute(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
    ) -> tuple[bool, Any]:
        """Run one remote step of an operation.

        Returns:
            (True, result) when the call succeeded and may write state,
            (False, None) on failure or when superseded by a newer invocation
        """
        ticket = self.sequencer.issue(operation) if self.discard_stale_responses else None
        logger.debug(f"{operation}: request sent")

        try:
            result = await call()
        except ApiError as e:
            logger.warning(f"{operation} failed: {type(e).__name__}: {e.detail}")
            if ticket is not None and self.sequencer.is_current(operation, ticket):
                self.store.errors.publish(e.detail, operation=e.endpoint)
            return False, None

        if ticket is not None and not self.sequencer.is_current(operation, ticket):
            return False, None

        return True, result

    def _network(self, endpoint: Endpoint, network) -> Optional[Network]:
        """Resolve a network name; an unknown one is published as an error."""
        if network is None:
            return self.default_network
        try:
            return Network.parse(network)
        except ValueError:
            self.store.errors.publish(f"invalid network: {network}", operation=endpoint.value)
            return None

    # ======================
    # Wallet
    # ======================

    async def create_wallet(self) -> Optional[WalletAddresses]:
        """Issue the wallet address pair and show it."""
        ok, addresses = await self._execute("create_wallet", self.client.create_wallet)
        if not ok:
            return None

        self.store.set_addresses(addresses)
        logger.info(f"Wallet addresses issued: off-chain {addresses.offchain_address}")
        return addresses

    async def get_deposit_addresses(self) -> Optional[WalletAddresses]:
        """Fetch deposit addresses (same issuance call as wallet creation)."""
        ok, addresses = await self._execute("get_deposit_addresses", self.client.create_wallet)
        if not ok:
            return None

        self.store.set_deposit_addresses(addresses)
        logger.info(f"Deposit addresses issued: boarding {addresses.boarding_address}")
        return addresses

    # ======================
    # Sync
    # ======================

    async def refresh_balances(self) -> Optional[Balances]:
        ok, balances = await self._execute("refresh_balances", self.client.get_balance)
        if not ok:
            return None

        self.store.replace_balances(balances)
        logger.info(f"Balances: off-chain {balances.offchain}, on-chain {balances.onchain}")
        return balances

    async def refresh_utxos(self) -> Optional[list[Utxo]]:
        ok, utxos = await self._execute("refresh_utxos", self.client.get_utxos)
        if not ok:
            return None

        self.store.replace_utxos(utxos)
        logger.info(f"UTXO set refreshed: {len(utxos)} output(s)")
        return utxos

    async def initialize(self) -> None:
        """Initial sync: balances and UTXOs, concurrently."""
        await asyncio.gather(self.refresh_balances(), self.refresh_utxos())

    # ======================
    # Send path
    # ======================

    async def estimate_fees(
        self,
        amount: AmountInput,
        network: Optional[Network] = None,
    ) -> Optional[FeeQuote]:
        """Fetch a fee quote and re-evaluate the consolidation warning.

        A malformed or negative amount makes this a no-op: no call is made
        and neither the quote nor the warning changes.
        """
        value = parse_amount(amount)
        if value is None:
            logger.debug(f"Fee estimate skipped: malformed amount {amount!r}")
            return None
        target = self._network(Endpoint.ESTIMATE_FEES, network)
        if target is None:
            return None

        ok, quote = await self._execute(
            "estimate_fees", lambda: self.client.estimate_fees(value, target)
        )
        if not ok:
            return None

        self.store.replace_fee_quote(quote)
        if not quote.is_consistent:
            logger.warning(
                f"Fee quote total {quote.total} != network {quote.breakdown.network} "
                f"+ service {quote.breakdown.service}"
            )

        # Evaluated against the UTXO snapshot held right now.
        warning = needs_consolidation_warning(self.store.utxos, quote.total, self.multiplier)
        self.store.set_warning(warning)
        if warning.warn:
            logger.info(warning.message)

        logger.info(f"Fee quote for {value} sats on {target.value}: {quote.total} sats")
        return quote

    async def send_payment(
        self,
        to: str,
        amount: AmountInput,
        network: Optional[Network] = None,
    ) -> Optional[str]:
        """Send a payment, then refresh balances and UTXOs concurrently.

        The amount is not validated here; a malformed one is sent as null and
        rejected by the wallet service. An unknown network name is published
        as an error without a call.
        """
        target = self._network(Endpoint.SEND_PAYMENT, network)
        if target is None:
            return None
        request = SendPaymentRequest(network=target, to=to, amount=parse_amount(amount))

        ok, receipt = await self._execute(
            "send_payment", lambda: self.client.send_payment(request)
        )
        if not ok:
            return None

        self.store.set_payment_txid(receipt.txid)
        logger.info(f"Payment sent: {receipt.txid}")

        await asyncio.gather(self.refresh_balances(), self.refresh_utxos())
        return receipt.txid

    # ======================
    # Settlement
    # ======================

    async def settle_funds(self, amount: AmountInput = None) -> Optional[str]:
        """Settle off-chain funds; no amount settles everything."""
        if is_blank(amount):
            request = DepositRequest()
        else:
            request = DepositRequest(amount=parse_amount(amount))

        ok, receipt = await self._execute("settle_funds", lambda: self.client.deposit(request))
        if not ok:
            return None

        self.store.set_settlement_txid(receipt.txid)
        logger.info(f"Settlement submitted: {receipt.txid}")

        await self.refresh_balances()
        return receipt.txid

    async def withdraw_funds(self, to: str, amount: AmountInput) -> Optional[str]:
        """Withdraw to an on-chain address, then refresh balances."""
        request = WithdrawRequest(to=to, amount=parse_amount(amount))

        ok, receipt = await self._execute("withdraw_funds", lambda: self.client.withdraw(request))
        if not ok:
            return None

        self.store.set_withdrawal_txid(receipt.txid)
        logger.info(f"Withdrawal submitted: {receipt.txid}")

        await self.refresh_balances()
        return receipt.txid

    async def request_faucet_funds(self, address: str) -> Optional[str]:
        """Ask the test faucet to fund an address."""
        request = FaucetRequest(address=address)

        ok, receipt = await self._execute(
            "request_faucet_funds", lambda: self.client.faucet(request)
        )
        if not ok:
            return None

        self.store.set_faucet_message(receipt.message)
        logger.info(f"Faucet funded {address}")
        return receipt.message

    def clear_error(self) -> None:
        """Acknowledge the current error."""
        self.store.errors.clear()
