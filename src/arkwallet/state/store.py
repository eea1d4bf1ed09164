"""Wallet state store.

Single source of truth for everything the orchestrator derives from the
wallet service. It is a plain holder: no validation, and every field group is
replaced as a whole (balances together, UTXOs as a full list, addresses as a
pair). Only the orchestrator calls the mutators.
"""

from typing import Optional

from arkwallet.contracts.wallet import Balances, FeeQuote, Utxo, WalletAddresses
from arkwallet.risk.heuristic import NO_WARNING, WarningState
from arkwallet.state.errors import ErrorSlot


class WalletStateStore:
    """Transient, process-local wallet state."""

    def __init__(self, errors: Optional[ErrorSlot] = None):
        self.errors = errors or ErrorSlot()

        self._addresses: Optional[WalletAddresses] = None
        self._deposit_addresses: Optional[WalletAddresses] = None
        self._balances = Balances.zero()
        self._utxos: tuple[Utxo, ...] = ()
        self._fee_quote = FeeQuote.zero()
        self._warning: WarningState = NO_WARNING

        self._payment_txid: Optional[str] = None
        self._settlement_txid: Optional[str] = None
        self._withdrawal_txid: Optional[str] = None
        self._faucet_message: Optional[str] = None

    # ======================
    # Read accessors
    # ======================

    @property
    def addresses(self) -> Optional[WalletAddresses]:
        return self._addresses

    @property
    def deposit_addresses(self) -> Optional[WalletAddresses]:
        return self._deposit_addresses

    @property
    def balances(self) -> Balances:
        return self._balances

    @property
    def utxos(self) -> tuple[Utxo, ...]:
        return self._utxos

    @property
    def fee_quote(self) -> FeeQuote:
        return self._fee_quote

    @property
    def warning(self) -> WarningState:
        return self._warning

    @property
    def payment_txid(self) -> Optional[str]:
        return self._payment_txid

    @property
    def settlement_txid(self) -> Optional[str]:
        return self._settlement_txid

    @property
    def withdrawal_txid(self) -> Optional[str]:
        return self._withdrawal_txid

    @property
    def faucet_message(self) -> Optional[str]:
        return self._faucet_message

    # ======================
    # Mutators
    # ======================

    def set_addresses(self, addresses: WalletAddresses) -> None:
        self._addresses = addresses

    def set_deposit_addresses(self, addresses: WalletAddresses) -> None:
        self._deposit_addresses = addresses

    def replace_balances(self, balances: Balances) -> None:
        self._balances = balances

    def replace_utxos(self, utxos) -> None:
        self._utxos = tuple(utxos)

    def replace_fee_quote(self, quote: FeeQuote) -> None:
        self._fee_quote = quote

    def set_warning(self, warning: WarningState) -> None:
        self._warning = warning

    def set_payment_txid(self, txid: str) -> None:
        self._payment_txid = txid

    def set_settlement_txid(self, txid: str) -> None:
        self._settlement_txid = txid

    def set_withdrawal_txid(self, txid: str) -> None:
        self._withdrawal_txid = txid

    def set_faucet_message(self, message: str) -> None:
        self._faucet_message = message

    def snapshot(self) -> dict:
        """Return a plain dict of the current state (for display and tests)."""
        return {
            "addresses": self._addresses.model_dump() if self._addresses else None,
            "deposit_addresses": (
                self._deposit_addresses.model_dump() if self._deposit_addresses else None
            ),
            "balances": self._balances.model_dump(),
            "utxos": [u.model_dump() for u in self._utxos],
            "fee_quote": self._fee_quote.model_dump(),
            "warning": self._warning.message,
            "payment_txid": self._payment_txid,
            "settlement_txid": self._settlement_txid,
            "withdrawal_txid": self._withdrawal_txid,
            "faucet_message": self._faucet_message,
            "error": self.errors.message,
        }
