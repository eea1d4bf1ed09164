"""In-memory dry-run wallet.

Mimics the observable behaviour of a real wallet service closely enough to
develop and test against: one address pair, boarding (on-chain) funds, a list
of virtual outputs (VTXOs), settlement and collaborative exits. No keys, no
chain, no real transactions.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Assumed transaction size for fee estimates
ESTIMATE_VBYTES = 100

# Share of an estimate attributed to the network fee (rest is service fee)
NETWORK_FEE_SHARE_NUM = 8
NETWORK_FEE_SHARE_DEN = 10

# Satoshis credited per faucet request
FAUCET_AMOUNT = 100_000

# Send accepts only these names; "offchain" is an estimate-only spelling
OFFCHAIN_NETWORKS = ("ark",)
ONCHAIN_NETWORKS = ("onchain",)


class DryRunError(Exception):
    """A request the dry-run wallet refuses, with the HTTP status to answer."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class Vtxo:
    """Simulated virtual output."""

    amount: int
    spent: bool = False


class DryRunWallet:
    """Single-key simulated wallet."""

    def __init__(self, seed: str = "dry-run", fee_rate: float = 2.0):
        """Initialize the wallet.

        Args:
            seed: Seed for deterministic addresses and txids
            fee_rate: Fee rate in sat/vbyte used by estimates
        """
        self.seed = seed
        self.fee_rate = fee_rate
        self.boarding_balance = 0
        self.vtxos: list[Vtxo] = []
        self._tx_counter = 0

    def _hash(self, label: str) -> str:
        return hashlib.sha256(f"{self.seed}:{label}".encode()).hexdigest()

    def _next_txid(self) -> str:
        self._tx_counter += 1
        return self._hash(f"tx:{self._tx_counter}")

    @property
    def offchain_address(self) -> str:
        return f"tark1q{self._hash('offchain')[:58]}"

    @property
    def boarding_address(self) -> str:
        return f"bcrt1q{self._hash('boarding')[:38]}"

    @property
    def spendable_vtxos(self) -> list[Vtxo]:
        return [v for v in self.vtxos if not v.spent]

    @property
    def offchain_balance(self) -> int:
        return sum(v.amount for v in self.spendable_vtxos)

    # ======================
    # Queries
    # ======================

    def receive(self) -> dict:
        return {
            "offchain_address": self.offchain_address,
            "boarding_address": self.boarding_address,
        }

    def balance(self) -> dict:
        return {
            "offchain_balance": self.offchain_balance,
            "onchain_balance": self.boarding_balance,
        }

    def list_utxos(self) -> Optional[list[dict]]:
        """Spendable VTXOs first, then spent ones (reported as locked).

        Returns None when there are no VTXOs at all, like services that encode
        an empty list as JSON null.
        """
        if not self.vtxos:
            return None
        spendable = [
            {"amount": v.amount, "locked": False, "spendable": True}
            for v in self.vtxos
            if not v.spent
        ]
        spent = [
            {"amount": v.amount, "locked": True, "spendable": False}
            for v in self.vtxos
            if v.spent
        ]
        return spendable + spent

    def estimate_fee(self) -> dict:
        total = int(self.fee_rate * ESTIMATE_VBYTES)
        network_fee = total * NETWORK_FEE_SHARE_NUM // NETWORK_FEE_SHARE_DEN
        return {
            "total_fee": total,
            "breakdown": {
                "network_fee": network_fee,
                "service_fee": total - network_fee,
            },
        }

    # ======================
    # Mutations
    # ======================

    def _spend(self, amount: Optional[int]) -> int:
        """Spend all spendable VTXOs for ``amount``; returns the change."""
        if amount is None or amount <= 0:
            raise DryRunError("invalid amount", status_code=400)

        available = self.offchain_balance
        if amount > available:
            raise DryRunError(f"not enough funds: have {available}, need {amount}")

        for vtxo in self.spendable_vtxos:
            vtxo.spent = True
        return available - amount

    def send(self, network: str, to: str, amount: Optional[int]) -> str:
        network = (network or "").lower()
        if network not in OFFCHAIN_NETWORKS + ONCHAIN_NETWORKS:
            raise DryRunError("invalid network", status_code=400)
        if not to:
            raise DryRunError("missing recipient", status_code=400)

        change = self._spend(amount)
        if change:
            self.vtxos.append(Vtxo(amount=change))

        txid = self._next_txid()
        logger.info(f"[dry-run] sent {amount} sats to {to} via {network}: {txid}")
        return txid

    def settle(self) -> str:
        """Fold boarding funds and spendable VTXOs into one fresh VTXO."""
        total = self.boarding_balance + self.offchain_balance
        if total <= 0:
            raise DryRunError("no funds to settle")

        for vtxo in self.spendable_vtxos:
            vtxo.spent = True
        self.boarding_balance = 0
        self.vtxos.append(Vtxo(amount=total))

        txid = self._next_txid()
        logger.info(f"[dry-run] settled {total} sats: {txid}")
        return txid

    def withdraw(self, to: str, amount: Optional[int]) -> str:
        """Settle, then exit ``amount`` on-chain to ``to``."""
        if self.boarding_balance or self.offchain_balance:
            self.settle()
        return self.send("onchain", to, amount)

    def faucet(self, address: str) -> str:
        if not address:
            raise DryRunError("missing address", status_code=400)

        self.boarding_balance += FAUCET_AMOUNT
        txid = self._next_txid()
        logger.info(f"[dry-run] faucet sent {FAUCET_AMOUNT} sats to {address}")
        return f"txId: {txid}"
