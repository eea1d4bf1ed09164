"""Wallet service contracts.

Pydantic models for everything exchanged with the wallet service. Response
models accept both the snake_case keys emitted by the service and the
camelCase variants some deployments use. All amounts are integer satoshis.
"""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer


class Network(str, Enum):
    """Settlement layer a payment or fee estimate targets."""

    OFFCHAIN = "offchain"
    ONCHAIN = "onchain"

    @classmethod
    def parse(cls, value) -> "Network":
        """Parse a network name, accepting ``ark`` for the off-chain layer.

        Raises:
            ValueError: Unknown network name
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        return cls(NETWORK_ALIASES.get(text, text))


# Alternative names used by wallet services for each network
NETWORK_ALIASES = {
    "ark": Network.OFFCHAIN.value,
    "off-chain": Network.OFFCHAIN.value,
    "on-chain": Network.ONCHAIN.value,
}

# Names the send-payment endpoint accepts; estimates use the enum values
SEND_NETWORK_NAMES = {
    Network.OFFCHAIN: "ark",
    Network.ONCHAIN: "onchain",
}


class UtxoStatus(str, Enum):
    """Display status of a UTXO."""

    LOCKED = "Locked"
    SPENDABLE = "Spendable"
    PENDING = "Pending"


class WalletAddresses(BaseModel):
    """Address pair issued by the wallet service."""

    model_config = ConfigDict(frozen=True)

    offchain_address: str = Field(
        ...,
        validation_alias=AliasChoices("offchain_address", "offchainAddress"),
        description="Off-chain receive address",
    )
    boarding_address: str = Field(
        ...,
        validation_alias=AliasChoices("boarding_address", "boardingAddress"),
        description="On-chain boarding address",
    )


class Balances(BaseModel):
    """Off-chain and on-chain balances, always replaced together."""

    model_config = ConfigDict(frozen=True)

    offchain: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("offchain", "offchain_balance", "offchainBalance"),
    )
    onchain: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("onchain", "onchain_balance", "onchainBalance"),
    )

    @classmethod
    def zero(cls) -> "Balances":
        return cls(offchain=0, onchain=0)

    @property
    def total(self) -> int:
        return self.offchain + self.onchain


class Utxo(BaseModel):
    """Snapshot of a single unspent output."""

    model_config = ConfigDict(frozen=True)

    amount: int = Field(..., gt=0, description="Amount in satoshis")
    locked: bool = Field(..., description="Reserved by the wallet service")
    spendable: bool = Field(..., description="Eligible for a new transaction")

    @property
    def status(self) -> UtxoStatus:
        """Derived display status; ``locked`` takes precedence."""
        if self.locked:
            return UtxoStatus.LOCKED
        if self.spendable:
            return UtxoStatus.SPENDABLE
        return UtxoStatus.PENDING


class FeeBreakdown(BaseModel):
    """Split of a fee quote."""

    model_config = ConfigDict(frozen=True)

    network: int = Field(
        ..., ge=0, validation_alias=AliasChoices("network", "network_fee")
    )
    service: int = Field(
        ..., ge=0, validation_alias=AliasChoices("service", "service_fee")
    )


class FeeQuote(BaseModel):
    """Fee estimate returned by the wallet service."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0, validation_alias=AliasChoices("total", "total_fee"))
    breakdown: FeeBreakdown

    @classmethod
    def zero(cls) -> "FeeQuote":
        """Quote shown before any estimate was made."""
        return cls(total=0, breakdown=FeeBreakdown(network=0, service=0))

    @property
    def is_consistent(self) -> bool:
        """True when total equals network plus service fee.

        The wallet service is expected to uphold this; it is reported, never
        enforced.
        """
        return self.total == self.breakdown.network + self.breakdown.service


class TransactionReceipt(BaseModel):
    """Response of send/deposit/withdraw calls."""

    txid: str = Field(..., description="Transaction ID")


class FaucetReceipt(BaseModel):
    """Response of a faucet request."""

    message: str = Field(..., description="Faucet output text")


# ======================
# Requests
# ======================


class SendPaymentRequest(BaseModel):
    """Body of a send-payment call.

    ``amount`` is None when the user input was not a number; the wallet
    service rejects it. The off-chain network goes out as ``ark``.
    """

    network: Network
    to: str
    amount: Optional[int] = None

    @field_serializer("network")
    def serialize_network(self, network: Network) -> str:
        return SEND_NETWORK_NAMES[network]


class DepositRequest(BaseModel):
    """Body of a deposit (settle) call. No amount means settle everything."""

    amount: Optional[int] = None


class WithdrawRequest(BaseModel):
    """Body of a withdraw call."""

    to: str
    amount: Optional[int] = None


class FaucetRequest(BaseModel):
    """Body of a faucet call."""

    address: str
