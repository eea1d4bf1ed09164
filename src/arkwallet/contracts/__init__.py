"""Request and response contracts for the wallet service.

These Pydantic models define the data exchanged with the remote wallet
service and held by the state store.
"""

from arkwallet.contracts.wallet import (
    Balances,
    DepositRequest,
    FaucetReceipt,
    FaucetRequest,
    FeeBreakdown,
    FeeQuote,
    Network,
    SendPaymentRequest,
    TransactionReceipt,
    Utxo,
    UtxoStatus,
    WalletAddresses,
    WithdrawRequest,
)

__all__ = [
    # Wallet state
    "Balances",
    "FeeBreakdown",
    "FeeQuote",
    "Network",
    "Utxo",
    "UtxoStatus",
    "WalletAddresses",
    # Responses
    "FaucetReceipt",
    "TransactionReceipt",
    # Requests
    "DepositRequest",
    "FaucetRequest",
    "SendPaymentRequest",
    "WithdrawRequest",
]
