"""Wallet state held between operations."""

from arkwallet.state.errors import ErrorSlot, OperationError
from arkwallet.state.store import WalletStateStore

__all__ = ["ErrorSlot", "OperationError", "WalletStateStore"]
