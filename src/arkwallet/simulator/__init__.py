"""Dry-run wallet service for development and tests.

Nothing here touches keys or a chain; balances and outputs live in memory.
"""

from arkwallet.simulator.app import create_app
from arkwallet.simulator.wallet import DryRunError, DryRunWallet

__all__ = ["DryRunError", "DryRunWallet", "create_app"]
