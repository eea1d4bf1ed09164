"""Wallet operation services."""

from arkwallet.services.orchestrator import WalletOrchestrator

__all__ = ["WalletOrchestrator"]
