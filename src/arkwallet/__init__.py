"""arkwallet - client-side orchestrator for an off-chain/on-chain wallet service."""

__version__ = "0.1.0"
