"""Risk heuristics evaluated before sending."""

from arkwallet.risk.heuristic import (
    CONSOLIDATION_MULTIPLIER,
    NO_WARNING,
    WarningState,
    needs_consolidation_warning,
)

__all__ = [
    "CONSOLIDATION_MULTIPLIER",
    "NO_WARNING",
    "WarningState",
    "needs_consolidation_warning",
]
