"""UTXO consolidation risk heuristic.

Spending a small amount while holding one disproportionately large UTXO
forces an expensive split later. The heuristic flags that situation before a
send. It is a pure function of an explicit UTXO snapshot and amount.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from arkwallet.contracts.wallet import Utxo

# Largest UTXO above required amount times this triggers the warning.
CONSOLIDATION_MULTIPLIER = 10

Amount = Union[int, float]


@dataclass(frozen=True)
class WarningState:
    """Outcome of the consolidation check."""

    warn: bool
    largest_amount: Optional[int] = None
    required_amount: Optional[Amount] = None

    @property
    def message(self) -> str:
        """Human-readable warning text, empty when there is nothing to warn about."""
        if not self.warn:
            return ""
        return (
            f"Large UTXO detected ({self.largest_amount:,} sats). "
            "Consider splitting for better performance."
        )


NO_WARNING = WarningState(warn=False)


def needs_consolidation_warning(
    utxos: Iterable[Utxo],
    required_amount: Amount,
    multiplier: int = CONSOLIDATION_MULTIPLIER,
) -> WarningState:
    """Decide whether the UTXO set warrants a consolidation warning.

    All UTXOs count, whatever their locked/spendable status. An empty set
    never warns.

    Args:
        utxos: UTXO snapshot
        required_amount: Amount the user is about to spend
        multiplier: Ratio of largest UTXO to required amount that triggers a warning

    Returns:
        WarningState carrying the largest amount when warning
    """
    amounts = [u.amount for u in utxos]
    if not amounts:
        return NO_WARNING

    largest = max(amounts)
    if largest > required_amount * multiplier:
        return WarningState(warn=True, largest_amount=largest, required_amount=required_amount)
    return NO_WARNING
