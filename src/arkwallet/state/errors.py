"""Process-wide error slot.

Holds the most recent operation failure for display. Set on failure,
overwritten by the next failure of any operation, and cleared only by an
explicit ``clear()``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationError:
    """A failure surfaced to the user."""

    message: str
    operation: Optional[str] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorSlot:
    """Single shared slot for the latest operation error."""

    def __init__(self):
        self._current: Optional[OperationError] = None

    @property
    def current(self) -> Optional[OperationError]:
        return self._current

    @property
    def message(self) -> str:
        """Message of the current error, empty string when clear."""
        return self._current.message if self._current else ""

    @property
    def is_set(self) -> bool:
        return self._current is not None

    def publish(self, message: str, operation: Optional[str] = None) -> OperationError:
        """Overwrite the slot with a new error."""
        error = OperationError(message=message, operation=operation)
        self._current = error
        logger.warning(f"Error published ({operation or 'unknown'}): {message}")
        return error

    def clear(self) -> None:
        """Acknowledge and clear the current error."""
        if self._current is not None:
            logger.debug("Error slot cleared")
        self._current = None
