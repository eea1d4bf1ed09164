"""Per-operation sequence numbers for discarding stale responses.

By default overlapping invocations of the same operation are last-write-wins:
whichever response resolves last is what the state store shows. When stale
response discarding is enabled, each invocation takes a ticket and only the
newest ticket for an operation may write state.

Example:
    ticket = sequencer.issue("refresh_utxos")
    utxos = await client.get_utxos()
    if sequencer.is_current("refresh_utxos", ticket):
        store.replace_utxos(utxos)
"""

import itertools
import logging

logger = logging.getLogger(__name__)


class OperationSequencer:
    """Registry of the newest ticket issued per operation name."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def issue(self, operation: str) -> int:
        """Issue a new ticket for an operation, superseding earlier ones.

        Args:
            operation: Operation name

        Returns:
            Monotonically increasing ticket number
        """
        ticket = next(self._counter)
        self._latest[operation] = ticket
        logger.debug(f"Ticket {ticket} issued for {operation}")
        return ticket

    def is_current(self, operation: str, ticket: int) -> bool:
        """Check whether a ticket is still the newest for its operation."""
        current = self._latest.get(operation) == ticket
        if not current:
            logger.info(
                f"Discarding stale {operation} response "
                f"(ticket {ticket}, newest {self._latest.get(operation)})"
            )
        return current

    def latest(self, operation: str) -> int:
        """Newest ticket for an operation (0 if none issued)."""
        return self._latest.get(operation, 0)

    def clear(self) -> None:
        """Forget all issued tickets (useful for testing)."""
        self._latest.clear()
