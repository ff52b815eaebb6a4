"""Decision store: per-transaction categorization with undo."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .exceptions import InvalidDecisionError
from .models import DECISION_TAGS, DecisionTag

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[dict[int, DecisionTag]], None]


class DecisionStore:
    """
    Maps transaction ids to decision tags.

    The store makes no positional assumptions: it can hold sparse or
    out-of-order ids, including ids that are not in the current working set.
    It knows nothing about persistence; pass on_change to receive a full
    snapshot after every mutation.
    """

    def __init__(self, on_change: SnapshotCallback | None = None):
        """Initialize an empty store."""
        self._decisions: dict[int, DecisionTag] = {}
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._decisions)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._decisions

    def get(self, transaction_id: int) -> DecisionTag | None:
        """Get the decision for a transaction, or None if undecided."""
        return self._decisions.get(transaction_id)

    def snapshot(self) -> dict[int, DecisionTag]:
        """Return a copy of the current decisions."""
        return dict(self._decisions)

    def decide(self, transaction_id: int, tag: DecisionTag) -> None:
        """
        Set or overwrite the decision for a transaction.

        Raises:
            InvalidDecisionError: If tag is not a recognized category
        """
        if tag not in DECISION_TAGS:
            raise InvalidDecisionError(tag)

        self._decisions[transaction_id] = tag
        logger.debug(f"Decided transaction {transaction_id}: {tag}")
        self._notify()

    def undo(self, transaction_id: int) -> None:
        """Remove the decision for a transaction, if any."""
        if self._decisions.pop(transaction_id, None) is not None:
            logger.debug(f"Removed decision for transaction {transaction_id}")
            self._notify()

    def clear(self) -> None:
        """Remove all decisions."""
        self._decisions.clear()
        self._notify()

    def restore(self, snapshot: Mapping[Any, Any]) -> None:
        """
        Replace the store's content with a saved snapshot.

        Keys may be ints or integer strings (as after a JSON round-trip).
        Entries with a bad key or an unknown tag are skipped.

        Args:
            snapshot: Mapping of transaction id to decision tag
        """
        restored: dict[int, DecisionTag] = {}
        skipped = 0
        for key, tag in snapshot.items():
            try:
                transaction_id = int(key)
            except (TypeError, ValueError):
                skipped += 1
                continue
            if isinstance(key, float | bool) or tag not in DECISION_TAGS:
                skipped += 1
                continue
            restored[transaction_id] = tag

        if skipped:
            logger.warning(f"Skipped {skipped} malformed entries in saved decisions")

        self._decisions = restored
        logger.info(f"Restored {len(restored)} decisions")
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.snapshot())
