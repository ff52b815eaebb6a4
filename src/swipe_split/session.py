"""Session controller: the upload → confirm → categorize → summary flow.

The controller owns the working set, the cursor and the decision store. It
has no rendering or input dependencies; the CLI translates key presses into
Signal values and renders whatever the controller exposes.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from .decisions import DecisionStore
from .exceptions import InvalidTransitionError
from .models import DecisionTag, SettlementResult, ShareSummary, Transaction
from .settlement import build_share_summary, calculate_settlement, clamp_ratio

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Lifecycle stages of a split session."""

    UPLOAD = "upload"
    CONFIRM = "confirm"
    CATEGORIZING = "categorizing"
    SUMMARY = "summary"


class Signal(str, Enum):
    """Discrete decision signals produced by keys, buttons or swipes."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"


SIGNAL_DECISIONS: dict[Signal, DecisionTag] = {
    Signal.LEFT: "personal",
    Signal.RIGHT: "split",
    Signal.UP: "split50",
}

DEFAULT_RATIO = Decimal("0.7")


class SplitSession:
    """Drives a single categorization pass over one statement."""

    def __init__(
        self,
        ratio: float | Decimal = DEFAULT_RATIO,
        store: DecisionStore | None = None,
    ):
        """
        Initialize a session in the upload stage.

        Args:
            ratio: Your share of ratio-split expenses (clamped to 0.5-0.9)
            store: Decision store to use; inject one with an on_change
                   callback to persist decisions
        """
        self.store = store if store is not None else DecisionStore()
        self._ratio = clamp_ratio(ratio)
        self._stage = Stage.UPLOAD
        self._transactions: list[Transaction] = []
        self._cursor = 0

    # ========================================================================
    # Read-only state
    # ========================================================================

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def total(self) -> int:
        return len(self._transactions)

    @property
    def ratio(self) -> Decimal:
        return self._ratio

    @property
    def decisions(self) -> dict[int, DecisionTag]:
        return self.store.snapshot()

    @property
    def current(self) -> Transaction | None:
        """The transaction awaiting a decision, or None when there is none."""
        if self._stage != Stage.CATEGORIZING or self._cursor >= self.total:
            return None
        return self._transactions[self._cursor]

    @property
    def progress(self) -> float:
        """Fraction of the working set already decided (0.0 to 1.0)."""
        if not self._transactions:
            return 0.0
        return self._cursor / self.total

    # ========================================================================
    # Transitions
    # ========================================================================

    def _require(self, action: str, *stages: Stage) -> None:
        if self._stage not in stages:
            raise InvalidTransitionError(self._stage.value, action)

    def _enter(self, stage: Stage) -> None:
        logger.info(f"Session stage: {self._stage.value} -> {stage.value}")
        self._stage = stage

    def load(self, transactions: list[Transaction]) -> None:
        """
        Accept a parsed working set and move to the confirm stage.

        An empty working set is accepted; the confirm stage then reports
        zero transactions.
        """
        self._require("load transactions", Stage.UPLOAD)
        self._transactions = list(transactions)
        self._cursor = 0
        if not self._transactions:
            logger.warning("Statement has no usable transactions")
        self._enter(Stage.CONFIRM)

    def restore_decisions(self, snapshot: Mapping[Any, Any]) -> None:
        """
        Seed the decision store from a saved snapshot.

        Only allowed before categorization starts.
        """
        self._require("restore decisions", Stage.UPLOAD, Stage.CONFIRM)
        self.store.restore(snapshot)

    def start(self, resume: bool = False) -> None:
        """
        Begin categorizing.

        Args:
            resume: Skip past the leading run of transactions that already
                    have a (restored) decision instead of starting at 0
        """
        self._require("start categorizing", Stage.CONFIRM)
        self._cursor = 0
        if resume:
            while (
                self._cursor < self.total
                and self._transactions[self._cursor].id in self.store
            ):
                self._cursor += 1
        self._enter(Stage.CATEGORIZING)
        if self._cursor == self.total:
            self._enter(Stage.SUMMARY)

    def decide(self, tag: DecisionTag) -> None:
        """
        Record a decision for the current transaction and advance.

        Moves to the summary stage after the last transaction.
        """
        self._require("decide", Stage.CATEGORIZING)
        txn = self._transactions[self._cursor]
        self.store.decide(txn.id, tag)
        self._cursor += 1

        if self._cursor == self.total:
            self._enter(Stage.SUMMARY)

    def apply_signal(self, signal: Signal) -> None:
        """Decide the current transaction from a discrete input signal."""
        self.decide(SIGNAL_DECISIONS[Signal(signal)])

    def undo(self) -> bool:
        """
        Step back one transaction and forget its decision.

        Returns:
            True if a decision was undone, False at the first transaction
        """
        self._require("undo", Stage.CATEGORIZING)
        if self._cursor == 0:
            return False

        self._cursor -= 1
        self.store.undo(self._transactions[self._cursor].id)
        return True

    def reset(self) -> None:
        """Discard the statement, decisions and cursor; back to upload."""
        self._transactions = []
        self._cursor = 0
        self.store.clear()
        self._enter(Stage.UPLOAD)

    def set_ratio(self, value: float | Decimal) -> Decimal:
        """Set your share of ratio splits, clamped to 0.5-0.9 in 0.05 steps."""
        self._ratio = clamp_ratio(value)
        logger.info(f"Split ratio set to {self._ratio}")
        return self._ratio

    # ========================================================================
    # Derived results
    # ========================================================================

    def settlement(self) -> SettlementResult:
        """Compute the settlement from the current decisions."""
        return calculate_settlement(self._transactions, self.store.snapshot(), self._ratio)

    def share_summary(self) -> ShareSummary:
        """Values for the shareable report."""
        return build_share_summary(self._transactions, self.settlement())
