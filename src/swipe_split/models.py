"""Pydantic domain models for SwipeSplit."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Decisions
# ============================================================================

DecisionTag = Literal["personal", "split50", "split"]

DECISION_TAGS: tuple[DecisionTag, ...] = ("personal", "split50", "split")


# ============================================================================
# Statement Models
# ============================================================================


class Transaction(BaseModel):
    """A single statement row in the working set.

    ID Concepts:
    - id: position in the filtered and date-sorted working set. It is only
          meaningful within one parse of one statement; re-parsing a different
          file reuses the same ids for different rows.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    date: datetime | None = None  # None when the statement date is unparseable
    description: str = ""
    amount: Decimal = Field(ge=0)  # magnitude
    is_credit: bool  # True = money in (refund, reimbursement)
    raw_amount: Decimal  # signed, as exported by the bank

    @property
    def signed_amount(self) -> Decimal:
        """Amount as a net expense: credits reduce, debits add."""
        return -self.amount if self.is_credit else self.amount


# ============================================================================
# Settlement Models
# ============================================================================


class SettlementBuckets(BaseModel):
    """Transactions grouped by their decision."""

    personal: list[Transaction] = Field(default_factory=list)
    split50: list[Transaction] = Field(default_factory=list)
    split: list[Transaction] = Field(default_factory=list)


class SettlementTotals(BaseModel):
    """Bucket totals and the headline settlement figure.

    personal is a plain sum of amounts (informational). split and split50 are
    signed totals where credits subtract.
    """

    personal: Decimal = Decimal("0")
    split: Decimal = Decimal("0")
    split50: Decimal = Decimal("0")
    partner_owes: Decimal = Decimal("0")


class SettlementBreakdown(BaseModel):
    """The two components of partner_owes."""

    partner_split: Decimal = Decimal("0")  # split total * (1 - ratio)
    partner_5050: Decimal = Decimal("0")  # split50 total * 0.5


class SettlementResult(BaseModel):
    """Everything derived from transactions, decisions and a ratio."""

    ratio: Decimal
    buckets: SettlementBuckets
    totals: SettlementTotals
    breakdown: SettlementBreakdown
    top: list[Transaction] = Field(default_factory=list)

    @property
    def partner_owes(self) -> Decimal:
        return self.totals.partner_owes


class ShareSummary(BaseModel):
    """Values needed to build the shareable report text."""

    period_start: datetime | None = None
    period_end: datetime | None = None
    partner_owes: Decimal = Decimal("0")
