"""Core settlement logic: who owes whom from categorized transactions."""

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from .models import (
    DecisionTag,
    SettlementBreakdown,
    SettlementBuckets,
    SettlementResult,
    SettlementTotals,
    ShareSummary,
    Transaction,
)

logger = logging.getLogger(__name__)

MIN_RATIO = Decimal("0.5")
MAX_RATIO = Decimal("0.9")
RATIO_STEP = Decimal("0.05")
HALF = Decimal("0.5")
TOP_SHARED_COUNT = 5


def to_decimal(value: float | Decimal | str) -> Decimal:
    """
    Convert a ratio or amount to Decimal.

    Floats go through str() so 0.7 becomes Decimal("0.7"), not its binary
    expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def clamp_ratio(value: float | Decimal | str) -> Decimal:
    """
    Clamp a ratio to the supported range and snap it to 0.05 steps.

    Args:
        value: Requested share of ratio-split expenses (e.g. 0.7)

    Returns:
        Ratio between 0.5 and 0.9 inclusive
    """
    ratio = to_decimal(value)
    ratio = max(MIN_RATIO, min(MAX_RATIO, ratio))
    steps = (ratio / RATIO_STEP).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return (steps * RATIO_STEP).quantize(Decimal("0.01"))


def signed_total(transactions: list[Transaction]) -> Decimal:
    """Sum as net expense: credits subtract, debits add."""
    return sum((txn.signed_amount for txn in transactions), Decimal("0"))


def calculate_settlement(
    transactions: list[Transaction],
    decisions: Mapping[int, DecisionTag],
    ratio: float | Decimal,
) -> SettlementResult:
    """
    Compute the settlement for a set of categorized transactions.

    This is a pure function. Undecided transactions are left out of every
    bucket, and decisions for ids not in transactions are never read.

    Steps:
    1. Partition transactions by decision
    2. Signed totals for split and split50
    3. partner_split = split total * (1 - ratio)
    4. partner_5050 = split50 total * 0.5
    5. partner_owes = partner_split + partner_5050

    Args:
        transactions: The working set
        decisions: Transaction id to decision tag
        ratio: Your share of ratio-split expenses, in [0, 1]

    Returns:
        Buckets, totals, breakdown and the top shared expenses
    """
    ratio = to_decimal(ratio)
    buckets = SettlementBuckets()

    for txn in transactions:
        tag = decisions.get(txn.id)
        if tag == "personal":
            buckets.personal.append(txn)
        elif tag == "split50":
            buckets.split50.append(txn)
        elif tag == "split":
            buckets.split.append(txn)

    split_total = signed_total(buckets.split)
    split50_total = signed_total(buckets.split50)

    partner_split = split_total * (1 - ratio)
    partner_5050 = split50_total * HALF

    totals = SettlementTotals(
        personal=sum((txn.amount for txn in buckets.personal), Decimal("0")),
        split=split_total,
        split50=split50_total,
        partner_owes=partner_split + partner_5050,
    )

    # sorted() is stable, so equal amounts keep split-then-split50 order
    top = sorted(buckets.split + buckets.split50, key=lambda txn: txn.amount, reverse=True)

    logger.debug(
        f"Settlement at ratio {ratio}: {len(buckets.split)} split, "
        f"{len(buckets.split50)} split50, {len(buckets.personal)} personal, "
        f"partner owes {totals.partner_owes}"
    )

    return SettlementResult(
        ratio=ratio,
        buckets=buckets,
        totals=totals,
        breakdown=SettlementBreakdown(
            partner_split=partner_split, partner_5050=partner_5050
        ),
        top=top[:TOP_SHARED_COUNT],
    )


def build_share_summary(
    transactions: list[Transaction], result: SettlementResult
) -> ShareSummary:
    """Collect the statement period and partner_owes for the share report."""
    return ShareSummary(
        period_start=transactions[0].date if transactions else None,
        period_end=transactions[-1].date if transactions else None,
        partner_owes=result.partner_owes,
    )
