"""SwipeSplit - Split shared expenses with a partner from a bank statement."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .db import Database
from .decisions import DecisionStore
from .models import (
    DECISION_TAGS,
    DecisionTag,
    SettlementResult,
    ShareSummary,
    Transaction,
)
from .parser import compute_statement_key, load_csv_records, parse_transactions
from .session import SIGNAL_DECISIONS, Signal, SplitSession, Stage
from .settlement import build_share_summary, calculate_settlement, clamp_ratio

__all__ = [
    "Settings",
    "load_settings",
    "Database",
    "DecisionStore",
    "DECISION_TAGS",
    "DecisionTag",
    "SettlementResult",
    "ShareSummary",
    "Transaction",
    "compute_statement_key",
    "load_csv_records",
    "parse_transactions",
    "SIGNAL_DECISIONS",
    "Signal",
    "SplitSession",
    "Stage",
    "build_share_summary",
    "calculate_settlement",
    "clamp_ratio",
]
