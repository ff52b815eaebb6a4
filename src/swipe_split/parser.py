"""Statement parsing: raw CSV rows into the transaction working set."""

import csv
import hashlib
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from .exceptions import StatementReadError
from .models import Transaction

logger = logging.getLogger(__name__)

# Column names, tried in priority order (case-sensitive)
AMOUNT_FIELDS = ("Amount", "amount")
DATE_FIELDS = ("Value Date", "date", "Date")
DESCRIPTION_FIELDS = ("Description", "description")

# Formats tried after ISO-8601
DAY_FIRST_FORMATS = ("%d/%m/%Y", "%d/%m/%y", "%d-%m-%Y", "%d.%m.%Y", "%d.%m.%y")
MONTH_FIRST_FORMATS = ("%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y", "%m.%d.%Y", "%m.%d.%y")
UNAMBIGUOUS_FORMATS = (
    "%Y%m%d",  # 20240115
    "%Y/%m/%d",  # 2024/01/15
    "%d %b %Y",  # 15 Jan 2024
    "%d %B %Y",  # 15 January 2024
    "%d-%b-%Y",  # 15-Jan-2024
    "%b %d, %Y",  # Jan 15, 2024
)


def load_csv_records(path: Path) -> list[dict[str, str]]:
    """
    Read a bank statement CSV into header-keyed rows.

    Blank lines are skipped. A UTF-8 byte order mark is ignored.

    Args:
        path: Path to the CSV export

    Returns:
        List of rows keyed by header name

    Raises:
        StatementReadError: If the file is missing or cannot be decoded
    """
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            records = [row for row in reader if _has_content(row)]
    except FileNotFoundError as e:
        raise StatementReadError(f"Statement file not found: {path}") from e
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise StatementReadError(f"Could not read statement {path}: {e}") from e

    logger.info(f"Read {len(records)} rows from {path}")
    return records


def _has_content(row: Mapping[str, Any]) -> bool:
    return any(isinstance(value, str) and value.strip() for value in row.values())


def _first_value(record: Mapping[str, Any], fields: tuple[str, ...]) -> Any:
    """Return the first present, non-empty value among the field variants."""
    for field in fields:
        value = record.get(field)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_amount(value: Any) -> Decimal | None:
    """
    Parse a signed amount.

    Returns None for anything that is not a finite number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, int | float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None

    if not amount.is_finite():
        return None
    return amount


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def parse_date(value: Any, day_first: bool = True) -> datetime | None:
    """
    Parse a statement date.

    Timezone-aware values are converted to naive UTC so every parsed date is
    comparable. Returns None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    ambiguous = DAY_FIRST_FORMATS if day_first else MONTH_FIRST_FORMATS
    for fmt in ambiguous + UNAMBIGUOUS_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    logger.debug(f"Unparseable date: {text!r}")
    return None


def parse_transactions(
    records: Iterable[Mapping[str, Any]], day_first: bool = True
) -> list[Transaction]:
    """
    Normalize raw statement rows into the working set.

    Rows without a usable amount, or with an amount of exactly zero, are
    dropped. The rest are sorted by date (stable; undated rows last) and
    numbered 0..N-1 in that order.

    Args:
        records: Header-keyed rows, values as strings or numbers
        day_first: Read ambiguous slash dates as day/month

    Returns:
        The sorted working set
    """
    kept = []
    dropped = 0

    for index, record in enumerate(records):
        raw_amount = parse_amount(_first_value(record, AMOUNT_FIELDS))
        if raw_amount is None or raw_amount == 0:
            logger.debug(f"Dropping row {index}: no usable amount")
            dropped += 1
            continue

        description = _first_value(record, DESCRIPTION_FIELDS)
        parsed_date = parse_date(_first_value(record, DATE_FIELDS), day_first=day_first)

        kept.append(
            (
                parsed_date,
                str(description).strip() if description is not None else "",
                raw_amount,
            )
        )

    # Stable sort; undated rows go last
    kept.sort(key=lambda row: (row[0] is None, row[0] or datetime.min))

    transactions = [
        Transaction(
            id=position,
            date=parsed_date,
            description=description,
            amount=abs(raw_amount),
            is_credit=raw_amount > 0,
            raw_amount=raw_amount,
        )
        for position, (parsed_date, description, raw_amount) in enumerate(kept)
    ]

    logger.info(f"Parsed {len(transactions)} transactions ({dropped} rows dropped)")
    return transactions


def compute_statement_key(transactions: list[Transaction]) -> str:
    """
    Compute a deterministic key for a working set.

    Saved decisions are stored under this key, so they are only restored for
    the statement that produced them.
    """
    parts = []
    for txn in transactions:
        date_part = txn.date.isoformat() if txn.date else ""
        parts.append(f"{date_part}|{txn.description}|{txn.raw_amount}")

    combined = "\n".join(parts)
    return hashlib.sha256(combined.encode()).hexdigest()
