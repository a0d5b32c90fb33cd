from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Sequence

import pendulum

from .models import ClientRecord

logger = logging.getLogger(__name__)

CLIENT_NAME_COL = "Client Name"
COACH_COL = "Coach"
DUE_DATE_COL = "Resign Due Date"
REMINDER_SENT_COL = "Reminder Sent"
REQUIRED_HEADERS = (CLIENT_NAME_COL, COACH_COL, DUE_DATE_COL, REMINDER_SENT_COL)

SENT_TOKENS = frozenset({"true", "1", "yes", "sent", "y"})
DATE_LIKE_PATTERN = re.compile(r"^\d{1,4}[-/.]\d{1,2}[-/.]\d{1,4}")
YEAR_PATTERN = re.compile(r"\b\d{4}\b")
MONTH_NAME_PATTERN = re.compile(r"[a-z]{3,}", re.IGNORECASE)


def scrub(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_due_date(value: Any) -> date | None:
    """Return the calendar date held by a cell, or None if it has none.

    Date and datetime values pass through; anything else is parsed as text.
    Text needs separated day/month/year parts, or a month name with a
    four-digit year, so a stray number such as "15" is not read as a day of
    the current month.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = scrub(value)
    if not text:
        return None
    if not (
        DATE_LIKE_PATTERN.match(text)
        or (YEAR_PATTERN.search(text) and MONTH_NAME_PATTERN.search(text))
    ):
        logger.debug("Due date %r is not a full calendar date", text)
        return None
    try:
        parsed = pendulum.parse(text, strict=False)
    except (pendulum.parsing.exceptions.ParserError, ValueError, TypeError, OverflowError) as exc:
        logger.debug("Could not parse due date %r: %s", text, exc)
        return None

    if isinstance(parsed, datetime):
        return parsed.date()
    if isinstance(parsed, date):
        return parsed
    # Durations and bare times carry no calendar date.
    return None


def is_sent_flag(value: Any) -> bool:
    """Collapse the shapes a "Reminder Sent" cell can take into one boolean.

    Booleans are taken as-is. Dates (real or formatted as text) mean a
    reminder went out on that day. Text is matched against SENT_TOKENS.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (date, datetime)):
        return True

    text = scrub(value).lower()
    if not text:
        return False
    if text in SENT_TOKENS:
        return True
    if DATE_LIKE_PATTERN.match(text):
        return parse_due_date(text) is not None
    return False


def _header_index(header: Sequence[Any]) -> dict[str, int]:
    index: dict[str, int] = {}
    for position, name in enumerate(header):
        key = scrub(name)
        if key and key not in index:
            index[key] = position
    return index


def reminder_sent_column(header: Sequence[Any]) -> int:
    """1-based column number of the "Reminder Sent" header."""
    index = _header_index(header)
    if REMINDER_SENT_COL not in index:
        raise RuntimeError(f"Missing required header: {REMINDER_SENT_COL}")
    return index[REMINDER_SENT_COL] + 1


def rows_to_records(rows: Sequence[Sequence[Any]]) -> list[ClientRecord]:
    """Turn raw sheet rows (header first) into ClientRecords.

    Scanning stops at the last row with a non-empty client name. Row numbers
    are 1-based sheet rows, so the first data row is row 2.
    """
    if not rows:
        return []

    header, *data_rows = rows
    index = _header_index(header)
    missing = [name for name in REQUIRED_HEADERS if name not in index]
    if missing:
        raise RuntimeError(f"Missing required header(s): {', '.join(missing)}")

    def cell(row: Sequence[Any], name: str) -> Any:
        position = index[name]
        return row[position] if position < len(row) else None

    last = 0
    for offset, row in enumerate(data_rows, start=1):
        if scrub(cell(row, CLIENT_NAME_COL)):
            last = offset

    records: list[ClientRecord] = []
    for offset, row in enumerate(data_rows[:last], start=1):
        records.append(
            ClientRecord(
                row=offset + 1,
                client_name=scrub(cell(row, CLIENT_NAME_COL)),
                coach_name=scrub(cell(row, COACH_COL)),
                due_date=cell(row, DUE_DATE_COL),
                reminder_sent=cell(row, REMINDER_SENT_COL),
            )
        )
    return records
