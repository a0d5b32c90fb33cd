from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from ..pipeline.timeframe import days_between
from ..records.models import ClientRecord
from ..records.parsers import is_sent_flag, parse_due_date

logger = logging.getLogger(__name__)


class RecordOutcome(str, Enum):
    SKIPPED_INCOMPLETE = "skipped_incomplete"
    SKIPPED_ALREADY_SENT = "skipped_already_sent"
    SKIPPED_DATE_INVALID = "skipped_date_invalid"
    SKIPPED_OUT_OF_WINDOW = "skipped_out_of_window"
    SKIPPED_UNMAPPED_COACH = "skipped_unmapped_coach"
    DISPATCH_FAILED = "dispatch_failed"
    DRY_RUN = "dry_run"
    SENT_UNMARKED = "sent_unmarked"
    SENT = "sent"


@dataclass(slots=True)
class EligibilityResult:
    record: ClientRecord
    is_eligible: bool
    outcome: RecordOutcome | None = None
    due_date: date | None = None
    days_until_due: int | None = None


def days_until_due(due: date, today: date, tz: str = "local") -> int:
    return days_between(today, due, tz)


def check_eligibility(
    record: ClientRecord,
    today: date,
    min_days: int,
    max_days: int,
    tz: str = "local",
) -> EligibilityResult:
    if not record.is_complete:
        return EligibilityResult(record, False, RecordOutcome.SKIPPED_INCOMPLETE)

    if is_sent_flag(record.reminder_sent):
        return EligibilityResult(record, False, RecordOutcome.SKIPPED_ALREADY_SENT)

    due = parse_due_date(record.due_date)
    if due is None:
        logger.info(
            "Row %d (%s): skipping, unparseable due date %r",
            record.row,
            record.client_name,
            record.due_date,
        )
        return EligibilityResult(record, False, RecordOutcome.SKIPPED_DATE_INVALID)

    diff = days_until_due(due, today, tz)
    if not (min_days <= diff <= max_days):
        return EligibilityResult(
            record, False, RecordOutcome.SKIPPED_OUT_OF_WINDOW, due, diff
        )

    return EligibilityResult(record, True, None, due, diff)


def is_eligible(
    record: ClientRecord,
    today: date,
    min_days: int,
    max_days: int,
    tz: str = "local",
) -> bool:
    return check_eligibility(record, today, min_days, max_days, tz).is_eligible
