from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from ..coaches.identity import build_identity_map, normalize_name
from ..config import Settings
from ..notifications.slack import format_reminder_message
from ..validation.eligibility import RecordOutcome, check_eligibility
from .interfaces import Notifier, RecordStore
from .timeframe import today_in

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineResult:
    scanned: int = 0
    sent: int = 0
    failed: int = 0
    unmarked: int = 0
    unmapped: list[str] = field(default_factory=list)
    outcomes: Counter = field(default_factory=Counter)


def run_renewal_reminders(
    settings: Settings,
    store: RecordStore,
    notifier: Notifier,
    today: date | None = None,
    *,
    dry_run: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> PipelineResult:
    today = today or today_in(settings.timezone)
    result = PipelineResult()

    records = store.load_records()
    if not records:
        logger.info("No client rows to scan.")
        return result

    identities = build_identity_map(store.load_coach_rows(), settings.coach_overrides_json)
    # Keyed by normalized name; keeps the first spelling seen.
    unmapped: dict[str, str] = {}

    logger.info(
        "Scanning %d row(s) for renewals %d-%d day(s) after %s",
        len(records),
        settings.min_days,
        settings.max_days,
        today,
    )

    for record in records:
        result.scanned += 1

        eligibility = check_eligibility(
            record, today, settings.min_days, settings.max_days, settings.timezone
        )
        if not eligibility.is_eligible:
            result.outcomes[eligibility.outcome] += 1
            continue

        slack_id = identities.resolve(record.coach_name)
        if slack_id is None:
            logger.info(
                "Row %d (%s): no Slack id for coach '%s'",
                record.row,
                record.client_name,
                record.coach_name,
            )
            unmapped.setdefault(normalize_name(record.coach_name), record.coach_name)
            result.outcomes[RecordOutcome.SKIPPED_UNMAPPED_COACH] += 1
            continue

        message = format_reminder_message(
            slack_id, record, eligibility.days_until_due, eligibility.due_date
        )

        if dry_run:
            logger.info("[dry-run] Row %d would send: %s", record.row, message)
            result.outcomes[RecordOutcome.DRY_RUN] += 1
            continue

        try:
            delivered = notifier.send(message)
        except Exception as exc:  # noqa: BLE001
            logger.error("Row %d (%s): notifier raised: %s", record.row, record.client_name, exc)
            delivered = False

        if not delivered:
            logger.warning(
                "Row %d (%s): reminder not delivered; it stays eligible for the next run.",
                record.row,
                record.client_name,
            )
            result.failed += 1
            result.outcomes[RecordOutcome.DISPATCH_FAILED] += 1
            continue

        try:
            store.mark_sent(record)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Row %d (%s): reminder delivered but not marked as sent: %s",
                record.row,
                record.client_name,
                exc,
            )
            result.unmarked += 1
            result.outcomes[RecordOutcome.SENT_UNMARKED] += 1
        else:
            result.sent += 1
            result.outcomes[RecordOutcome.SENT] += 1
            logger.info("Row %d (%s): reminder sent to %s", record.row, record.client_name, slack_id)
        sleep(settings.send_pause)

    result.unmapped = sorted(unmapped.values())
    return result
