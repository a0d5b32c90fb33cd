from __future__ import annotations

import logging

from ..pipeline.renewal_reminders import PipelineResult
from ..validation.eligibility import RecordOutcome

logger = logging.getLogger(__name__)

DELIVERY_OUTCOMES = (RecordOutcome.SENT, RecordOutcome.SENT_UNMARKED, RecordOutcome.DISPATCH_FAILED)


def log_run_summary(result: PipelineResult) -> None:
    logger.info(
        "Scanned %d row(s); %d reminder(s) sent; %d delivery failure(s).",
        result.scanned,
        result.sent,
        result.failed,
    )

    skipped = {
        outcome.value: count
        for outcome, count in result.outcomes.items()
        if outcome not in DELIVERY_OUTCOMES and count
    }
    if skipped:
        logger.info(
            "Skipped: %s",
            ", ".join(f"{name}={count}" for name, count in sorted(skipped.items())),
        )

    if result.unmarked:
        logger.error(
            "%d reminder(s) were delivered but could not be marked as sent; "
            "they will be sent again on the next run unless marked by hand.",
            result.unmarked,
        )

    if result.unmapped:
        logger.warning(
            "No Slack id for %d coach(es): %s",
            len(result.unmapped),
            ", ".join(result.unmapped),
        )
