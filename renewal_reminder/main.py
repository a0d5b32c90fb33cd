from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date

from .config import Settings
from .notifications.reporting import log_run_summary
from .notifications.slack import SlackWebhookNotifier
from .pipeline.renewal_reminders import run_renewal_reminders
from .sheets.client import SheetsClient


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Send Slack reminders to coaches for clients coming up for renewal."
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        help="Evaluate the window as of this date (YYYY-MM-DD). Defaults to today.",
    )
    parser.add_argument(
        "--min-days",
        type=int,
        help="Override the lower bound of the reminder window.",
    )
    parser.add_argument(
        "--max-days",
        type=int,
        help="Override the upper bound of the reminder window.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the reminders that would be sent without posting or marking rows.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
        if args.min_days is not None:
            settings = replace(settings, min_days=args.min_days)
        if args.max_days is not None:
            settings = replace(settings, max_days=args.max_days)
        settings.check_window()

        store = SheetsClient(
            spreadsheet_id=settings.spreadsheet_id,
            service_account_file=str(settings.service_account_file),
            master_tab_name=settings.master_sheet_name,
            coach_tab_name=settings.coach_sheet_name,
        )
        notifier = SlackWebhookNotifier(
            settings.webhook_url,
            max_attempts=settings.max_attempts,
            base_delay=settings.retry_base_delay,
            timeout=settings.timeout,
        )
        result = run_renewal_reminders(
            settings, store, notifier, today=args.today, dry_run=args.dry_run
        )
    except RuntimeError as exc:
        logging.error("%s", exc)
        return 1

    log_run_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
