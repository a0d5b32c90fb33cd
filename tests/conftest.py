from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import pytest

from renewal_reminder.config import Settings
from renewal_reminder.records.models import ClientRecord


class InMemoryStore:
    def __init__(
        self,
        records: list[ClientRecord],
        coach_rows: list[Sequence[Any]] | None = None,
    ) -> None:
        self.records = records
        self.coach_rows = coach_rows or []
        self.marked: list[int] = []

    def load_records(self) -> list[ClientRecord]:
        # Fresh copies, like a re-read of the sheet.
        return [
            ClientRecord(r.row, r.client_name, r.coach_name, r.due_date, r.reminder_sent)
            for r in self.records
        ]

    def load_coach_rows(self) -> list[Sequence[Any]]:
        return list(self.coach_rows)

    def mark_sent(self, record: ClientRecord) -> None:
        for stored in self.records:
            if stored.row == record.row:
                stored.reminder_sent = True
        self.marked.append(record.row)


class RecordingNotifier:
    def __init__(self, outcomes: list[bool] | None = None) -> None:
        self.outcomes = list(outcomes or [])
        self.messages: list[str] = []

    def send(self, message: str) -> bool:
        self.messages.append(message)
        if self.outcomes:
            return self.outcomes.pop(0)
        return True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        webhook_url="https://hooks.slack.test/services/T/B/X",
        spreadsheet_id="sheet-id",
        service_account_file=Path("/tmp/service-account.json"),
        timezone="America/New_York",
        send_pause=0,
    )
