from __future__ import annotations

from typing import Any, Protocol, Sequence

from ..records.models import ClientRecord


class RecordStore(Protocol):
    def load_records(self) -> list[ClientRecord]: ...

    def load_coach_rows(self) -> list[Sequence[Any]]: ...

    def mark_sent(self, record: ClientRecord) -> None: ...


class Notifier(Protocol):
    def send(self, message: str) -> bool: ...
