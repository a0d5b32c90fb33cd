from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class ClientRecord:
    row: int
    client_name: str
    coach_name: str
    due_date: Any = None
    reminder_sent: Any = None

    @property
    def is_complete(self) -> bool:
        return bool(self.client_name.strip() and self.coach_name.strip())
