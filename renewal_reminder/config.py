from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import pendulum
from dotenv import load_dotenv


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    env_file = os.getenv("ENV_FILE", ".env")
    env_path = Path(env_file)
    if env_path.is_file():
        load_dotenv(env_path)
    else:
        # Fallback: load .env in current working directory if ENV_FILE is missing
        default_path = Path(".env")
        if default_path.is_file():
            load_dotenv(default_path)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    webhook_url: str
    spreadsheet_id: str
    service_account_file: Path
    coach_overrides_json: str | None = None
    min_days: int = 29
    max_days: int = 31
    master_sheet_name: str = "MasterData"
    coach_sheet_name: str = "Coaches"
    timezone: str = "local"
    max_attempts: int = 3
    retry_base_delay: float = 0.25
    send_pause: float = 0.12
    timeout: int = 10

    @classmethod
    def from_env(cls) -> "Settings":
        load_environment()

        webhook_url = os.getenv("SLACK_WEBHOOK_URL")
        spreadsheet_id = os.getenv("SPREADSHEET_ID")
        service_account_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")

        missing = [
            name
            for name, value in {
                "SLACK_WEBHOOK_URL": webhook_url,
                "SPREADSHEET_ID": spreadsheet_id,
                "GOOGLE_SERVICE_ACCOUNT_FILE": service_account_file,
            }.items()
            if not value
        ]
        if missing:
            raise RuntimeError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

        coach_overrides_json = os.getenv("COACH_SLACK_MAP_JSON") or None
        timezone = os.getenv("TIMEZONE", "").strip() or "local"
        if timezone != "local":
            try:
                pendulum.timezone(timezone)
            except Exception as exc:  # noqa: BLE001
                raise RuntimeError(f"Unknown TIMEZONE {timezone!r}") from exc

        settings = cls(
            webhook_url=webhook_url,
            spreadsheet_id=spreadsheet_id,
            service_account_file=Path(service_account_file).expanduser().resolve(),
            coach_overrides_json=coach_overrides_json,
            min_days=_int_from_env("WINDOW_MIN_DAYS", 29),
            max_days=_int_from_env("WINDOW_MAX_DAYS", 31),
            master_sheet_name=os.getenv("MASTER_SHEET_NAME", "MasterData").strip() or "MasterData",
            coach_sheet_name=os.getenv("COACH_SHEET_NAME", "Coaches").strip() or "Coaches",
            timezone=timezone,
            max_attempts=max(1, _int_from_env("MAX_SEND_ATTEMPTS", 3)),
            retry_base_delay=_int_from_env("RETRY_BASE_DELAY_MS", 250) / 1000,
            send_pause=_int_from_env("SEND_PAUSE_MS", 120) / 1000,
            timeout=_int_from_env("REQUEST_TIMEOUT", 10),
        )
        settings.check_window()
        return settings

    def check_window(self) -> None:
        if self.min_days > self.max_days:
            raise RuntimeError(
                f"Reminder window is empty: min days {self.min_days} > max days {self.max_days}"
            )
