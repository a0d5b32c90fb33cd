import os

import pytest

from renewal_reminder.config import Settings

ENV_VARS = [
    "SLACK_WEBHOOK_URL",
    "SPREADSHEET_ID",
    "GOOGLE_SERVICE_ACCOUNT_FILE",
    "COACH_SLACK_MAP_JSON",
    "WINDOW_MIN_DAYS",
    "WINDOW_MAX_DAYS",
    "MASTER_SHEET_NAME",
    "COACH_SHEET_NAME",
    "TIMEZONE",
    "MAX_SEND_ATTEMPTS",
    "RETRY_BASE_DELAY_MS",
    "SEND_PAUSE_MS",
    "REQUEST_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENV_FILE", str(tmp_path / "missing.env"))
    return monkeypatch


def set_required(env):
    env.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.test/x")
    env.setenv("SPREADSHEET_ID", "sheet-id")
    env.setenv("GOOGLE_SERVICE_ACCOUNT_FILE", "creds.json")


def test_defaults(clean_env):
    set_required(clean_env)
    settings = Settings.from_env()

    assert settings.min_days == 29
    assert settings.max_days == 31
    assert settings.master_sheet_name == "MasterData"
    assert settings.coach_sheet_name == "Coaches"
    assert settings.coach_overrides_json is None
    assert settings.max_attempts == 3
    assert settings.retry_base_delay == 0.25
    assert settings.send_pause == 0.12
    assert settings.timezone == "local"


def test_missing_webhook_is_fatal(clean_env):
    set_required(clean_env)
    clean_env.delenv("SLACK_WEBHOOK_URL")
    with pytest.raises(RuntimeError, match="SLACK_WEBHOOK_URL"):
        Settings.from_env()


def test_overrides_from_env(clean_env):
    set_required(clean_env)
    clean_env.setenv("WINDOW_MIN_DAYS", "10")
    clean_env.setenv("WINDOW_MAX_DAYS", "14")
    clean_env.setenv("COACH_SLACK_MAP_JSON", '{"Jane": "U1"}')
    clean_env.setenv("TIMEZONE", "Europe/London")
    settings = Settings.from_env()

    assert (settings.min_days, settings.max_days) == (10, 14)
    assert settings.coach_overrides_json == '{"Jane": "U1"}'
    assert settings.timezone == "Europe/London"


def test_env_file_is_loaded(clean_env, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "SLACK_WEBHOOK_URL=https://hooks.slack.test/y\n"
        "SPREADSHEET_ID=from-file\n"
        "GOOGLE_SERVICE_ACCOUNT_FILE=creds.json\n",
        encoding="utf-8",
    )
    clean_env.setenv("ENV_FILE", str(env_file))
    try:
        settings = Settings.from_env()
    finally:
        for name in ("SLACK_WEBHOOK_URL", "SPREADSHEET_ID", "GOOGLE_SERVICE_ACCOUNT_FILE"):
            os.environ.pop(name, None)
    assert settings.spreadsheet_id == "from-file"


@pytest.mark.parametrize(
    "name, value",
    [("WINDOW_MIN_DAYS", "soon"), ("WINDOW_MIN_DAYS", "40"), ("TIMEZONE", "Mars/Olympus")],
)
def test_bad_values_are_fatal(clean_env, name, value):
    set_required(clean_env)
    clean_env.setenv(name, value)
    with pytest.raises(RuntimeError):
        Settings.from_env()
