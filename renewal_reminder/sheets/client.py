from __future__ import annotations

import logging
from typing import Any

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from ..records.models import ClientRecord
from ..records.parsers import reminder_sent_column, rows_to_records

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_MASTER_TAB_NAME = "MasterData"
DEFAULT_COACH_TAB_NAME = "Coaches"


class SheetsClient:
    def __init__(
        self,
        spreadsheet_id: str,
        service_account_file: str,
        master_tab_name: str = DEFAULT_MASTER_TAB_NAME,
        coach_tab_name: str = DEFAULT_COACH_TAB_NAME,
    ) -> None:
        try:
            credentials = Credentials.from_service_account_file(service_account_file, scopes=SCOPES)
        except (OSError, ValueError) as exc:
            raise RuntimeError(
                f"Could not load service account credentials from {service_account_file}: {exc}"
            ) from exc
        try:
            self._client = gspread.authorize(credentials)
            self._spreadsheet = self._client.open_by_key(spreadsheet_id)
        except (
            gspread.exceptions.GSpreadException,
            GoogleAuthError,
            requests.RequestException,
        ) as exc:
            raise RuntimeError(f"Could not open spreadsheet {spreadsheet_id}: {exc}") from exc
        self.master_tab_name = master_tab_name
        self.coach_tab_name = coach_tab_name
        self._sent_column: int | None = None
        self._master_worksheet = None

    def fetch_rows(self) -> list[list[Any]]:
        worksheet = self._get_master_worksheet()
        # Checkboxes come back as booleans, dates as their displayed text.
        try:
            return worksheet.get_all_values(
                value_render_option="UNFORMATTED_VALUE",
                date_time_render_option="FORMATTED_STRING",
            )
        except (gspread.exceptions.GSpreadException, requests.RequestException) as exc:
            raise RuntimeError(
                f"Could not read worksheet '{self.master_tab_name}': {exc}"
            ) from exc

    def load_records(self) -> list[ClientRecord]:
        rows = self.fetch_rows()
        if not rows:
            logger.info("Worksheet '%s' is empty.", self.master_tab_name)
            return []
        records = rows_to_records(rows)
        self._sent_column = reminder_sent_column(rows[0])
        logger.info("Loaded %d record(s) from %s", len(records), self.master_tab_name)
        return records

    def load_coach_rows(self) -> list[list[Any]]:
        try:
            worksheet = self._spreadsheet.worksheet(self.coach_tab_name)
        except gspread.WorksheetNotFound:
            logger.warning(
                "Worksheet '%s' not found; relying on JSON overrides for coach ids.",
                self.coach_tab_name,
            )
            return []
        return worksheet.get_all_values()

    def mark_sent(self, record: ClientRecord) -> None:
        worksheet = self._get_master_worksheet()
        if self._sent_column is None:
            self._sent_column = reminder_sent_column(worksheet.row_values(1))
        worksheet.update_cell(record.row, self._sent_column, True)
        logger.debug("Marked row %d as sent in %s", record.row, self.master_tab_name)

    def _get_master_worksheet(self):
        if self._master_worksheet is not None:
            return self._master_worksheet
        try:
            self._master_worksheet = self._spreadsheet.worksheet(self.master_tab_name)
        except gspread.WorksheetNotFound as exc:
            raise RuntimeError(
                f"Worksheet '{self.master_tab_name}' not found. Please create it manually."
            ) from exc
        except (gspread.exceptions.GSpreadException, requests.RequestException) as exc:
            raise RuntimeError(
                f"Could not open worksheet '{self.master_tab_name}': {exc}"
            ) from exc
        return self._master_worksheet
