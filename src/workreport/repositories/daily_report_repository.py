"""Daily report repository - manages the daily report sheet."""

import logging
from typing import Optional

from ..cache import DAILY_REPORTS_TAG
from ..integrations.google_sheets import SheetsAPIError, row_range
from ..models.common import normalize_date
from ..models.daily_report import DAILY_REPORT_COLUMNS, DailyReport
from .base import SheetRepository

logger = logging.getLogger(__name__)

DATE_COLUMN = 0
PLAN_COLUMN = 6
ID_COLUMN = 9


class DailyReportRepository(SheetRepository):
    """Repository for daily reports."""

    TAG = DAILY_REPORTS_TAG
    WIDTH = DAILY_REPORT_COLUMNS

    def _load(self) -> list[DailyReport]:
        return [
            DailyReport.from_sheet_row(row, row_number)
            for row_number, row in self._read_numbered_rows()
        ]

    def get_all(self) -> list[DailyReport]:
        """Get all daily reports in sheet order (cached)."""
        return self._cached("all", self._load)

    def get_fresh(self) -> list[DailyReport]:
        """Get all daily reports, bypassing the cache."""
        return self._load()

    def get_by_date(self, date: str) -> list[DailyReport]:
        """Get the reports of one day.

        Args:
            date: Day in YYYY-MM-DD form
        """
        return [r for r in self.get_all() if normalize_date(r.date) == date]

    def find_for_write(self, report_id: str) -> Optional[DailyReport]:
        """Locate a report in a fresh read so its row number is current.

        Legacy row keys only match rows that still have no stored ID.
        """
        for report in self.get_fresh():
            if report.id == report_id:
                return report
        return None

    def add(self, report: DailyReport) -> None:
        """Append a report as a new row."""
        self.sheets_client.append_sheet_values(
            self.append_range,
            [report.to_sheet_row()],
        )

    def update(self, report: DailyReport) -> None:
        """Rewrite date, plan, performance and note of an existing row.

        The date cell is written with a DATE number format so the sheet
        keeps treating it as a date.
        """
        if report.row_number is None:
            raise ValueError("Daily report has no row number")

        sheet_id = self.sheets_client.get_sheet_id(self.sheet_name)
        if sheet_id is None:
            raise SheetsAPIError(f"Sheet not found: {self.sheet_name}")

        row_index = report.row_number - 1
        self.sheets_client.batch_update([
            {
                "updateCells": {
                    "range": {
                        "sheetId": sheet_id,
                        "startRowIndex": row_index,
                        "endRowIndex": row_index + 1,
                        "startColumnIndex": DATE_COLUMN,
                        "endColumnIndex": DATE_COLUMN + 1,
                    },
                    "rows": [{
                        "values": [{
                            "userEnteredValue": {"stringValue": report.date},
                            "userEnteredFormat": {
                                "numberFormat": {"type": "DATE", "pattern": "yyyy-mm-dd"}
                            },
                        }]
                    }],
                    "fields": "userEnteredValue,userEnteredFormat.numberFormat",
                }
            },
            {
                "updateCells": {
                    "range": {
                        "sheetId": sheet_id,
                        "startRowIndex": row_index,
                        "endRowIndex": row_index + 1,
                        "startColumnIndex": PLAN_COLUMN,
                        "endColumnIndex": PLAN_COLUMN + 3,
                    },
                    "rows": [{
                        "values": [
                            {"userEnteredValue": {"stringValue": report.plan}},
                            {"userEnteredValue": {"stringValue": report.performance}},
                            {"userEnteredValue": {"stringValue": report.note}},
                        ]
                    }],
                    "fields": "userEnteredValue",
                }
            },
        ])

    def delete(self, report: DailyReport) -> bool:
        """Blank the report's row, then try to remove it.

        Returns:
            True if the row was removed, False if only blanked
        """
        if report.row_number is None:
            raise ValueError("Daily report has no row number")

        self.sheets_client.update_sheet_values(
            row_range(self.sheet_name, report.row_number, self.WIDTH),
            [[""] * self.WIDTH],
            value_input_option="RAW",
        )

        try:
            self.sheets_client.delete_rows(
                self.sheet_name, report.row_number, report.row_number
            )
        except Exception as e:
            logger.warning(
                f"Row {report.row_number} of '{self.sheet_name}' was blanked "
                f"but could not be removed: {e}"
            )
            return False
        return True

    def write_id(self, row_number: int, report_id: str) -> None:
        """Store a stable ID in the ID column of one row."""
        self._write_cell(row_number, ID_COLUMN, report_id)
