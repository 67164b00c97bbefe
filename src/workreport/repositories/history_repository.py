"""Project history repository - append-only audit sheet."""

from ..cache import PROJECT_HISTORY_TAG
from ..models.history import PROJECT_HISTORY_SHEET_HEADERS, ProjectHistory
from .base import SheetRepository


class ProjectHistoryRepository(SheetRepository):
    """Repository for project history rows."""

    TAG = PROJECT_HISTORY_TAG
    WIDTH = len(PROJECT_HISTORY_SHEET_HEADERS)

    def append(self, history: ProjectHistory) -> None:
        """Append one history row."""
        self.sheets_client.append_sheet_values(
            self.append_range,
            [history.to_sheet_row()],
        )

    def get_all(self) -> list[ProjectHistory]:
        """Get all history rows in sheet order (cached)."""
        return self._cached(
            "all",
            lambda: [
                ProjectHistory.from_sheet_row(row)
                for _row_number, row in self._read_numbered_rows()
            ],
        )

    def find_for_project(self, item: str, part_no: str) -> list[ProjectHistory]:
        """History rows recorded for an item / part number pair, newest first."""
        rows = [
            h for h in self.get_all()
            if h.item == item and h.part_no == part_no
        ]
        rows.reverse()
        return rows
