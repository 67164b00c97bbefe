"""Shared plumbing for sheet-backed repositories."""

import logging
from typing import Any, Callable, Optional

from ..cache import TaggedCache
from ..integrations.google_sheets import GoogleSheetsClient, column_letter

logger = logging.getLogger(__name__)

# Row 1 of every data sheet holds headers
FIRST_DATA_ROW = 2


def is_blank_row(row: list) -> bool:
    """True for rows with no non-whitespace cell."""
    return not any(str(v).strip() for v in row if v is not None)


class SheetRepository:
    """Base for repositories reading one sheet through the tagged cache."""

    TAG = ""
    WIDTH = 1

    def __init__(
        self,
        sheets_client: GoogleSheetsClient,
        sheet_name: str,
        cache: Optional[TaggedCache] = None,
        ttl: int = 60,
    ):
        """Initialize the repository.

        Args:
            sheets_client: Google Sheets client bound to the spreadsheet
            sheet_name: Title of the sheet this repository reads
            cache: Shared read cache (a private one if not provided)
            ttl: Seconds a cached read stays valid
        """
        self.sheets_client = sheets_client
        self.sheet_name = sheet_name
        self.cache = cache if cache is not None else TaggedCache()
        self.ttl = ttl

    @property
    def data_range(self) -> str:
        """A1 range of every data row, headers excluded."""
        return f"{self.sheet_name}!A{FIRST_DATA_ROW}:{column_letter(self.WIDTH - 1)}"

    @property
    def append_range(self) -> str:
        return f"{self.sheet_name}!A:{column_letter(self.WIDTH - 1)}"

    def _cached(self, key: str, loader: Callable[[], Any]) -> Any:
        return self.cache.get_or_load(
            f"{self.TAG}:{key}", loader, self.ttl, tags=(self.TAG,)
        )

    def _read_numbered_rows(self) -> list[tuple[int, list]]:
        """Read data rows with their 1-based sheet row numbers, skipping blanks."""
        values = self.sheets_client.get_sheet_values(self.data_range)
        return [
            (idx + FIRST_DATA_ROW, row)
            for idx, row in enumerate(values)
            if row and not is_blank_row(row)
        ]

    def _write_cell(self, row_number: int, col_index: int, value: str) -> None:
        col = column_letter(col_index)
        self.sheets_client.update_sheet_values(
            f"{self.sheet_name}!{col}{row_number}",
            [[value]],
            value_input_option="RAW",
        )
