"""Daily report data models."""

from dataclasses import dataclass, field
from typing import Optional

from .common import cell, legacy_id


@dataclass
class DailyReport:
    """One row of the daily report sheet."""

    date: str  # YYYY-MM-DD
    item: str
    customer: str
    stage: str
    manager: str  # One cell, comma-joined when several people share a report
    part_no: str = ""
    plan: str = ""
    performance: str = ""
    note: str = ""
    id: str = ""
    row_number: Optional[int] = None  # 1-based sheet row, valid for one fetch only

    def to_sheet_row(self) -> list:
        """Convert to Google Sheets row format (A:J)."""
        return [
            self.date,          # A: 날짜
            self.item,          # B: ITEM
            self.part_no,       # C: PART NO
            self.customer,      # D: 고객사
            self.stage,         # E: 단계
            self.manager,       # F: 담당자
            self.plan,          # G: 계획
            self.performance,   # H: 실적
            self.note,          # I: 비고
            self.id,            # J: ID
        ]

    @classmethod
    def from_sheet_row(cls, row: list, row_number: Optional[int] = None) -> "DailyReport":
        """Create from Google Sheets row."""
        row_id = cell(row, 9)
        if not row_id and row_number is not None:
            row_id = legacy_id(row_number)

        return cls(
            date=cell(row, 0),
            item=cell(row, 1),
            part_no=cell(row, 2),
            customer=cell(row, 3),
            stage=cell(row, 4),
            manager=cell(row, 5),
            plan=cell(row, 6),
            performance=cell(row, 7),
            note=cell(row, 8),
            id=row_id,
            row_number=row_number,
        )

    def to_dict(self) -> dict:
        """Convert to API dictionary."""
        return {
            "id": self.id,
            "date": self.date,
            "item": self.item,
            "partNo": self.part_no,
            "customer": self.customer,
            "stage": self.stage,
            "manager": self.manager,
            "plan": self.plan,
            "performance": self.performance,
            "note": self.note,
        }


@dataclass
class DailyReportResult:
    """Result of creating, updating or deleting a daily report."""

    success: bool
    report_id: str = ""
    validation_errors: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class ListDailyReportsResult:
    """Result of listing daily reports."""

    success: bool
    reports: list[DailyReport] = field(default_factory=list)
    validation_errors: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class SearchDailyReportsResult:
    """Result of a paginated daily report search."""

    success: bool
    reports: list[DailyReport] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
    page_count: int = 0
    validation_errors: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class ExportDailyReportsResult:
    """CSV export of every matching daily report."""

    success: bool
    content: str = ""
    filename: str = ""
    row_count: int = 0
    validation_errors: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class SearchOptionsResult:
    """Distinct values offered by the search form."""

    success: bool
    managers: list[str] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    part_nos: list[str] = field(default_factory=list)
    stages: list[str] = field(default_factory=list)
    message: str = ""


# Column headers for the daily report sheet
DAILY_REPORT_SHEET_HEADERS = [
    "날짜",
    "ITEM",
    "PART NO",
    "고객사",
    "단계",
    "담당자",
    "계획",
    "실적",
    "비고",
    "ID",
]

DAILY_REPORT_COLUMNS = len(DAILY_REPORT_SHEET_HEADERS)
