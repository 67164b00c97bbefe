"""Project history data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .common import cell

RESOLVED_MARK = "O"


@dataclass
class ProjectHistory:
    """Audit row appended when a project is updated."""

    date: str  # YYYY-MM-DD
    item: str
    part_no: str = ""
    customer: str = ""
    managers: str = ""
    progress: str = ""
    additional_plan: str = ""
    notes: str = ""
    issues: str = ""  # Issue text as submitted, kept even when resolved
    issue_resolved: bool = False
    issue_resolution_details: str = ""
    editor: str = ""
    time: str = ""  # HH:MM:SS
    sequence: str = ""

    @classmethod
    def stamped(cls, editor: str, now: Optional[datetime] = None, **fields) -> "ProjectHistory":
        """Create a history row stamped with the current date and time."""
        now = now or datetime.now()
        return cls(
            date=now.strftime("%Y-%m-%d"),
            time=now.strftime("%H:%M:%S"),
            editor=editor,
            **fields,
        )

    def to_sheet_row(self) -> list:
        """Convert to Google Sheets row format (A:N)."""
        return [
            self.sequence,                                  # A: 순번
            self.date,                                      # B: 날짜
            self.item,                                      # C: ITEM
            self.part_no,                                   # D: PART NO
            self.customer,                                  # E: 고객사
            self.managers,                                  # F: 담당자
            self.progress,                                  # G: 업무진행사항
            self.additional_plan,                           # H: 업무추가 일정계획
            self.notes,                                     # I: 비고
            self.issues,                                    # J: 애로사항
            RESOLVED_MARK if self.issue_resolved else "",   # K: 해결여부
            self.issue_resolution_details,                  # L: 해결내용
            self.editor,                                    # M: 수정자
            self.time,                                      # N: 수정시간
        ]

    @classmethod
    def from_sheet_row(cls, row: list) -> "ProjectHistory":
        """Create from Google Sheets row."""
        return cls(
            sequence=cell(row, 0),
            date=cell(row, 1),
            item=cell(row, 2),
            part_no=cell(row, 3),
            customer=cell(row, 4),
            managers=cell(row, 5),
            progress=cell(row, 6),
            additional_plan=cell(row, 7),
            notes=cell(row, 8),
            issues=cell(row, 9),
            issue_resolved=cell(row, 10).strip().upper() == RESOLVED_MARK,
            issue_resolution_details=cell(row, 11),
            editor=cell(row, 12),
            time=cell(row, 13),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "item": self.item,
            "partNo": self.part_no,
            "customer": self.customer,
            "managers": self.managers,
            "progress": self.progress,
            "additionalPlan": self.additional_plan,
            "notes": self.notes,
            "issues": self.issues,
            "issueResolved": self.issue_resolved,
            "issueResolutionDetails": self.issue_resolution_details,
            "editor": self.editor,
            "time": self.time,
        }


@dataclass
class ProjectHistoryResult:
    """Result of reading a project's history."""

    success: bool
    history: list[ProjectHistory] = field(default_factory=list)
    message: str = ""


PROJECT_HISTORY_SHEET_HEADERS = [
    "순번",
    "날짜",
    "ITEM",
    "PART NO",
    "고객사",
    "담당자",
    "업무진행사항",
    "업무추가 일정계획",
    "비고",
    "애로사항",
    "해결여부",
    "해결내용",
    "수정자",
    "수정시간",
]
