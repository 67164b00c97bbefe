"""Project data models."""

from dataclasses import dataclass, field
from typing import Optional

from .common import (
    cell,
    decode_list,
    encode_list,
    legacy_id,
    parse_schedule,
)

# Status codes used by forms and filters -> labels stored in the sheet
STATUS_LABELS = {
    "progress": "진행",
    "hold": "보류",
    "completed": "완료",
}
STATUS_CODES = {label: code for code, label in STATUS_LABELS.items()}


def status_to_label(status: str) -> str:
    """Sheet label for a status code; labels and unknown values pass through."""
    return STATUS_LABELS.get(status, status)


def status_from_label(label: str) -> str:
    """Status code for a sheet label; unknown labels are kept verbatim."""
    return STATUS_CODES.get(label, label)


@dataclass
class Project:
    """One row of the project sheet."""

    no: str
    status: str  # progress / hold / completed
    client: str
    item: str
    affiliation: str = ""
    model: str = ""
    part_no: str = ""
    managers: list[str] = field(default_factory=list)
    current_stage: str = ""
    progress_status: str = ""
    issues: str = ""
    notes: str = ""
    additional_plan: str = ""
    development_stages: list[str] = field(default_factory=list)
    schedule: str = ""  # "start ~ end"
    selling_price: str = ""
    material_cost: str = ""
    material_cost_ratio: str = ""
    updated_at: str = ""
    id: str = ""
    row_number: Optional[int] = None

    @property
    def schedule_start(self) -> str:
        return parse_schedule(self.schedule)[0]

    @property
    def schedule_end(self) -> str:
        return parse_schedule(self.schedule)[1]

    @property
    def no_value(self) -> int:
        """Numeric NO, 0 when the cell is not a number."""
        try:
            return int(str(self.no).strip())
        except ValueError:
            return 0

    def to_sheet_row(self) -> list:
        """Convert to Google Sheets row format (A:T)."""
        return [
            self.no,                                # A: NO
            status_to_label(self.status),           # B: 진행여부
            self.client,                            # C: 고객사
            self.affiliation,                       # D: 소속
            self.model,                             # E: 모델
            self.item,                              # F: ITEM
            self.part_no,                           # G: PART NO
            encode_list(self.managers),             # H: 개발담당
            self.current_stage,                     # I: 현재단계
            self.progress_status,                   # J: 업무진행사항
            self.issues,                            # K: 애로사항
            self.notes,                             # L: 비고
            self.additional_plan,                   # M: 업무추가 일정계획
            encode_list(self.development_stages),   # N: 개발업무단계
            self.schedule,                          # O: 대일정
            self.selling_price,                     # P: 판매가
            self.material_cost,                     # Q: 재료비
            self.material_cost_ratio,               # R: 재료비율
            self.updated_at,                        # S: 수정일시
            self.id,                                # T: ID
        ]

    @classmethod
    def from_sheet_row(cls, row: list, row_number: Optional[int] = None) -> "Project":
        """Create from Google Sheets row."""
        row_id = cell(row, 19)
        if not row_id and row_number is not None:
            row_id = legacy_id(row_number)

        return cls(
            no=cell(row, 0),
            status=status_from_label(cell(row, 1)),
            client=cell(row, 2),
            affiliation=cell(row, 3),
            model=cell(row, 4),
            item=cell(row, 5),
            part_no=cell(row, 6),
            managers=decode_list(cell(row, 7)),
            current_stage=cell(row, 8),
            progress_status=cell(row, 9),
            issues=cell(row, 10),
            notes=cell(row, 11),
            additional_plan=cell(row, 12),
            development_stages=decode_list(cell(row, 13)),
            schedule=cell(row, 14),
            selling_price=cell(row, 15),
            material_cost=cell(row, 16),
            material_cost_ratio=cell(row, 17),
            updated_at=cell(row, 18),
            id=row_id,
            row_number=row_number,
        )

    def to_dict(self) -> dict:
        """Convert to API dictionary."""
        return {
            "id": self.id,
            "no": self.no,
            "status": self.status,
            "client": self.client,
            "affiliation": self.affiliation,
            "model": self.model,
            "item": self.item,
            "partNo": self.part_no,
            "managers": list(self.managers),
            "currentStage": self.current_stage,
            "progressStatus": self.progress_status,
            "issues": self.issues,
            "notes": self.notes,
            "additionalPlan": self.additional_plan,
            "developmentStages": list(self.development_stages),
            "schedule": self.schedule,
            "sellingPrice": self.selling_price,
            "materialCost": self.material_cost,
            "materialCostRatio": self.material_cost_ratio,
            "updatedAt": self.updated_at,
        }


@dataclass
class ProjectResult:
    """Result of creating or updating a project."""

    success: bool
    project_id: str = ""
    project_no: str = ""
    history_recorded: bool = False
    validation_errors: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class GetProjectResult:
    """Result of getting a single project."""

    success: bool
    project: Optional[Project] = None
    message: str = ""


@dataclass
class ListProjectsResult:
    """Result of listing projects."""

    success: bool
    projects: list[Project] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
    page_count: int = 0
    validation_errors: list[str] = field(default_factory=list)
    message: str = ""


# Column headers for the project sheet
PROJECT_SHEET_HEADERS = [
    "NO",                   # A
    "진행여부",             # B
    "고객사",               # C
    "소속",                 # D
    "모델",                 # E
    "ITEM",                 # F
    "PART NO",              # G
    "개발담당",             # H
    "현재단계",             # I
    "업무진행사항",         # J
    "애로사항",             # K
    "비고",                 # L
    "업무추가 일정계획",    # M
    "개발업무단계",         # N
    "대일정",               # O
    "판매가",               # P
    "재료비",               # Q
    "재료비율",             # R
    "수정일시",             # S
    "ID",                   # T
]

PROJECT_COLUMNS = len(PROJECT_SHEET_HEADERS)
