"""In-memory filtering, sorting and pagination of sheet records.

Every search runs on the full list read from the sheet. The daily report
search and the CSV export share filter_and_sort_reports(); only the
paginated search slices the result afterwards.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, TypeVar

from .models.common import parse_date, parse_schedule
from .models.daily_report import DailyReport
from .models.project import Project, status_from_label

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000

_TERM_SEPARATORS = re.compile(r"[;,]")

# Sortable daily report fields, camelCase aliases included
REPORT_SORT_FIELDS = {
    "date": "date",
    "item": "item",
    "part_no": "part_no",
    "partNo": "part_no",
    "customer": "customer",
    "stage": "stage",
    "manager": "manager",
    "plan": "plan",
    "performance": "performance",
    "note": "note",
}

PROJECT_SORT_FIELDS = ("no", "client", "item", "startDate", "endDate")
DEFAULT_PROJECT_SORT = "no-desc"


@dataclass
class DailyReportSearchParams:
    """Search conditions for daily reports."""

    query: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    managers: list[str] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    part_nos: list[str] = field(default_factory=list)
    stages: list[str] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = None
    sort_direction: str = "desc"

    def validate(self) -> list[str]:
        """Return validation errors (empty if valid)."""
        errors = []
        if self.page < 1:
            errors.append("page는 1 이상이어야 합니다.")
        if self.page_size < 1 or self.page_size > MAX_PAGE_SIZE:
            errors.append(f"pageSize는 1 이상 {MAX_PAGE_SIZE} 이하여야 합니다.")
        if self.sort_direction not in ("asc", "desc"):
            errors.append(f"정렬 방향이 올바르지 않습니다: {self.sort_direction}")
        if self.sort_by and self.sort_by not in REPORT_SORT_FIELDS:
            errors.append(f"정렬할 수 없는 필드입니다: {self.sort_by}")
        for name, value in (("startDate", self.start_date), ("endDate", self.end_date)):
            if value and parse_date(value) is None:
                errors.append(f"{name} 날짜 형식이 올바르지 않습니다: {value}")
        return errors


@dataclass
class ProjectFilterParams:
    """Filter, sort and page conditions for the project list."""

    item: str = ""
    part_no: str = ""
    client: str = ""
    affiliation: str = ""
    model: str = ""
    manager: str = ""
    status: str = ""
    current_stage: str = ""
    start_date: str = ""
    end_date: str = ""
    sort: str = DEFAULT_PROJECT_SORT
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def validate(self) -> list[str]:
        """Return validation errors (empty if valid)."""
        errors = []
        if self.page < 1:
            errors.append("page는 1 이상이어야 합니다.")
        if self.page_size < 1 or self.page_size > MAX_PAGE_SIZE:
            errors.append(f"pageSize는 1 이상 {MAX_PAGE_SIZE} 이하여야 합니다.")
        try:
            parse_project_sort(self.sort)
        except ValueError as e:
            errors.append(str(e))
        return errors


def split_terms(query: str) -> list[str]:
    """Split a free-text query on ';' or ',' into lowercase terms."""
    if not query:
        return []
    terms = (t.strip().lower() for t in _TERM_SEPARATORS.split(query))
    return [t for t in terms if t]


def matches_query(report: DailyReport, terms: list[str]) -> bool:
    """True if any term is contained in item, stage or manager."""
    if not terms:
        return True
    haystacks = (report.item.lower(), report.stage.lower(), report.manager.lower())
    return any(term in text for term in terms for text in haystacks)


def in_date_range(value: str, start: Optional[date], end: Optional[date]) -> bool:
    """Inclusive range check; an unparseable date is outside any bounded range."""
    if start is None and end is None:
        return True
    parsed = parse_date(value)
    if parsed is None:
        return False
    if start is not None and parsed < start:
        return False
    if end is not None and parsed > end:
        return False
    return True


def filter_reports(
    reports: list[DailyReport],
    params: DailyReportSearchParams,
) -> list[DailyReport]:
    """Apply the query, date range and allow-list filters."""
    terms = split_terms(params.query)
    start = parse_date(params.start_date) if params.start_date else None
    end = parse_date(params.end_date) if params.end_date else None

    results = []
    for report in reports:
        if not matches_query(report, terms):
            continue
        if not in_date_range(report.date, start, end):
            continue
        if params.managers and report.manager not in params.managers:
            continue
        if params.items and report.item not in params.items:
            continue
        if params.part_nos and report.part_no not in params.part_nos:
            continue
        if params.stages and report.stage not in params.stages:
            continue
        results.append(report)
    return results


def _sort_with_missing_last(
    records: list[T],
    key: Callable[[T], Optional[object]],
    descending: bool,
) -> list[T]:
    """Stable sort on key(); records whose key is None keep order at the end."""
    present = [r for r in records if key(r) is not None]
    missing = [r for r in records if key(r) is None]
    present.sort(key=key, reverse=descending)
    return present + missing


def sort_reports(
    reports: list[DailyReport],
    sort_by: Optional[str] = None,
    sort_direction: str = "desc",
) -> list[DailyReport]:
    """Sort daily reports; date descending when no field is named."""
    field_name = REPORT_SORT_FIELDS.get(sort_by or "date", "date")
    descending = sort_direction != "asc"

    if field_name == "date":
        return _sort_with_missing_last(reports, lambda r: parse_date(r.date), descending)

    return sorted(
        reports,
        key=lambda r: getattr(r, field_name).casefold(),
        reverse=descending,
    )


def filter_and_sort_reports(
    reports: list[DailyReport],
    params: DailyReportSearchParams,
) -> list[DailyReport]:
    """Filter then sort; shared by paginated search and export."""
    filtered = filter_reports(reports, params)
    return sort_reports(filtered, params.sort_by, params.sort_direction)


def paginate(items: list[T], page: int, page_size: int) -> list[T]:
    """Return one 1-based page of items."""
    start = (page - 1) * page_size
    return items[start:start + page_size]


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total items."""
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


def parse_project_sort(sort: str) -> tuple[str, bool]:
    """Split "field-direction" into (field, descending).

    Raises:
        ValueError: for unknown fields or directions
    """
    sort = sort or DEFAULT_PROJECT_SORT
    field_name, _, direction = sort.partition("-")
    direction = direction or "asc"
    if field_name not in PROJECT_SORT_FIELDS:
        raise ValueError(f"정렬할 수 없는 필드입니다: {field_name}")
    if direction not in ("asc", "desc"):
        raise ValueError(f"정렬 방향이 올바르지 않습니다: {direction}")
    return field_name, direction == "desc"


def _contains(value: str, needle: str) -> bool:
    return needle.lower() in value.lower()


def filter_projects(projects: list[Project], params: ProjectFilterParams) -> list[Project]:
    """Apply the project list filters."""
    status = status_from_label(params.status) if params.status else ""

    results = []
    for project in projects:
        if params.item and not _contains(project.item, params.item):
            continue
        if params.part_no and not _contains(project.part_no, params.part_no):
            continue
        if params.client and not _contains(project.client, params.client):
            continue
        if params.affiliation and project.affiliation != params.affiliation:
            continue
        if params.model and not _contains(project.model, params.model):
            continue
        if params.manager and not any(
            _contains(m, params.manager) for m in project.managers
        ):
            continue
        if status and project.status != status:
            continue
        if params.current_stage and project.current_stage != params.current_stage:
            continue
        if params.start_date:
            start = project.schedule_start
            if not start or start < params.start_date:
                continue
        if params.end_date:
            end = project.schedule_end
            if not end or end > params.end_date:
                continue
        results.append(project)
    return results


def sort_projects(projects: list[Project], sort: str = DEFAULT_PROJECT_SORT) -> list[Project]:
    """Sort projects by "field-direction"; missing schedule dates go last."""
    field_name, descending = parse_project_sort(sort)

    if field_name == "no":
        return sorted(projects, key=lambda p: p.no_value, reverse=descending)
    if field_name in ("client", "item"):
        return sorted(
            projects,
            key=lambda p: getattr(p, field_name).casefold(),
            reverse=descending,
        )

    def schedule_key(project: Project) -> Optional[str]:
        start, end = parse_schedule(project.schedule)
        value = start if field_name == "startDate" else end
        return value or None

    return _sort_with_missing_last(projects, schedule_key, descending)
