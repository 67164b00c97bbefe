"""workreport data models."""

from .common import (
    decode_list,
    encode_list,
    format_number,
    format_schedule,
    legacy_id,
    legacy_row_number,
    new_id,
    normalize_date,
    parse_date,
    parse_schedule,
)
from .daily_report import (
    DAILY_REPORT_COLUMNS,
    DAILY_REPORT_SHEET_HEADERS,
    DailyReport,
    DailyReportResult,
    ExportDailyReportsResult,
    ListDailyReportsResult,
    SearchDailyReportsResult,
    SearchOptionsResult,
)
from .history import (
    PROJECT_HISTORY_SHEET_HEADERS,
    ProjectHistory,
    ProjectHistoryResult,
)
from .item_data import (
    DEFAULT_AFFILIATIONS,
    DEFAULT_CUSTOMERS,
    DEFAULT_DEVELOPMENT_STAGES,
    DEFAULT_MODELS,
    ITEM_DATA_SHEET_HEADERS,
    ItemData,
    ItemDataResult,
)
from .manager import MANAGER_SHEET_HEADERS, Manager, ManagersResult
from .project import (
    PROJECT_COLUMNS,
    PROJECT_SHEET_HEADERS,
    STATUS_LABELS,
    GetProjectResult,
    ListProjectsResult,
    Project,
    ProjectResult,
    status_from_label,
    status_to_label,
)
from .setup import (
    BackfillResult,
    ConnectionResult,
    InitializeResult,
    RefreshResult,
    RevalidateResult,
    ValidateStructureResult,
)

__all__ = [
    # Cell codecs
    "decode_list",
    "encode_list",
    "format_number",
    "format_schedule",
    "legacy_id",
    "legacy_row_number",
    "new_id",
    "normalize_date",
    "parse_date",
    "parse_schedule",
    # Daily report
    "DAILY_REPORT_COLUMNS",
    "DAILY_REPORT_SHEET_HEADERS",
    "DailyReport",
    "DailyReportResult",
    "ExportDailyReportsResult",
    "ListDailyReportsResult",
    "SearchDailyReportsResult",
    "SearchOptionsResult",
    # History
    "PROJECT_HISTORY_SHEET_HEADERS",
    "ProjectHistory",
    "ProjectHistoryResult",
    # Item data
    "DEFAULT_AFFILIATIONS",
    "DEFAULT_CUSTOMERS",
    "DEFAULT_DEVELOPMENT_STAGES",
    "DEFAULT_MODELS",
    "ITEM_DATA_SHEET_HEADERS",
    "ItemData",
    "ItemDataResult",
    # Manager
    "MANAGER_SHEET_HEADERS",
    "Manager",
    "ManagersResult",
    # Project
    "PROJECT_COLUMNS",
    "PROJECT_SHEET_HEADERS",
    "STATUS_LABELS",
    "GetProjectResult",
    "ListProjectsResult",
    "Project",
    "ProjectResult",
    "status_from_label",
    "status_to_label",
    # Setup
    "BackfillResult",
    "ConnectionResult",
    "InitializeResult",
    "RefreshResult",
    "RevalidateResult",
    "ValidateStructureResult",
]
