"""Setup and maintenance result models."""

from dataclasses import dataclass, field


@dataclass
class ConnectionResult:
    """Result of test_connection tool."""

    success: bool
    title: str = ""
    sheets: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class ValidateStructureResult:
    """Result of validate_structure tool."""

    success: bool
    valid: bool = False
    existing_sheets: list[str] = field(default_factory=list)
    missing_sheets: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class InitializeResult:
    """Result of initialize_spreadsheet tool."""

    success: bool
    created_sheets: list[str] = field(default_factory=list)
    updated_headers: list[str] = field(default_factory=list)
    sample_data_added: bool = False
    message: str = ""


@dataclass
class BackfillResult:
    """Result of backfill_row_ids tool."""

    success: bool
    daily_reports_updated: int = 0
    projects_updated: int = 0
    message: str = ""


@dataclass
class RevalidateResult:
    """Result of cache invalidation."""

    success: bool
    tags: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class RefreshResult:
    """Result of refresh_data tool."""

    success: bool
    tags: list[str] = field(default_factory=list)
    data: dict = field(default_factory=dict)
    message: str = ""
