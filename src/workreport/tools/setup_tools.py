"""Spreadsheet setup and maintenance tools."""

import logging
from datetime import date

from ..cache import ALL_TAGS, TaggedCache
from ..config import SheetNamesConfig
from ..integrations.google_sheets import GoogleSheetsClient, column_letter
from ..models import (
    DAILY_REPORT_SHEET_HEADERS,
    ITEM_DATA_SHEET_HEADERS,
    MANAGER_SHEET_HEADERS,
    PROJECT_HISTORY_SHEET_HEADERS,
    PROJECT_SHEET_HEADERS,
    BackfillResult,
    ConnectionResult,
    DailyReport,
    InitializeResult,
    ItemData,
    Manager,
    Project,
    ValidateStructureResult,
    legacy_row_number,
    new_id,
)
from ..repositories import DailyReportRepository, ProjectRepository

logger = logging.getLogger(__name__)

SAMPLE_MANAGERS = [
    Manager(rank="부장", name="김철수"),
    Manager(rank="과장", name="이영희"),
    Manager(rank="대리", name="박민수"),
]


class SetupTools:
    """Tools for preparing and checking the spreadsheet."""

    def __init__(
        self,
        sheets_client: GoogleSheetsClient,
        sheet_names: SheetNamesConfig,
        daily_report_repository: DailyReportRepository,
        project_repository: ProjectRepository,
        cache: TaggedCache,
    ):
        """Initialize setup tools.

        Args:
            sheets_client: Google Sheets client bound to the spreadsheet
            sheet_names: Titles of the sheets the application uses
            daily_report_repository: Used to backfill daily report IDs
            project_repository: Used to backfill project IDs
            cache: Shared read cache, cleared after structural changes
        """
        self.sheets = sheets_client
        self.sheet_names = sheet_names
        self.daily_report_repository = daily_report_repository
        self.project_repository = project_repository
        self.cache = cache

    def _required_sheets(self) -> dict[str, list[str]]:
        """Sheet title -> header row."""
        return {
            self.sheet_names.daily_reports: DAILY_REPORT_SHEET_HEADERS,
            self.sheet_names.projects: PROJECT_SHEET_HEADERS,
            self.sheet_names.managers: MANAGER_SHEET_HEADERS,
            self.sheet_names.item_data: ITEM_DATA_SHEET_HEADERS,
            self.sheet_names.project_history: PROJECT_HISTORY_SHEET_HEADERS,
        }

    def test_connection(self) -> ConnectionResult:
        """Check credentials and spreadsheet access."""
        try:
            info = self.sheets.test_connection()
        except Exception as e:
            logger.error(f"Connection test failed: {e}")
            return ConnectionResult(
                success=False,
                message=f"Google Sheets 연결에 실패했습니다: {e}",
            )

        return ConnectionResult(
            success=True,
            title=info["title"],
            sheets=info["sheets"],
            message=f"'{info['title']}' 스프레드시트에 연결되었습니다.",
        )

    def validate_structure(self) -> ValidateStructureResult:
        """Report which required sheets are missing."""
        try:
            existing = self.sheets.get_sheet_names()
        except Exception as e:
            logger.error(f"Structure validation failed: {e}")
            return ValidateStructureResult(
                success=False,
                message="스프레드시트 검증 중 서버 오류가 발생했습니다.",
            )

        missing = [name for name in self._required_sheets() if name not in existing]
        if missing:
            message = "스프레드시트 구조가 유효하지 않습니다. 초기화가 필요합니다."
        else:
            message = "스프레드시트 구조가 유효합니다."
        return ValidateStructureResult(
            success=True,
            valid=not missing,
            existing_sheets=existing,
            missing_sheets=missing,
            message=message,
        )

    def _sample_rows(self, sheet_name: str) -> list[list[str]]:
        today = date.today().isoformat()
        if sheet_name == self.sheet_names.managers:
            return [m.to_sheet_row() for m in SAMPLE_MANAGERS]
        if sheet_name == self.sheet_names.item_data:
            return ItemData.defaults().to_sheet_rows()
        if sheet_name == self.sheet_names.daily_reports:
            return [DailyReport(
                id=new_id(),
                date=today,
                item="PUMP",
                part_no="P-0001",
                customer="KUBOTA",
                stage="설계",
                manager=SAMPLE_MANAGERS[0].name,
                plan="도면 검토",
                performance="1차 도면 완료",
            ).to_sheet_row()]
        if sheet_name == self.sheet_names.projects:
            return [Project(
                id=new_id(),
                no="1",
                status="progress",
                client="KUBOTA",
                affiliation="유압",
                model="PUMP",
                item="PUMP",
                part_no="P-0001",
                managers=[SAMPLE_MANAGERS[0].name],
                current_stage="검토",
                development_stages=["검토", "설계", "개발"],
                schedule=f"{today} ~ {today}",
                updated_at=today,
            ).to_sheet_row()]
        return []

    def initialize_spreadsheet(self, add_sample_data: bool = False) -> InitializeResult:
        """Create missing sheets and write header rows.

        Sample data is only added to sheets created by this call.
        """
        try:
            existing = set(self.sheets.get_sheet_names())
            created = []
            updated = []
            for sheet_name, headers in self._required_sheets().items():
                if sheet_name not in existing:
                    self.sheets.create_sheet(sheet_name)
                    created.append(sheet_name)
                    logger.info(f"Created sheet '{sheet_name}'")
                else:
                    updated.append(sheet_name)

                end_col = column_letter(len(headers) - 1)
                self.sheets.update_sheet_values(
                    f"{sheet_name}!A1:{end_col}1",
                    [headers],
                    value_input_option="RAW",
                )

            sample_added = False
            if add_sample_data:
                for sheet_name in created:
                    rows = self._sample_rows(sheet_name)
                    if rows:
                        width = len(self._required_sheets()[sheet_name])
                        self.sheets.append_sheet_values(
                            f"{sheet_name}!A:{column_letter(width - 1)}",
                            rows,
                        )
                        sample_added = True
        except Exception as e:
            logger.error(f"Spreadsheet initialization failed: {e}")
            return InitializeResult(
                success=False,
                message="스프레드시트 초기화 중 오류가 발생했습니다.",
            )

        self.cache.invalidate_tags(*ALL_TAGS)
        return InitializeResult(
            success=True,
            created_sheets=created,
            updated_headers=updated,
            sample_data_added=sample_added,
            message="스프레드시트가 성공적으로 초기화되었습니다.",
        )

    def backfill_row_ids(self) -> BackfillResult:
        """Store IDs in daily report and project rows that have none."""
        try:
            reports = self.daily_report_repository.get_fresh()
            report_count = 0
            for report in reports:
                if legacy_row_number(report.id) is not None:
                    self.daily_report_repository.write_id(report.row_number, new_id())
                    report_count += 1

            projects = self.project_repository.get_fresh()
            project_count = 0
            for project in projects:
                if legacy_row_number(project.id) is not None:
                    self.project_repository.write_id(project.row_number, new_id())
                    project_count += 1
        except Exception as e:
            logger.error(f"ID backfill failed: {e}")
            return BackfillResult(
                success=False,
                message="ID 부여 중 오류가 발생했습니다.",
            )

        self.cache.invalidate_tags(*ALL_TAGS)
        logger.info(f"Backfilled IDs: {report_count} daily reports, {project_count} projects")
        return BackfillResult(
            success=True,
            daily_reports_updated=report_count,
            projects_updated=project_count,
            message=f"업무일지 {report_count}건, 프로젝트 {project_count}건에 ID를 부여했습니다.",
        )
