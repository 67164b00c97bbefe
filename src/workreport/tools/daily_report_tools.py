"""Daily report tools for workreport."""

import logging
from datetime import date as date_type
from typing import Optional, Union

from ..cache import DAILY_REPORTS_TAG, TaggedCache
from ..export import export_filename, reports_to_csv
from ..models import (
    DailyReport,
    DailyReportResult,
    ExportDailyReportsResult,
    ListDailyReportsResult,
    SearchDailyReportsResult,
    SearchOptionsResult,
    new_id,
    normalize_date,
    parse_date,
)
from ..query import (
    DailyReportSearchParams,
    filter_and_sort_reports,
    page_count,
    paginate,
)
from ..repositories import DailyReportRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "필수 항목이 누락되었습니다 (날짜, ITEM, 고객사, 단계, 담당자)."


def join_managers(managers: Union[str, list[str], None]) -> str:
    """Join a manager list into the single manager cell."""
    if managers is None:
        return ""
    if isinstance(managers, str):
        return managers.strip()
    return ",".join(m.strip() for m in managers if m and m.strip())


class DailyReportTools:
    """Tools for creating, searching and editing daily reports."""

    def __init__(
        self,
        repository: DailyReportRepository,
        cache: TaggedCache,
    ):
        """Initialize daily report tools.

        Args:
            repository: Daily report sheet repository
            cache: Shared read cache, invalidated after writes
        """
        self.repository = repository
        self.cache = cache

    def _invalidate(self) -> None:
        self.cache.invalidate_tags(DAILY_REPORTS_TAG)

    def create_daily_report(
        self,
        date: str,
        item: str,
        customer: str,
        stage: str,
        managers: Union[str, list[str]],
        part_no: str = "",
        plan: str = "",
        performance: str = "",
        note: str = "",
    ) -> DailyReportResult:
        """Create a daily report.

        Args:
            date: Report date (YYYY-MM-DD)
            item: Item name
            customer: Customer name
            stage: Work stage
            managers: Manager names, joined with "," into one cell
            part_no: Part number
            plan: Planned work
            performance: Work done
            note: Free-form note

        Returns:
            DailyReportResult with the new report ID
        """
        manager = join_managers(managers)
        if not all(v and str(v).strip() for v in (date, item, customer, stage, manager)):
            return DailyReportResult(
                success=False,
                validation_errors=[REQUIRED_FIELDS_MESSAGE],
                message=REQUIRED_FIELDS_MESSAGE,
            )

        normalized = normalize_date(date)
        if parse_date(normalized) is None:
            error = f"날짜 형식이 올바르지 않습니다: {date}"
            return DailyReportResult(success=False, validation_errors=[error], message=error)

        report = DailyReport(
            id=new_id(),
            date=normalized,
            item=item.strip(),
            part_no=(part_no or "").strip(),
            customer=customer.strip(),
            stage=stage.strip(),
            manager=manager,
            plan=plan or "",
            performance=performance or "",
            note=note or "",
        )

        try:
            self.repository.add(report)
        except Exception as e:
            logger.error(f"Failed to create daily report: {e}")
            return DailyReportResult(
                success=False,
                message="업무일지를 저장하는 중 오류가 발생했습니다.",
            )

        self._invalidate()
        logger.info(f"Created daily report {report.id} ({report.date}, {report.item})")
        return DailyReportResult(
            success=True,
            report_id=report.id,
            message="업무일지가 저장되었습니다.",
        )

    def list_daily_reports(self, date: Optional[str] = None) -> ListDailyReportsResult:
        """List the reports of one day (today if not given)."""
        day = normalize_date(date) if date else date_type.today().isoformat()
        if parse_date(day) is None:
            error = f"날짜 형식이 올바르지 않습니다: {date}"
            return ListDailyReportsResult(success=False, validation_errors=[error], message=error)

        try:
            reports = self.repository.get_by_date(day)
        except Exception as e:
            logger.error(f"Failed to list daily reports: {e}")
            return ListDailyReportsResult(
                success=False,
                message="업무일지를 불러오는 중 오류가 발생했습니다.",
            )

        return ListDailyReportsResult(
            success=True,
            reports=reports,
            message=f"{day} 업무일지 {len(reports)}건",
        )

    def _matching_reports(self, params: DailyReportSearchParams) -> list[DailyReport]:
        return filter_and_sort_reports(self.repository.get_all(), params)

    def search_daily_reports(self, params: DailyReportSearchParams) -> SearchDailyReportsResult:
        """Search daily reports and return one page.

        Returns:
            SearchDailyReportsResult with total = number of matches
        """
        errors = params.validate()
        if errors:
            return SearchDailyReportsResult(
                success=False,
                page=params.page,
                page_size=params.page_size,
                validation_errors=errors,
                message=errors[0],
            )

        try:
            matches = self._matching_reports(params)
        except Exception as e:
            logger.error(f"Failed to search daily reports: {e}")
            return SearchDailyReportsResult(
                success=False,
                page=params.page,
                page_size=params.page_size,
                message="업무일지 검색 중 오류가 발생했습니다.",
            )

        total = len(matches)
        return SearchDailyReportsResult(
            success=True,
            reports=paginate(matches, params.page, params.page_size),
            total=total,
            page=params.page,
            page_size=params.page_size,
            page_count=page_count(total, params.page_size),
            message=f"{total}건의 업무일지가 검색되었습니다.",
        )

    def search_all_daily_reports(self, params: DailyReportSearchParams) -> SearchDailyReportsResult:
        """Search daily reports without pagination."""
        errors = params.validate()
        if errors:
            return SearchDailyReportsResult(
                success=False, validation_errors=errors, message=errors[0]
            )

        try:
            matches = self._matching_reports(params)
        except Exception as e:
            logger.error(f"Failed to search daily reports: {e}")
            return SearchDailyReportsResult(
                success=False,
                message="업무일지 검색 중 오류가 발생했습니다.",
            )

        total = len(matches)
        return SearchDailyReportsResult(
            success=True,
            reports=matches,
            total=total,
            page=1,
            page_size=total,
            page_count=1 if total else 0,
            message=f"{total}건의 업무일지가 검색되었습니다.",
        )

    def export_daily_reports_csv(
        self,
        params: DailyReportSearchParams,
        today: Optional[date_type] = None,
    ) -> ExportDailyReportsResult:
        """Render every matching report (not just one page) as CSV."""
        result = self.search_all_daily_reports(params)
        if not result.success:
            return ExportDailyReportsResult(
                success=False,
                validation_errors=result.validation_errors,
                message=result.message,
            )

        logger.info(f"Exporting {result.total} daily reports to CSV")
        return ExportDailyReportsResult(
            success=True,
            content=reports_to_csv(result.reports),
            filename=export_filename(today),
            row_count=result.total,
            message=f"{result.total}건의 업무일지를 내보냈습니다.",
        )

    def get_search_options(self) -> SearchOptionsResult:
        """Distinct managers, items, part numbers and stages, sorted."""
        try:
            reports = self.repository.get_all()
        except Exception as e:
            logger.error(f"Failed to load search options: {e}")
            return SearchOptionsResult(
                success=False,
                message="검색 옵션을 가져오는 중 오류가 발생했습니다.",
            )

        def distinct(values) -> list[str]:
            return sorted({v.strip() for v in values if v and v.strip()})

        return SearchOptionsResult(
            success=True,
            managers=distinct(r.manager for r in reports),
            items=distinct(r.item for r in reports),
            part_nos=distinct(r.part_no for r in reports),
            stages=distinct(r.stage for r in reports),
        )

    def update_daily_report(
        self,
        report_id: str,
        date: Optional[str] = None,
        plan: Optional[str] = None,
        performance: Optional[str] = None,
        note: Optional[str] = None,
    ) -> DailyReportResult:
        """Update date, plan, performance and note of a report.

        Fields left as None keep their current value.
        """
        if not report_id:
            error = "업무일지 ID가 필요합니다."
            return DailyReportResult(success=False, validation_errors=[error], message=error)

        normalized = None
        if date is not None:
            normalized = normalize_date(date)
            if parse_date(normalized) is None:
                error = f"날짜 형식이 올바르지 않습니다: {date}"
                return DailyReportResult(
                    success=False, report_id=report_id, validation_errors=[error], message=error
                )

        try:
            report = self.repository.find_for_write(report_id)
            if report is None:
                return DailyReportResult(
                    success=False,
                    report_id=report_id,
                    message="업데이트할 업무일지를 찾을 수 없습니다.",
                )

            if normalized is not None:
                report.date = normalized
            if plan is not None:
                report.plan = plan
            if performance is not None:
                report.performance = performance
            if note is not None:
                report.note = note

            self.repository.update(report)
        except Exception as e:
            logger.error(f"Failed to update daily report {report_id}: {e}")
            return DailyReportResult(
                success=False,
                report_id=report_id,
                message="업무일지 업데이트 중 오류가 발생했습니다.",
            )

        self._invalidate()
        logger.info(f"Updated daily report {report_id} (row {report.row_number})")
        return DailyReportResult(
            success=True,
            report_id=report_id,
            message="업무일지가 수정되었습니다.",
        )

    def delete_daily_report(self, report_id: str) -> DailyReportResult:
        """Delete a report."""
        if not report_id:
            error = "업무일지 ID가 필요합니다."
            return DailyReportResult(success=False, validation_errors=[error], message=error)

        try:
            report = self.repository.find_for_write(report_id)
            if report is None:
                return DailyReportResult(
                    success=False,
                    report_id=report_id,
                    message="삭제할 업무일지를 찾을 수 없습니다.",
                )
            removed = self.repository.delete(report)
        except Exception as e:
            logger.error(f"Failed to delete daily report {report_id}: {e}")
            return DailyReportResult(
                success=False,
                report_id=report_id,
                message="업무일지 삭제 중 오류가 발생했습니다.",
            )

        self._invalidate()
        logger.info(f"Deleted daily report {report_id} (row removed: {removed})")
        return DailyReportResult(
            success=True,
            report_id=report_id,
            message="업무일지가 삭제되었습니다.",
        )
