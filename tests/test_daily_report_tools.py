"""Tests for DailyReportTools."""

from datetime import date

import pytest

from tests.mocks import DAILY, report_row

from workreport.export import BOM
from workreport.query import DailyReportSearchParams


@pytest.fixture
def seeded(sheets):
    """Daily report sheet with a handful of rows."""
    sheets.seed(DAILY, [
        report_row("2024-01-10", "PUMP", stage="설계", manager="김철수", part_no="P-1", row_id="id-1"),
        report_row("2024-01-15", "CYLINDER", stage="개발", manager="이영희", part_no="C-1", row_id="id-2"),
        report_row("2024-01-31", "ETB", stage="검토", manager="박민수", part_no="E-1", row_id="id-3"),
        report_row("2024-02-01", "PUMP", stage="승인", manager="김철수,이영희", part_no="P-1", row_id="id-4"),
    ])
    return sheets


class TestCreateDailyReport:
    """Tests for create_daily_report method."""

    def test_create_and_list(self, daily_report_tools, sheets):
        """A created report is listed for its day with every field intact."""
        result = daily_report_tools.create_daily_report(
            date="2024-03-05",
            item="PUMP",
            part_no="P-0001",
            customer="KUBOTA",
            stage="설계",
            managers=["김철수", "이영희"],
            plan="도면 검토",
            performance="1차 완료",
            note="메모",
        )

        assert result.success is True
        assert result.report_id
        assert "저장" in result.message

        listed = daily_report_tools.list_daily_reports("2024-03-05")
        assert listed.success is True
        assert len(listed.reports) == 1
        report = listed.reports[0]
        assert report.id == result.report_id
        assert report.item == "PUMP"
        assert report.part_no == "P-0001"
        assert report.customer == "KUBOTA"
        assert report.stage == "설계"
        assert report.manager == "김철수,이영희"
        assert report.plan == "도면 검토"
        assert report.performance == "1차 완료"
        assert report.note == "메모"

        # ID lands in column J
        assert sheets.rows(DAILY)[1][9] == result.report_id

    def test_create_normalizes_date(self, daily_report_tools):
        """Dotted and slashed dates are stored as YYYY-MM-DD."""
        result = daily_report_tools.create_daily_report(
            date="2024.03.05", item="PUMP", customer="KUBOTA", stage="설계", managers="김철수"
        )
        assert result.success is True

        listed = daily_report_tools.list_daily_reports("2024/03/05")
        assert [r.date for r in listed.reports] == ["2024-03-05"]

    @pytest.mark.parametrize("missing", ["date", "item", "customer", "stage", "managers"])
    def test_create_missing_required(self, daily_report_tools, sheets, missing):
        """Each required field is checked before anything is written."""
        fields = {
            "date": "2024-03-05",
            "item": "PUMP",
            "customer": "KUBOTA",
            "stage": "설계",
            "managers": ["김철수"],
        }
        fields[missing] = [] if missing == "managers" else "  "

        result = daily_report_tools.create_daily_report(**fields)

        assert result.success is False
        assert result.validation_errors
        assert "필수 항목" in result.message
        assert sheets.count_calls("append_sheet_values") == 0

    def test_create_invalid_date(self, daily_report_tools):
        """Unparseable dates are rejected."""
        result = daily_report_tools.create_daily_report(
            date="내일", item="PUMP", customer="KUBOTA", stage="설계", managers="김철수"
        )
        assert result.success is False
        assert "날짜 형식" in result.validation_errors[0]

    def test_create_backend_failure(self, daily_report_tools, sheets):
        """A failed append is reported without validation errors."""
        sheets.fail_methods.add("append_sheet_values")

        result = daily_report_tools.create_daily_report(
            date="2024-03-05", item="PUMP", customer="KUBOTA", stage="설계", managers="김철수"
        )

        assert result.success is False
        assert result.validation_errors == []
        assert "오류" in result.message


class TestListDailyReports:
    """Tests for list_daily_reports method."""

    def test_list_by_date(self, daily_report_tools, seeded):
        result = daily_report_tools.list_daily_reports("2024-01-15")
        assert [r.id for r in result.reports] == ["id-2"]

    def test_list_defaults_to_today(self, daily_report_tools, sheets):
        today = date.today().isoformat()
        sheets.seed(DAILY, [report_row(today, "PUMP", row_id="today-1")])

        result = daily_report_tools.list_daily_reports()
        assert [r.id for r in result.reports] == ["today-1"]

    def test_list_is_cached_until_write(self, daily_report_tools, seeded):
        """Reads are served from the cache until a write invalidates it."""
        daily_report_tools.list_daily_reports("2024-01-15")
        daily_report_tools.list_daily_reports("2024-01-10")
        assert seeded.count_calls("get_sheet_values") == 1

        daily_report_tools.create_daily_report(
            date="2024-01-15", item="PUMP", customer="KUBOTA", stage="설계", managers="김철수"
        )
        result = daily_report_tools.list_daily_reports("2024-01-15")
        assert len(result.reports) == 2


class TestSearchDailyReports:
    """Tests for search_daily_reports method."""

    def test_query_terms_are_or_combined(self, daily_report_tools, seeded):
        """Any term matching item, stage or manager is enough."""
        params = DailyReportSearchParams(query="cylinder; 검토")
        result = daily_report_tools.search_daily_reports(params)

        assert result.success is True
        assert sorted(r.id for r in result.reports) == ["id-2", "id-3"]
        assert result.total == 2

    def test_item_term_or_manager_term(self, daily_report_tools, seeded):
        """One term matching only an item and one matching only a manager."""
        result = daily_report_tools.search_daily_reports(DailyReportSearchParams(query="cylinder;박민수"))
        assert sorted(r.id for r in result.reports) == ["id-2", "id-3"]

    def test_query_matches_manager_substring(self, daily_report_tools, seeded):
        result = daily_report_tools.search_daily_reports(DailyReportSearchParams(query="이영희"))
        assert sorted(r.id for r in result.reports) == ["id-2", "id-4"]

    def test_date_range_is_inclusive(self, daily_report_tools, seeded):
        """January covers 2024-01-15 and both bounds, not 2024-02-01."""
        params = DailyReportSearchParams(start_date="2024-01-01", end_date="2024-01-31")
        result = daily_report_tools.search_daily_reports(params)

        dates = [r.date for r in result.reports]
        assert "2024-01-15" in dates
        assert "2024-01-31" in dates
        assert "2024-02-01" not in dates
        assert "2024-01-10" in dates

    def test_allow_list_filters(self, daily_report_tools, seeded):
        """Allow-lists use exact matches and are combined with AND."""
        params = DailyReportSearchParams(items=["PUMP"], part_nos=["P-1"], managers=["김철수"])
        result = daily_report_tools.search_daily_reports(params)
        assert [r.id for r in result.reports] == ["id-1"]

    def test_default_sort_is_date_descending(self, daily_report_tools, sheets):
        """Newest first; reports on the same day keep sheet order."""
        sheets.seed(DAILY, [
            report_row("2024-01-10", "A", row_id="a"),
            report_row("2024-01-12", "B", row_id="b"),
            report_row("2024-01-12", "C", row_id="c"),
            report_row("2024-01-11", "D", row_id="d"),
            report_row("2024-01-12", "E", row_id="e"),
        ])

        result = daily_report_tools.search_daily_reports(DailyReportSearchParams())
        assert [r.id for r in result.reports] == ["b", "c", "e", "d", "a"]

    def test_sort_by_item_ascending(self, daily_report_tools, seeded):
        params = DailyReportSearchParams(sort_by="item", sort_direction="asc")
        result = daily_report_tools.search_daily_reports(params)
        assert [r.item for r in result.reports] == ["CYLINDER", "ETB", "PUMP", "PUMP"]

    def test_unparseable_dates_sort_last(self, daily_report_tools, sheets):
        sheets.seed(DAILY, [
            report_row("미정", "A", row_id="x"),
            report_row("2024-01-10", "B", row_id="y"),
        ])
        for direction in ("asc", "desc"):
            params = DailyReportSearchParams(sort_direction=direction)
            result = daily_report_tools.search_daily_reports(params)
            assert [r.id for r in result.reports] == ["y", "x"]

    def test_pagination(self, daily_report_tools, sheets):
        """Pages partition the full result in order."""
        sheets.seed(DAILY, [
            report_row(f"2024-01-{day:02d}", "PUMP", row_id=f"r{day}")
            for day in range(1, 26)
        ])

        everything = daily_report_tools.search_all_daily_reports(DailyReportSearchParams())
        pages = []
        for page in (1, 2, 3):
            result = daily_report_tools.search_daily_reports(
                DailyReportSearchParams(page=page, page_size=10)
            )
            assert result.total == 25
            assert result.page_count == 3
            pages.append(result.reports)

        assert [len(p) for p in pages] == [10, 10, 5]
        assert [r.id for p in pages for r in p] == [r.id for r in everything.reports]

    def test_page_past_the_end_is_empty(self, daily_report_tools, seeded):
        result = daily_report_tools.search_daily_reports(DailyReportSearchParams(page=9))
        assert result.success is True
        assert result.reports == []
        assert result.total == 4

    @pytest.mark.parametrize("params", [
        DailyReportSearchParams(page=0),
        DailyReportSearchParams(page_size=0),
        DailyReportSearchParams(page_size=5000),
        DailyReportSearchParams(sort_direction="up"),
        DailyReportSearchParams(sort_by="unknown"),
        DailyReportSearchParams(start_date="2024-13-01"),
    ])
    def test_invalid_params(self, daily_report_tools, seeded, params):
        result = daily_report_tools.search_daily_reports(params)
        assert result.success is False
        assert result.validation_errors

    def test_backend_failure(self, daily_report_tools, sheets):
        sheets.fail_methods.add("get_sheet_values")

        result = daily_report_tools.search_daily_reports(DailyReportSearchParams())

        assert result.success is False
        assert result.validation_errors == []


class TestExportDailyReports:
    """Tests for export_daily_reports_csv method."""

    def test_export_includes_every_match(self, daily_report_tools, sheets):
        """Export ignores pagination and writes one line per match."""
        sheets.seed(DAILY, [
            report_row(f"2024-01-{day:02d}", "PUMP", row_id=f"r{day}")
            for day in range(1, 16)
        ])

        params = DailyReportSearchParams(page=1, page_size=10)
        result = daily_report_tools.export_daily_reports_csv(params, today=date(2024, 1, 20))

        assert result.success is True
        assert result.row_count == 15
        assert result.filename == "업무일지_검색결과_20240120.csv"
        assert result.content.startswith(BOM)
        lines = result.content[len(BOM):].splitlines()
        assert len(lines) == 16
        assert lines[0] == "날짜,ITEM,PART NO,고객사,단계,담당자,계획,실적,비고"
        assert lines[1].startswith('"2024-01-15","PUMP"')

    def test_export_uses_search_filters(self, daily_report_tools, seeded):
        result = daily_report_tools.export_daily_reports_csv(DailyReportSearchParams(query="ETB"))
        assert result.row_count == 1
        assert '"ETB"' in result.content

    def test_export_invalid_params(self, daily_report_tools, seeded):
        result = daily_report_tools.export_daily_reports_csv(
            DailyReportSearchParams(sort_direction="sideways")
        )
        assert result.success is False
        assert result.validation_errors
        assert result.content == ""


class TestSearchOptions:
    """Tests for get_search_options method."""

    def test_distinct_sorted_values(self, daily_report_tools, seeded):
        result = daily_report_tools.get_search_options()

        assert result.success is True
        assert result.items == ["CYLINDER", "ETB", "PUMP"]
        assert result.part_nos == ["C-1", "E-1", "P-1"]
        assert result.stages == sorted(["설계", "개발", "검토", "승인"])
        assert "김철수,이영희" in result.managers


class TestUpdateDailyReport:
    """Tests for update_daily_report method."""

    def test_update_fields(self, daily_report_tools, seeded):
        result = daily_report_tools.update_daily_report(
            "id-2", date="2024/01/16", plan="새 계획", performance="완료"
        )

        assert result.success is True
        row = seeded.rows(DAILY)[2]
        assert row[0] == "2024-01-16"
        assert row[1] == "CYLINDER"
        assert row[6] == "새 계획"
        assert row[7] == "완료"
        assert row[9] == "id-2"

    def test_update_keeps_omitted_fields(self, daily_report_tools, sheets):
        sheets.seed(DAILY, [
            report_row("2024-01-10", "PUMP", plan="계획", performance="실적", note="비고", row_id="k"),
        ])

        result = daily_report_tools.update_daily_report("k", note="새 비고")

        assert result.success is True
        row = sheets.rows(DAILY)[1]
        assert row[0] == "2024-01-10"
        assert row[6:9] == ["계획", "실적", "새 비고"]

    def test_update_writes_date_format(self, daily_report_tools, seeded):
        """The date cell is written with a DATE number format."""
        daily_report_tools.update_daily_report("id-1", plan="x")

        assert {"numberFormat": {"type": "DATE", "pattern": "yyyy-mm-dd"}} in seeded.formats

    def test_update_visible_in_next_read(self, daily_report_tools, seeded):
        daily_report_tools.list_daily_reports("2024-01-10")
        daily_report_tools.update_daily_report("id-1", plan="변경됨")

        listed = daily_report_tools.list_daily_reports("2024-01-10")
        assert listed.reports[0].plan == "변경됨"

    def test_update_legacy_row_key(self, daily_report_tools, sheets):
        """Rows without a stored ID are addressed by their row key."""
        sheets.seed(DAILY, [
            report_row("2024-01-10", "PUMP"),
            report_row("2024-01-11", "ETB"),
        ])

        result = daily_report_tools.update_daily_report("row-3", plan="레거시")

        assert result.success is True
        assert sheets.rows(DAILY)[2][6] == "레거시"
        assert "레거시" not in sheets.rows(DAILY)[1]

    def test_update_not_found(self, daily_report_tools, seeded):
        result = daily_report_tools.update_daily_report("missing", plan="x")

        assert result.success is False
        assert result.validation_errors == []
        assert "찾을 수 없습니다" in result.message

    def test_update_invalid_date(self, daily_report_tools, seeded):
        result = daily_report_tools.update_daily_report("id-1", date="2024-02-30")
        assert result.success is False
        assert result.validation_errors

    def test_update_requires_id(self, daily_report_tools):
        result = daily_report_tools.update_daily_report("")
        assert result.success is False
        assert result.validation_errors


class TestDeleteDailyReport:
    """Tests for delete_daily_report method."""

    def test_delete_removes_row(self, daily_report_tools, seeded):
        result = daily_report_tools.delete_daily_report("id-2")

        assert result.success is True
        ids = [row[9] for row in seeded.rows(DAILY)[1:]]
        assert ids == ["id-1", "id-3", "id-4"]

        search = daily_report_tools.search_all_daily_reports(DailyReportSearchParams())
        assert "id-2" not in [r.id for r in search.reports]

    def test_delete_legacy_row_key(self, daily_report_tools, sheets):
        sheets.seed(DAILY, [
            report_row("2024-01-10", "PUMP"),
            report_row("2024-01-11", "ETB"),
        ])

        result = daily_report_tools.delete_daily_report("row-2")

        assert result.success is True
        assert [row[1] for row in sheets.rows(DAILY)[1:]] == ["ETB"]

    def test_delete_when_row_removal_fails(self, daily_report_tools, seeded):
        """A blanked row that cannot be removed still counts as deleted."""
        seeded.fail_methods.add("batch_update")

        result = daily_report_tools.delete_daily_report("id-1")

        assert result.success is True
        assert seeded.rows(DAILY)[1] == []
        search = daily_report_tools.search_all_daily_reports(DailyReportSearchParams())
        assert [r.id for r in search.reports] == ["id-4", "id-3", "id-2"]

    def test_delete_when_row_removal_times_out(self, daily_report_tools, seeded, monkeypatch):
        """Transport errors from the row removal are tolerated too."""
        def timeout(*args, **kwargs):
            raise TimeoutError("read timed out")

        monkeypatch.setattr(seeded, "delete_rows", timeout)

        result = daily_report_tools.delete_daily_report("id-1")

        assert result.success is True
        assert seeded.rows(DAILY)[1] == []

    def test_delete_not_found(self, daily_report_tools, seeded):
        result = daily_report_tools.delete_daily_report("nope")

        assert result.success is False
        assert "삭제할 업무일지를 찾을 수 없습니다" in result.message
        assert seeded.count_calls("update_sheet_values") == 0
