"""Tests for ProjectTools."""

import json

import pytest

from tests.mocks import HISTORY, PROJECTS, project_row

from workreport.query import ProjectFilterParams


@pytest.fixture
def seeded(sheets):
    """Project sheet with projects in every status."""
    sheets.seed(PROJECTS, [
        project_row("1", "진행", client="KUBOTA", item="PUMP", part_no="P-1",
                    managers='["김철수"]', schedule="2024-01-01 ~ 2024-06-30", row_id="p1",
                    current_stage="설계", affiliation="유압"),
        project_row("2", "보류", client="YAMADA", item="ETB", part_no="E-1",
                    managers="이영희, 박민수", schedule="2024-03-01 ~ 2024-04-30", row_id="p2"),
        project_row("3", "완료", client="DORMAN", item="CYLINDER", part_no="C-1",
                    row_id="p3", affiliation="전장"),
        project_row("4", "진행", client="kubota", item="cab tilt", part_no="T-1",
                    schedule="2024-02-01 ~ 2024-02-28", row_id="p4",
                    progress="시작", issues="부품 지연", notes="비고", additional_plan="계획"),
    ])
    return sheets


def history_rows(sheets):
    return sheets.rows(HISTORY)[1:]


class TestCreateProject:
    """Tests for create_project method."""

    def test_create_project(self, project_tools, sheets):
        result = project_tools.create_project(
            customer="KUBOTA",
            item="PUMP",
            affiliation="유압",
            model="PUMP",
            part_no="P-0001",
            managers=["김철수", "이영희"],
            development_stages=["검토", "설계"],
            schedule_start="2024-01-01",
            schedule_end="2024/06/30",
            selling_price=1500.0,
            material_cost=900,
            material_cost_ratio=0.6,
        )

        assert result.success is True
        assert result.project_id
        assert result.project_no == "1"
        assert "NO: 1" in result.message

        row = sheets.rows(PROJECTS)[1]
        assert row[0] == "1"
        assert row[1] == "진행"
        assert row[2] == "KUBOTA"
        assert json.loads(row[7]) == ["김철수", "이영희"]
        assert row[8] == "검토"
        assert json.loads(row[13]) == ["검토", "설계"]
        assert row[14] == "2024-01-01 ~ 2024-06-30"
        assert row[15:18] == ["1500", "900", "0.6"]
        assert row[19] == result.project_id

    def test_create_round_trip(self, project_tools):
        result = project_tools.create_project(
            customer="Acme", item="Widget", managers=["김철수"], status="hold"
        )

        fetched = project_tools.get_project(result.project_id)
        assert fetched.success is True
        project = fetched.project
        assert project.client == "Acme"
        assert project.item == "Widget"
        assert project.status == "hold"
        assert project.managers == ["김철수"]

    def test_next_no_uses_highest_number(self, project_tools, sheets):
        """Non-numeric NO cells are ignored."""
        sheets.seed(PROJECTS, [
            project_row("3", row_id="a"),
            project_row("7", row_id="b"),
            project_row("abc", row_id="c"),
        ])

        result = project_tools.create_project(customer="KUBOTA", item="PUMP")
        assert result.project_no == "8"

    def test_create_missing_customer_and_item(self, project_tools, sheets):
        result = project_tools.create_project(customer=" ", item="")

        assert result.success is False
        assert "고객사를 입력해주세요." in result.validation_errors
        assert "ITEM을 입력해주세요." in result.validation_errors
        assert sheets.count_calls("append_sheet_values") == 0

    def test_create_invalid_status(self, project_tools):
        result = project_tools.create_project(customer="KUBOTA", item="PUMP", status="done")
        assert result.success is False
        assert "진행여부" in result.validation_errors[0]

    def test_create_invalid_schedule(self, project_tools):
        result = project_tools.create_project(
            customer="KUBOTA", item="PUMP", schedule_start="2024-01-01", schedule_end="언젠가"
        )
        assert result.success is False
        assert "대일정" in result.validation_errors[0]

    def test_create_backend_failure(self, project_tools, sheets):
        sheets.fail_methods.add("append_sheet_values")

        result = project_tools.create_project(customer="KUBOTA", item="PUMP")

        assert result.success is False
        assert result.validation_errors == []


class TestListProjects:
    """Tests for list_projects method."""

    def test_status_filter(self, project_tools):
        """A new in-progress project shows up for progress, not for completed."""
        created = project_tools.create_project(status="progress", customer="Acme", item="Widget")

        progress = project_tools.list_projects(ProjectFilterParams(status="progress"))
        assert created.project_id in [p.id for p in progress.projects]

        completed = project_tools.list_projects(ProjectFilterParams(status="completed"))
        assert created.project_id not in [p.id for p in completed.projects]

    def test_status_filter_accepts_label(self, project_tools, seeded):
        by_code = project_tools.list_projects(ProjectFilterParams(status="hold"))
        by_label = project_tools.list_projects(ProjectFilterParams(status="보류"))
        assert [p.id for p in by_code.projects] == ["p2"]
        assert [p.id for p in by_label.projects] == ["p2"]

    def test_default_sort_is_no_descending(self, project_tools, seeded):
        result = project_tools.list_projects()
        assert [p.no for p in result.projects] == ["4", "3", "2", "1"]
        assert result.total == 4

    def test_text_filters_are_case_insensitive(self, project_tools, seeded):
        result = project_tools.list_projects(ProjectFilterParams(client="KUBOTA"))
        assert sorted(p.id for p in result.projects) == ["p1", "p4"]

        result = project_tools.list_projects(ProjectFilterParams(item="Tilt"))
        assert [p.id for p in result.projects] == ["p4"]

    def test_manager_filter_reads_both_list_formats(self, project_tools, seeded):
        """JSON and comma-joined manager cells are both searchable."""
        result = project_tools.list_projects(ProjectFilterParams(manager="박민수"))
        assert [p.id for p in result.projects] == ["p2"]

        result = project_tools.list_projects(ProjectFilterParams(manager="김철수"))
        assert [p.id for p in result.projects] == ["p1"]

    def test_exact_match_filters(self, project_tools, seeded):
        result = project_tools.list_projects(ProjectFilterParams(affiliation="전장"))
        assert [p.id for p in result.projects] == ["p3"]

        result = project_tools.list_projects(ProjectFilterParams(current_stage="설계"))
        assert [p.id for p in result.projects] == ["p1"]

    def test_schedule_range_filter(self, project_tools, seeded):
        """Projects without a schedule never match a date bound."""
        params = ProjectFilterParams(start_date="2024-02-01", end_date="2024-05-31")
        result = project_tools.list_projects(params)
        assert sorted(p.id for p in result.projects) == ["p2", "p4"]

    def test_sort_by_start_date_missing_last(self, project_tools, seeded):
        asc = project_tools.list_projects(ProjectFilterParams(sort="startDate-asc"))
        assert [p.id for p in asc.projects] == ["p1", "p4", "p2", "p3"]

        desc = project_tools.list_projects(ProjectFilterParams(sort="startDate-desc"))
        assert [p.id for p in desc.projects] == ["p2", "p4", "p1", "p3"]

    def test_sort_by_client(self, project_tools, seeded):
        result = project_tools.list_projects(ProjectFilterParams(sort="client-asc"))
        assert [p.client for p in result.projects] == ["DORMAN", "KUBOTA", "kubota", "YAMADA"]

    def test_pagination(self, project_tools, seeded):
        result = project_tools.list_projects(ProjectFilterParams(page=2, page_size=3))
        assert [p.no for p in result.projects] == ["1"]
        assert result.page_count == 2
        assert result.total == 4

    @pytest.mark.parametrize("params", [
        ProjectFilterParams(sort="price-asc"),
        ProjectFilterParams(sort="no-sideways"),
        ProjectFilterParams(page=0),
        ProjectFilterParams(page_size=0),
    ])
    def test_invalid_params(self, project_tools, seeded, params):
        result = project_tools.list_projects(params)
        assert result.success is False
        assert result.validation_errors

    def test_list_active_projects(self, project_tools, seeded):
        result = project_tools.list_active_projects()
        assert [p.id for p in result.projects] == ["p1", "p4"]


class TestGetProject:
    """Tests for get_project method."""

    def test_get_project(self, project_tools, seeded):
        result = project_tools.get_project("p2")
        assert result.success is True
        assert result.project.no == "2"
        assert result.project.managers == ["이영희", "박민수"]
        assert result.project.schedule_start == "2024-03-01"

    def test_get_project_legacy_key(self, project_tools, sheets):
        sheets.seed(PROJECTS, [project_row("1", item="OLD")])

        result = project_tools.get_project("row-2")
        assert result.success is True
        assert result.project.item == "OLD"

    def test_get_project_not_found(self, project_tools, seeded):
        result = project_tools.get_project("missing")
        assert result.success is False
        assert result.project is None
        assert "찾을 수 없습니다" in result.message


class TestUpdateProject:
    """Tests for update_project method."""

    def test_update_tracked_field_records_history(self, project_tools, seeded):
        result = project_tools.update_project("p4", progress="시제품 제작")

        assert result.success is True
        assert result.history_recorded is True
        assert result.project_no == "4"

        row = seeded.rows(PROJECTS)[4]
        assert row[9] == "시제품 제작"
        assert row[10] == "부품 지연"

        history = history_rows(seeded)
        assert len(history) == 1
        entry = history[0]
        assert entry[2] == "cab tilt"
        assert entry[3] == "T-1"
        assert entry[6] == "시제품 제작"
        assert entry[12] == "시스템"

    def test_update_untracked_field_skips_history(self, project_tools, seeded):
        result = project_tools.update_project("p4", status="hold", model="NEW")

        assert result.success is True
        assert result.history_recorded is False
        assert history_rows(seeded) == []
        row = seeded.rows(PROJECTS)[4]
        assert row[1] == "보류"
        assert row[4] == "NEW"

    def test_update_same_values_skips_history(self, project_tools, seeded):
        result = project_tools.update_project(
            "p4", progress="시작", issues="부품 지연", notes="비고", additional_plan="계획"
        )
        assert result.history_recorded is False

    def test_force_history(self, project_tools, seeded):
        result = project_tools.update_project("p4", force_history=True)

        assert result.history_recorded is True
        assert len(history_rows(seeded)) == 1

    def test_issue_resolved_blanks_project_issue(self, project_tools, seeded):
        """The project row loses the issue; history keeps the original text."""
        result = project_tools.update_project(
            "p4",
            issue_resolved=True,
            issue_resolution_details="대체 부품 확보",
        )

        assert result.success is True
        assert result.history_recorded is True

        row = seeded.rows(PROJECTS)[4]
        assert row[10] == ""

        entry = history_rows(seeded)[0]
        assert entry[9] == "부품 지연"
        assert entry[10] == "O"
        assert entry[11] == "대체 부품 확보"

    def test_issue_resolved_with_submitted_issue(self, project_tools, seeded):
        result = project_tools.update_project("p4", issues="새 이슈", issue_resolved=True)

        assert result.success is True
        assert seeded.rows(PROJECTS)[4][10] == ""
        assert history_rows(seeded)[0][9] == "새 이슈"

    def test_unchanged_resolution_details_skip_history(self, project_tools, seeded):
        """Resubmitting the recorded resolution text is not a change."""
        project_tools.update_project("p4", issue_resolved=True, issue_resolution_details="대체 부품 확보")

        result = project_tools.update_project("p4", issue_resolution_details="대체 부품 확보")

        assert result.success is True
        assert result.history_recorded is False
        assert len(history_rows(seeded)) == 1

        result = project_tools.update_project("p4", issue_resolution_details="부품 재입고")

        assert result.history_recorded is True
        assert history_rows(seeded)[1][11] == "부품 재입고"

    def test_update_keeps_no_and_omitted_fields(self, project_tools, seeded):
        project_tools.update_project("p1", notes="메모")

        row = seeded.rows(PROJECTS)[1]
        assert row[0] == "1"
        assert row[2] == "KUBOTA"
        assert json.loads(row[7]) == ["김철수"]
        assert row[14] == "2024-01-01 ~ 2024-06-30"
        assert row[19] == "p1"
        assert row[18]  # updated timestamp

    def test_update_rewrites_managers_as_json(self, project_tools, seeded):
        project_tools.update_project("p2", managers=["최지훈", " "])
        assert json.loads(seeded.rows(PROJECTS)[2][7]) == ["최지훈"]

    def test_update_schedule_end_only(self, project_tools, seeded):
        project_tools.update_project("p1", schedule_end="2024-12-31")
        assert seeded.rows(PROJECTS)[1][14] == "2024-01-01 ~ 2024-12-31"

    def test_update_invalid_schedule(self, project_tools, seeded):
        result = project_tools.update_project("p1", schedule_start="2024-99-01")

        assert result.success is False
        assert result.validation_errors
        assert seeded.count_calls("update_sheet_values") == 0

    def test_update_tolerates_legacy_schedule(self, project_tools, sheets):
        """An unparseable stored schedule does not block other edits."""
        sheets.seed(PROJECTS, [project_row("1", schedule="1분기 ~ 2분기", row_id="old")])

        result = project_tools.update_project("old", notes="확인")
        assert result.success is True

    def test_update_blank_customer_rejected(self, project_tools, seeded):
        result = project_tools.update_project("p1", customer="")
        assert result.success is False
        assert "고객사를 입력해주세요." in result.validation_errors

    def test_update_not_found(self, project_tools, seeded):
        result = project_tools.update_project("missing", notes="x")

        assert result.success is False
        assert result.validation_errors == []
        assert "업데이트할 프로젝트를 찾을 수 없습니다" in result.message

    def test_history_failure_does_not_fail_update(self, project_tools, seeded):
        seeded.fail_methods.add("append_sheet_values")

        result = project_tools.update_project("p4", progress="변경")

        assert result.success is True
        assert result.history_recorded is False
        assert seeded.rows(PROJECTS)[4][9] == "변경"

    def test_row_write_failure(self, project_tools, seeded):
        seeded.fail_methods.add("update_sheet_values")

        result = project_tools.update_project("p4", progress="변경")

        assert result.success is False
        assert history_rows(seeded) == []

    def test_concurrent_edit_is_overwritten(self, project_tools, seeded):
        """The whole row is rewritten, so the last writer wins."""
        repository = project_tools.repository
        original = repository.find_for_write

        def read_then_other_writer(project_id):
            project = original(project_id)
            # Another user edits the notes after our read
            seeded.update_sheet_values(f"{PROJECTS}!L2", [["다른 사용자"]])
            return project

        repository.find_for_write = read_then_other_writer
        result = project_tools.update_project("p1", progress="진행 중")

        assert result.success is True
        assert seeded.rows(PROJECTS)[1][11] == ""


class TestProjectHistory:
    """Tests for get_project_history method."""

    def test_history_newest_first(self, project_tools, seeded):
        project_tools.update_project("p4", progress="1단계")
        project_tools.update_project("p4", progress="2단계")
        project_tools.update_project("p1", progress="다른 프로젝트")

        result = project_tools.get_project_history("p4")

        assert result.success is True
        assert [h.progress for h in result.history] == ["2단계", "1단계"]

    def test_history_unknown_project(self, project_tools, seeded):
        result = project_tools.get_project_history("missing")
        assert result.success is False
