"""Project management tools for workreport."""

import logging
from datetime import datetime
from typing import Optional, Union

from ..cache import ITEM_DATA_TAG, PROJECT_HISTORY_TAG, PROJECTS_TAG, TaggedCache
from ..models import (
    STATUS_LABELS,
    GetProjectResult,
    ListProjectsResult,
    Project,
    ProjectHistory,
    ProjectHistoryResult,
    ProjectResult,
    format_number,
    format_schedule,
    new_id,
    parse_date,
    parse_schedule,
    status_from_label,
)
from ..query import (
    ProjectFilterParams,
    filter_projects,
    page_count,
    paginate,
    sort_projects,
)
from ..repositories import ProjectHistoryRepository, ProjectRepository

logger = logging.getLogger(__name__)

Number = Union[int, float, str, None]


def _clean_list(values: Optional[list[str]]) -> list[str]:
    return [v.strip() for v in (values or []) if v and v.strip()]


class ProjectTools:
    """Tools for project records and their change history."""

    def __init__(
        self,
        repository: ProjectRepository,
        history_repository: ProjectHistoryRepository,
        cache: TaggedCache,
        editor: str = "시스템",
    ):
        """Initialize project tools.

        Args:
            repository: Project sheet repository
            history_repository: Project history sheet repository
            cache: Shared read cache, invalidated after writes
            editor: Name written to history rows
        """
        self.repository = repository
        self.history_repository = history_repository
        self.cache = cache
        self.editor = editor

    def _validate(
        self,
        status: str,
        customer: str,
        item: str,
        schedule_start: Optional[str],
        schedule_end: Optional[str],
    ) -> list[str]:
        errors = []
        if not customer or not customer.strip():
            errors.append("고객사를 입력해주세요.")
        if not item or not item.strip():
            errors.append("ITEM을 입력해주세요.")
        if status_from_label(status) not in STATUS_LABELS:
            errors.append(f"진행여부가 올바르지 않습니다: {status}")
        for value in (schedule_start, schedule_end):
            if value and parse_date(value) is None:
                errors.append(f"대일정 날짜 형식이 올바르지 않습니다: {value}")
        return errors

    def _last_resolution_details(self, project: Project) -> str:
        """Resolution details of the newest history row, or "" if none."""
        try:
            history = self.history_repository.find_for_project(project.item, project.part_no)
        except Exception as e:
            logger.warning(f"Could not read history of project NO {project.no}: {e}")
            return ""
        return history[0].issue_resolution_details if history else ""

    def list_projects(self, filters: Optional[ProjectFilterParams] = None) -> ListProjectsResult:
        """List projects matching the filters, sorted and paginated."""
        filters = filters or ProjectFilterParams()
        errors = filters.validate()
        if errors:
            return ListProjectsResult(
                success=False,
                page=filters.page,
                page_size=filters.page_size,
                validation_errors=errors,
                message=errors[0],
            )

        try:
            projects = self.repository.get_all()
        except Exception as e:
            logger.error(f"Failed to list projects: {e}")
            return ListProjectsResult(
                success=False,
                page=filters.page,
                page_size=filters.page_size,
                message="프로젝트 목록을 불러오는 중 오류가 발생했습니다.",
            )

        matches = sort_projects(filter_projects(projects, filters), filters.sort)
        total = len(matches)
        return ListProjectsResult(
            success=True,
            projects=paginate(matches, filters.page, filters.page_size),
            total=total,
            page=filters.page,
            page_size=filters.page_size,
            page_count=page_count(total, filters.page_size),
            message=f"{total}개의 프로젝트",
        )

    def list_active_projects(self) -> ListProjectsResult:
        """List projects in progress, in sheet order."""
        try:
            projects = self.repository.get_active()
        except Exception as e:
            logger.error(f"Failed to list active projects: {e}")
            return ListProjectsResult(
                success=False,
                message="프로젝트 목록을 불러오는 중 오류가 발생했습니다.",
            )

        return ListProjectsResult(
            success=True,
            projects=projects,
            total=len(projects),
            page=1,
            page_size=len(projects),
            page_count=1 if projects else 0,
            message=f"진행 중인 프로젝트 {len(projects)}개",
        )

    def get_project(self, project_id: str) -> GetProjectResult:
        """Get a project by ID."""
        try:
            project = self.repository.get_by_id(project_id)
        except Exception as e:
            logger.error(f"Failed to get project {project_id}: {e}")
            return GetProjectResult(
                success=False,
                message="프로젝트를 불러오는 중 오류가 발생했습니다.",
            )

        if project is None:
            return GetProjectResult(
                success=False,
                message=f"프로젝트를 찾을 수 없습니다: {project_id}",
            )
        return GetProjectResult(success=True, project=project)

    def create_project(
        self,
        customer: str,
        item: str,
        status: str = "progress",
        affiliation: str = "",
        model: str = "",
        part_no: str = "",
        managers: Optional[list[str]] = None,
        development_stages: Optional[list[str]] = None,
        schedule_start: Optional[str] = None,
        schedule_end: Optional[str] = None,
        selling_price: Number = None,
        material_cost: Number = None,
        material_cost_ratio: Number = None,
    ) -> ProjectResult:
        """Create a project.

        The project number is one more than the highest existing number and
        the current stage starts at the first development stage.

        Returns:
            ProjectResult with the new project's ID and number
        """
        errors = self._validate(status, customer, item, schedule_start, schedule_end)
        if errors:
            return ProjectResult(success=False, validation_errors=errors, message=errors[0])

        stages = _clean_list(development_stages)
        try:
            project = Project(
                id=new_id(),
                no=str(self.repository.next_no()),
                status=status_from_label(status),
                client=customer.strip(),
                affiliation=affiliation or "",
                model=model or "",
                item=item.strip(),
                part_no=part_no or "",
                managers=_clean_list(managers),
                current_stage=stages[0] if stages else "",
                development_stages=stages,
                schedule=format_schedule(schedule_start, schedule_end),
                selling_price=format_number(selling_price),
                material_cost=format_number(material_cost),
                material_cost_ratio=format_number(material_cost_ratio),
                updated_at=datetime.now().isoformat(timespec="seconds"),
            )
            self.repository.add(project)
        except Exception as e:
            logger.error(f"Failed to create project: {e}")
            return ProjectResult(
                success=False,
                message="프로젝트 생성 중 오류가 발생했습니다.",
            )

        # New customers or models may show up in the item catalog
        self.cache.invalidate_tags(PROJECTS_TAG, ITEM_DATA_TAG)
        logger.info(f"Created project NO {project.no} ({project.client} / {project.item})")
        return ProjectResult(
            success=True,
            project_id=project.id,
            project_no=project.no,
            message=f"프로젝트가 생성되었습니다. (NO: {project.no})",
        )

    def update_project(
        self,
        project_id: str,
        status: Optional[str] = None,
        customer: Optional[str] = None,
        affiliation: Optional[str] = None,
        model: Optional[str] = None,
        item: Optional[str] = None,
        part_no: Optional[str] = None,
        managers: Optional[list[str]] = None,
        development_stages: Optional[list[str]] = None,
        current_stage: Optional[str] = None,
        schedule_start: Optional[str] = None,
        schedule_end: Optional[str] = None,
        progress: Optional[str] = None,
        issues: Optional[str] = None,
        issue_resolved: bool = False,
        issue_resolution_details: str = "",
        notes: Optional[str] = None,
        additional_plan: Optional[str] = None,
        selling_price: Number = None,
        material_cost: Number = None,
        material_cost_ratio: Number = None,
        force_history: bool = False,
    ) -> ProjectResult:
        """Update a project and record the change in the history sheet.

        Fields left as None keep their current value. The NO is never
        changed. When issue_resolved is set the project's issue cell is
        cleared while the history row keeps the submitted issue text.

        A history row is appended when progress, issues, notes or additional
        plan differ from the values read before the write, when the issue is
        resolved, when resolution details differ from the newest history
        row, or when force_history is set. A failure to
        append history is logged and does not fail the update.

        Returns:
            ProjectResult; history_recorded tells whether history was written
        """
        if not project_id:
            error = "프로젝트 ID가 필요합니다."
            return ProjectResult(success=False, validation_errors=[error], message=error)

        try:
            current = self.repository.find_for_write(project_id)
        except Exception as e:
            logger.error(f"Failed to read project {project_id}: {e}")
            return ProjectResult(
                success=False,
                project_id=project_id,
                message="프로젝트 업데이트 중 오류가 발생했습니다.",
            )
        if current is None:
            return ProjectResult(
                success=False,
                project_id=project_id,
                message="업데이트할 프로젝트를 찾을 수 없습니다.",
            )

        cur_start, cur_end = parse_schedule(current.schedule)
        start = cur_start if schedule_start is None else schedule_start
        end = cur_end if schedule_end is None else schedule_end
        new_status = current.status if status is None else status
        new_customer = current.client if customer is None else customer
        new_item = current.item if item is None else item

        errors = self._validate(new_status, new_customer, new_item, schedule_start, schedule_end)
        if errors:
            return ProjectResult(
                success=False, project_id=project_id, validation_errors=errors, message=errors[0]
            )

        submitted_issues = current.issues if issues is None else issues
        updated = Project(
            id=current.id,
            no=current.no,
            row_number=current.row_number,
            status=status_from_label(new_status),
            client=new_customer.strip(),
            affiliation=current.affiliation if affiliation is None else affiliation,
            model=current.model if model is None else model,
            item=new_item.strip(),
            part_no=current.part_no if part_no is None else part_no,
            managers=current.managers if managers is None else _clean_list(managers),
            current_stage=current.current_stage if current_stage is None else current_stage,
            progress_status=current.progress_status if progress is None else progress,
            issues="" if issue_resolved else submitted_issues,
            notes=current.notes if notes is None else notes,
            additional_plan=current.additional_plan if additional_plan is None else additional_plan,
            development_stages=(
                current.development_stages
                if development_stages is None
                else _clean_list(development_stages)
            ),
            schedule=format_schedule(start, end),
            selling_price=current.selling_price if selling_price is None else format_number(selling_price),
            material_cost=current.material_cost if material_cost is None else format_number(material_cost),
            material_cost_ratio=(
                current.material_cost_ratio
                if material_cost_ratio is None
                else format_number(material_cost_ratio)
            ),
            updated_at=datetime.now().isoformat(timespec="seconds"),
        )

        try:
            self.repository.update(updated)
        except Exception as e:
            logger.error(f"Failed to update project {project_id}: {e}")
            return ProjectResult(
                success=False,
                project_id=project_id,
                message="프로젝트 업데이트 중 오류가 발생했습니다.",
            )

        changed = [
            name for name, before, after in (
                ("progress", current.progress_status, updated.progress_status),
                ("issues", current.issues, submitted_issues),
                ("notes", current.notes, updated.notes),
                ("additional_plan", current.additional_plan, updated.additional_plan),
            )
            if before != after
        ]
        # Resolving is an action, not a stored cell, so it always counts.
        # Resolution details are compared with the latest history row.
        if issue_resolved:
            changed.append("issue_resolved")
        if (
            issue_resolution_details
            and issue_resolution_details != self._last_resolution_details(current)
        ):
            changed.append("issue_resolution_details")

        history_recorded = False
        if changed or force_history:
            history = ProjectHistory.stamped(
                editor=self.editor,
                item=updated.item,
                part_no=updated.part_no,
                customer=updated.client,
                managers=",".join(updated.managers),
                progress=updated.progress_status,
                additional_plan=updated.additional_plan,
                notes=updated.notes,
                issues=submitted_issues,
                issue_resolved=issue_resolved,
                issue_resolution_details=issue_resolution_details,
            )
            try:
                self.history_repository.append(history)
                history_recorded = True
                logger.info(f"Recorded history for project NO {updated.no}: {changed or ['forced']}")
            except Exception as e:
                logger.warning(f"Project NO {updated.no} updated but history append failed: {e}")
        else:
            logger.debug(f"No tracked field changed for project NO {updated.no}, history skipped")

        self.cache.invalidate_tags(PROJECTS_TAG, PROJECT_HISTORY_TAG)
        logger.info(f"Updated project NO {updated.no} (row {updated.row_number})")
        return ProjectResult(
            success=True,
            project_id=updated.id,
            project_no=updated.no,
            history_recorded=history_recorded,
            message="프로젝트가 수정되었습니다.",
        )

    def get_project_history(self, project_id: str) -> ProjectHistoryResult:
        """History rows of a project, newest first."""
        try:
            project = self.repository.get_by_id(project_id)
            if project is None:
                return ProjectHistoryResult(
                    success=False,
                    message=f"프로젝트를 찾을 수 없습니다: {project_id}",
                )
            history = self.history_repository.find_for_project(project.item, project.part_no)
        except Exception as e:
            logger.error(f"Failed to read history of project {project_id}: {e}")
            return ProjectHistoryResult(
                success=False,
                message="프로젝트 이력을 불러오는 중 오류가 발생했습니다.",
            )

        return ProjectHistoryResult(
            success=True,
            history=history,
            message=f"이력 {len(history)}건",
        )
