"""Project repository - manages the project sheet."""

import logging
from typing import Optional

from ..cache import PROJECTS_TAG
from ..integrations.google_sheets import row_range
from ..models.project import PROJECT_COLUMNS, Project
from .base import SheetRepository

logger = logging.getLogger(__name__)

ID_COLUMN = 19


class ProjectRepository(SheetRepository):
    """Repository for project records."""

    TAG = PROJECTS_TAG
    WIDTH = PROJECT_COLUMNS

    def _load(self) -> list[Project]:
        return [
            Project.from_sheet_row(row, row_number)
            for row_number, row in self._read_numbered_rows()
        ]

    def get_all(self) -> list[Project]:
        """Get all projects in sheet order (cached)."""
        return self._cached("all", self._load)

    def get_fresh(self) -> list[Project]:
        """Get all projects, bypassing the cache."""
        return self._load()

    def get_active(self) -> list[Project]:
        """Get projects whose status is progress."""
        return [p for p in self.get_all() if p.status == "progress"]

    def get_by_id(self, project_id: str) -> Optional[Project]:
        for project in self.get_all():
            if project.id == project_id:
                return project
        return None

    def find_for_write(self, project_id: str) -> Optional[Project]:
        """Locate a project in a fresh read so its row number is current."""
        for project in self.get_fresh():
            if project.id == project_id:
                return project
        return None

    def next_no(self) -> int:
        """Next project number: highest numeric NO plus one."""
        return max((p.no_value for p in self.get_fresh()), default=0) + 1

    def add(self, project: Project) -> None:
        """Append a project as a new row."""
        self.sheets_client.append_sheet_values(
            self.append_range,
            [project.to_sheet_row()],
        )

    def update(self, project: Project) -> None:
        """Overwrite the project's whole row."""
        if project.row_number is None:
            raise ValueError("Project has no row number")

        self.sheets_client.update_sheet_values(
            row_range(self.sheet_name, project.row_number, self.WIDTH),
            [project.to_sheet_row()],
        )

    def write_id(self, row_number: int, project_id: str) -> None:
        """Store a stable ID in the ID column of one row."""
        self._write_cell(row_number, ID_COLUMN, project_id)
