"""Repositories for sheet data access."""

from .base import SheetRepository
from .daily_report_repository import DailyReportRepository
from .history_repository import ProjectHistoryRepository
from .item_data_repository import ItemDataRepository
from .manager_repository import ManagerRepository
from .project_repository import ProjectRepository

__all__ = [
    "DailyReportRepository",
    "ItemDataRepository",
    "ManagerRepository",
    "ProjectHistoryRepository",
    "ProjectRepository",
    "SheetRepository",
]
