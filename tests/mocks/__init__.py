"""Mock clients for testing."""

from .fake_sheets import FakeSheetsClient
from .rows import DAILY, HISTORY, ITEM_DATA, MANAGERS, PROJECTS, project_row, report_row

__all__ = [
    "FakeSheetsClient",
    "DAILY",
    "HISTORY",
    "ITEM_DATA",
    "MANAGERS",
    "PROJECTS",
    "project_row",
    "report_row",
]
