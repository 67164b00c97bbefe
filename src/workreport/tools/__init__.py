"""workreport tools."""

from .cache_tools import CacheTools, parse_tags
from .daily_report_tools import DailyReportTools, join_managers
from .project_tools import ProjectTools
from .reference_tools import ReferenceTools
from .setup_tools import SetupTools

__all__ = [
    "CacheTools",
    "DailyReportTools",
    "ProjectTools",
    "ReferenceTools",
    "SetupTools",
    "join_managers",
    "parse_tags",
]
