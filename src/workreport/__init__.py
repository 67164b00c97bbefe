"""workreport: daily work reports and project records kept in Google Sheets."""

__version__ = "0.1.0"

from .config import Config, load_config
from .server import WorkReportServer, main

__all__ = [
    "Config",
    "load_config",
    "WorkReportServer",
    "main",
]
