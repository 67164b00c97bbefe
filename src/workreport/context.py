"""Wiring of the Sheets client, cache, repositories and tools."""

import logging
from dataclasses import dataclass
from typing import Optional

from .cache import TaggedCache
from .config import Config
from .integrations.google_sheets import GoogleSheetsClient
from .repositories import (
    DailyReportRepository,
    ItemDataRepository,
    ManagerRepository,
    ProjectHistoryRepository,
    ProjectRepository,
)
from .tools import (
    CacheTools,
    DailyReportTools,
    ProjectTools,
    ReferenceTools,
    SetupTools,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything an outer surface (HTTP or MCP) needs."""

    config: Config
    sheets_client: GoogleSheetsClient
    cache: TaggedCache
    daily_reports: DailyReportTools
    projects: ProjectTools
    reference: ReferenceTools
    cache_tools: CacheTools
    setup: SetupTools


def create_context(
    config: Config,
    sheets_client: Optional[GoogleSheetsClient] = None,
) -> AppContext:
    """Build the application context.

    Args:
        config: Application configuration
        sheets_client: Client to use; built from the service account
                       settings when not provided

    Raises:
        ConfigurationError: when no client is given and a required Google
                            parameter is missing
    """
    if sheets_client is None:
        config.require_google()
        sheets_client = GoogleSheetsClient.from_service_account(
            config.google.service_account_email,
            config.google.private_key,
            config.google.spreadsheet_id,
        )
        logger.info(f"Using spreadsheet {config.spreadsheet_id}")

    cache = TaggedCache()
    names = config.sheets
    ttls = config.cache

    daily_report_repo = DailyReportRepository(
        sheets_client, names.daily_reports, cache, ttls.daily_reports_ttl
    )
    project_repo = ProjectRepository(sheets_client, names.projects, cache, ttls.projects_ttl)
    history_repo = ProjectHistoryRepository(
        sheets_client, names.project_history, cache, ttls.project_history_ttl
    )
    manager_repo = ManagerRepository(sheets_client, names.managers, cache, ttls.managers_ttl)
    item_data_repo = ItemDataRepository(sheets_client, names.item_data, cache, ttls.item_data_ttl)

    return AppContext(
        config=config,
        sheets_client=sheets_client,
        cache=cache,
        daily_reports=DailyReportTools(daily_report_repo, cache),
        projects=ProjectTools(project_repo, history_repo, cache, editor=config.history.editor),
        reference=ReferenceTools(manager_repo, item_data_repo),
        cache_tools=CacheTools(
            cache, daily_report_repo, project_repo, manager_repo, item_data_repo
        ),
        setup=SetupTools(sheets_client, names, daily_report_repo, project_repo, cache),
    )
