"""Pytest fixtures for workreport tests."""

import pytest
from unittest.mock import MagicMock

from tests.mocks import DAILY, HISTORY, ITEM_DATA, MANAGERS, PROJECTS, FakeSheetsClient

from workreport.config import Config
from workreport.context import create_context
from workreport.models import (
    DAILY_REPORT_SHEET_HEADERS,
    ITEM_DATA_SHEET_HEADERS,
    MANAGER_SHEET_HEADERS,
    PROJECT_HISTORY_SHEET_HEADERS,
    PROJECT_SHEET_HEADERS,
)


@pytest.fixture
def sheets():
    """Fake spreadsheet with every sheet and its header row."""
    client = FakeSheetsClient()
    client.add_sheet(DAILY, [DAILY_REPORT_SHEET_HEADERS])
    client.add_sheet(PROJECTS, [PROJECT_SHEET_HEADERS])
    client.add_sheet(MANAGERS, [MANAGER_SHEET_HEADERS])
    client.add_sheet(ITEM_DATA, [ITEM_DATA_SHEET_HEADERS])
    client.add_sheet(HISTORY, [PROJECT_HISTORY_SHEET_HEADERS])
    return client


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def context(config, sheets):
    """Application context on the fake spreadsheet."""
    return create_context(config, sheets_client=sheets)


@pytest.fixture
def daily_report_tools(context):
    return context.daily_reports


@pytest.fixture
def project_tools(context):
    return context.projects


@pytest.fixture
def reference_tools(context):
    return context.reference


@pytest.fixture
def setup_tools(context):
    return context.setup


@pytest.fixture
def cache_tools(context):
    return context.cache_tools


@pytest.fixture
def mock_sheets_client():
    """Create a mock Google Sheets client."""
    mock = MagicMock()
    mock.get_sheet_values.return_value = []
    mock.update_sheet_values.return_value = {}
    mock.append_sheet_values.return_value = {}
    mock.create_sheet.return_value = None
    return mock
