"""Integration modules for external services."""

from .google_sheets import (
    SCOPES,
    GoogleSheetsClient,
    SheetsAPIError,
    column_letter,
    row_range,
)

__all__ = [
    "SCOPES",
    "GoogleSheetsClient",
    "SheetsAPIError",
    "column_letter",
    "row_range",
]
