"""Google Sheets API integration."""

import logging
from typing import Any, Optional

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class SheetsAPIError(RuntimeError):
    """A call to the Sheets API failed."""


def column_letter(index: int) -> str:
    """Convert a 0-based column index to A1 column letters (0 -> A, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")
    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def row_range(sheet_name: str, row_number: int, width: int) -> str:
    """A1 range covering `width` columns of one 1-based row."""
    end_col = column_letter(width - 1)
    return f"{sheet_name}!A{row_number}:{end_col}{row_number}"


class GoogleSheetsClient:
    """Client for Google Sheets API operations on a single spreadsheet."""

    def __init__(
        self,
        credentials: Credentials,
        spreadsheet_id: str,
    ):
        """Initialize the Google Sheets client.

        Args:
            credentials: Google credentials with spreadsheet scope
            spreadsheet_id: ID of the spreadsheet every call targets
        """
        self.credentials = credentials
        self.spreadsheet_id = spreadsheet_id
        self._service = None

    @classmethod
    def from_service_account(
        cls,
        service_account_email: str,
        private_key: str,
        spreadsheet_id: str,
    ) -> "GoogleSheetsClient":
        """Create a client from a service account email and private key."""
        info = {
            "type": "service_account",
            "client_email": service_account_email,
            "private_key": private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
        return cls(credentials, spreadsheet_id)

    @property
    def service(self):
        """Get the Sheets API service, initializing if needed."""
        if self._service is None:
            self._service = build(
                "sheets", "v4", credentials=self.credentials, cache_discovery=False
            )
        return self._service

    def get_sheet_values(self, range_name: str) -> list[list[Any]]:
        """Get values from a spreadsheet range.

        Args:
            range_name: A1 notation of range (e.g., "Sheet1!A2:I")

        Returns:
            List of rows, each row is a list of cell values
        """
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=range_name)
                .execute()
            )
            return result.get("values", [])
        except HttpError as e:
            raise SheetsAPIError(f"Failed to get sheet values ({range_name}): {e}")

    def update_sheet_values(
        self,
        range_name: str,
        values: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
    ) -> dict:
        """Overwrite values in a spreadsheet range.

        Args:
            range_name: A1 notation of range
            values: 2D list of values to write
            value_input_option: How to interpret input (USER_ENTERED or RAW)

        Returns:
            API response
        """
        try:
            body = {"values": values}
            return (
                self.service.spreadsheets()
                .values()
                .update(
                    spreadsheetId=self.spreadsheet_id,
                    range=range_name,
                    valueInputOption=value_input_option,
                    body=body,
                )
                .execute()
            )
        except HttpError as e:
            raise SheetsAPIError(f"Failed to update sheet values ({range_name}): {e}")

    def append_sheet_values(
        self,
        range_name: str,
        values: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
    ) -> dict:
        """Append rows after the last populated row of a range.

        Args:
            range_name: A1 notation of range to append after
            values: 2D list of values to append
            value_input_option: How to interpret input

        Returns:
            API response
        """
        try:
            body = {"values": values}
            return (
                self.service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self.spreadsheet_id,
                    range=range_name,
                    valueInputOption=value_input_option,
                    insertDataOption="INSERT_ROWS",
                    body=body,
                )
                .execute()
            )
        except HttpError as e:
            raise SheetsAPIError(f"Failed to append sheet values ({range_name}): {e}")

    def batch_update(self, requests: list[dict]) -> dict:
        """Run structural requests (formatting, row deletion, new sheets).

        Args:
            requests: List of Sheets API request objects

        Returns:
            API response
        """
        try:
            return (
                self.service.spreadsheets()
                .batchUpdate(
                    spreadsheetId=self.spreadsheet_id,
                    body={"requests": requests},
                )
                .execute()
            )
        except HttpError as e:
            raise SheetsAPIError(f"Failed to run batch update: {e}")

    def get_spreadsheet_info(self) -> dict:
        """Get spreadsheet metadata."""
        try:
            return (
                self.service.spreadsheets()
                .get(spreadsheetId=self.spreadsheet_id)
                .execute()
            )
        except HttpError as e:
            raise SheetsAPIError(f"Failed to get spreadsheet info: {e}")

    def get_sheet_names(self) -> list[str]:
        """Get all sheet names in the spreadsheet."""
        info = self.get_spreadsheet_info()
        return [sheet["properties"]["title"] for sheet in info.get("sheets", [])]

    def get_sheet_id(self, sheet_name: str) -> Optional[int]:
        """Get the numeric sheet ID for a sheet title.

        Returns:
            Sheet ID if the sheet exists, None otherwise
        """
        info = self.get_spreadsheet_info()
        for sheet in info.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == sheet_name:
                return props.get("sheetId")
        return None

    def create_sheet(self, sheet_name: str) -> Optional[int]:
        """Add a new sheet.

        Returns:
            Sheet ID of the created sheet
        """
        result = self.batch_update(
            [{"addSheet": {"properties": {"title": sheet_name}}}]
        )
        replies = result.get("replies", [{}])
        return replies[0].get("addSheet", {}).get("properties", {}).get("sheetId")

    def delete_rows(self, sheet_name: str, start_row: int, end_row: int) -> dict:
        """Delete 1-based rows start_row..end_row (inclusive) from a sheet."""
        sheet_id = self.get_sheet_id(sheet_name)
        if sheet_id is None:
            raise SheetsAPIError(f"Sheet not found: {sheet_name}")

        return self.batch_update(
            [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": start_row - 1,
                            "endIndex": end_row,
                        }
                    }
                }
            ]
        )

    def test_connection(self) -> dict:
        """Read spreadsheet metadata to verify credentials and ID.

        Returns:
            Dict with spreadsheet title and sheet titles
        """
        info = self.get_spreadsheet_info()
        title = info.get("properties", {}).get("title", "")
        sheets = [s["properties"]["title"] for s in info.get("sheets", [])]
        logger.info(f"Connected to spreadsheet '{title}' ({len(sheets)} sheets)")
        return {"title": title, "sheets": sheets}
