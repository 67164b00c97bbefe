"""Item catalog repository - reads the choice lists of the project form."""

import logging

from ..cache import ITEM_DATA_TAG
from ..models.item_data import ITEM_DATA_SHEET_HEADERS, ItemData
from .base import SheetRepository

logger = logging.getLogger(__name__)


class ItemDataRepository(SheetRepository):
    """Repository for the item catalog sheet."""

    TAG = ITEM_DATA_TAG
    WIDTH = len(ITEM_DATA_SHEET_HEADERS)

    def _load(self) -> ItemData:
        rows = self.sheets_client.get_sheet_values(self.data_range)
        data = ItemData.from_sheet_rows(rows)
        if data.fallback_fields:
            logger.warning(
                f"Item catalog columns empty, using defaults for: "
                f"{', '.join(data.fallback_fields)}"
            )
        return data

    def get(self) -> ItemData:
        """Get the item catalog.

        Empty columns fall back to their default lists. If the sheet cannot
        be read at all every column falls back; that result is not cached.
        """
        try:
            return self._cached("all", self._load)
        except Exception as e:
            logger.warning(f"Failed to read item catalog, using defaults: {e}")
            return ItemData.defaults()
