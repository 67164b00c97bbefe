"""Manager repository - reads the manager sheet."""

from ..cache import MANAGERS_TAG
from ..models.manager import Manager
from .base import SheetRepository


class ManagerRepository(SheetRepository):
    """Repository for the manager list."""

    TAG = MANAGERS_TAG
    WIDTH = 2

    def get_all(self) -> list[Manager]:
        """Get managers in sheet order; rows without a name are skipped."""
        def load() -> list[Manager]:
            managers = [
                Manager.from_sheet_row(row)
                for _row_number, row in self._read_numbered_rows()
            ]
            return [m for m in managers if m.name]

        return self._cached("all", load)
