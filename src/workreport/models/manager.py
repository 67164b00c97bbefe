"""Manager data models."""

from dataclasses import dataclass, field

from .common import cell


@dataclass
class Manager:
    """Entry of the manager sheet."""

    name: str
    rank: str = ""

    @classmethod
    def from_sheet_row(cls, row: list) -> "Manager":
        """Create from Google Sheets row (A: rank, B: name)."""
        return cls(
            rank=cell(row, 0).strip(),
            name=cell(row, 1).strip(),
        )

    def to_sheet_row(self) -> list:
        return [self.rank, self.name]

    def to_dict(self) -> dict:
        return {"rank": self.rank, "name": self.name}


@dataclass
class ManagersResult:
    """Result of listing managers."""

    success: bool
    managers: list[Manager] = field(default_factory=list)
    message: str = ""


MANAGER_SHEET_HEADERS = ["직급", "이름"]
