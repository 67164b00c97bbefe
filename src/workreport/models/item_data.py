"""Item catalog data models.

The item catalog sheet holds the choice lists offered by the project form,
one list per column below a header row.
"""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_DEVELOPMENT_STAGES = [
    "검토",
    "설계",
    "개발",
    "PROTO",
    "선행성",
    "P1",
    "P2",
    "승인",
    "양산이관",
    "초도양산",
]
DEFAULT_AFFILIATIONS = ["전장", "유압", "전산"]
DEFAULT_MODELS = [
    "CAB TILT SYSTEM",
    "FUEL FILLER PUMP",
    "PUMP",
    "CYLINDER",
    "ETB",
    "TC ACTUATOR MOTOR",
]
DEFAULT_CUSTOMERS = ["기아군수", "KUBOTA", "YAMADA", "DORMAN"]

# (field name, column index, default list)
ITEM_DATA_COLUMNS = [
    ("development_stages", 0, DEFAULT_DEVELOPMENT_STAGES),
    ("affiliations", 1, DEFAULT_AFFILIATIONS),
    ("models", 2, DEFAULT_MODELS),
    ("customers", 3, DEFAULT_CUSTOMERS),
]

ITEM_DATA_SHEET_HEADERS = ["개발업무단계", "소속", "모델", "고객사"]


def unique_column(rows: list[list], idx: int) -> list[str]:
    """Trimmed, non-blank values of one column, first occurrence order."""
    seen = set()
    values = []
    for row in rows:
        if idx >= len(row) or row[idx] is None:
            continue
        value = str(row[idx]).strip()
        if not value or value in seen:
            continue
        seen.add(value)
        values.append(value)
    return values


@dataclass
class ItemData:
    """Choice lists for the project form."""

    development_stages: list[str] = field(default_factory=list)
    affiliations: list[str] = field(default_factory=list)
    models: list[str] = field(default_factory=list)
    customers: list[str] = field(default_factory=list)
    fallback_fields: list[str] = field(default_factory=list)

    @classmethod
    def from_sheet_rows(cls, rows: list[list]) -> "ItemData":
        """Create from the data rows below the header.

        A column without any value is replaced by its default list and
        recorded in fallback_fields.
        """
        data = cls()
        for name, idx, defaults in ITEM_DATA_COLUMNS:
            values = unique_column(rows, idx)
            if not values:
                values = list(defaults)
                data.fallback_fields.append(name)
            setattr(data, name, values)
        return data

    @classmethod
    def defaults(cls) -> "ItemData":
        """Every column from the default lists."""
        data = cls()
        for name, _idx, defaults in ITEM_DATA_COLUMNS:
            setattr(data, name, list(defaults))
            data.fallback_fields.append(name)
        return data

    def to_sheet_rows(self) -> list[list[str]]:
        """Column-oriented lists back into sheet rows."""
        columns = [self.development_stages, self.affiliations, self.models, self.customers]
        height = max((len(c) for c in columns), default=0)
        return [
            [c[i] if i < len(c) else "" for c in columns]
            for i in range(height)
        ]

    def to_dict(self) -> dict:
        return {
            "developmentStages": list(self.development_stages),
            "affiliations": list(self.affiliations),
            "models": list(self.models),
            "customers": list(self.customers),
            "fallbackFields": list(self.fallback_fields),
        }


@dataclass
class ItemDataResult:
    """Result of reading the item catalog."""

    success: bool
    item_data: Optional[ItemData] = None
    message: str = ""
