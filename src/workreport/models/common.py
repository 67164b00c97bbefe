"""Cell codecs shared by the sheet row mappings."""

import json
import re
import uuid
from datetime import date, datetime
from typing import Optional

LEGACY_ID_PREFIX = "row-"

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DOT_DATE = re.compile(r"^\d{4}\.\d{2}\.\d{2}$")
_SLASH_DATE = re.compile(r"^\d{4}/\d{2}/\d{2}$")


def cell(row: list, idx: int, default: str = "") -> str:
    """Return a cell as a string, or the default when the row is short."""
    if idx < len(row) and row[idx] is not None:
        return str(row[idx])
    return default


def new_id() -> str:
    """Generate a stable row ID."""
    return str(uuid.uuid4())


def legacy_id(row_number: int) -> str:
    """Key for rows written before the ID column existed."""
    return f"{LEGACY_ID_PREFIX}{row_number}"


def legacy_row_number(row_id: str) -> Optional[int]:
    """Return the row number encoded in a legacy key, or None."""
    if not row_id.startswith(LEGACY_ID_PREFIX):
        return None
    try:
        return int(row_id[len(LEGACY_ID_PREFIX):])
    except ValueError:
        return None


def encode_list(values: list[str]) -> str:
    """Serialize a list into one cell as a JSON array."""
    cleaned = [v.strip() for v in values if v and v.strip()]
    if not cleaned:
        return ""
    return json.dumps(cleaned, ensure_ascii=False)


def decode_list(text: str) -> list[str]:
    """Read a list cell.

    Accepts JSON arrays and the older comma-joined form.
    """
    text = (text or "").strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, list):
            return [str(v).strip() for v in data if str(v).strip()]
    return [x.strip() for x in text.split(",") if x.strip()]


def normalize_date(text: str) -> str:
    """Convert common date spellings to YYYY-MM-DD.

    Unrecognized input is returned unchanged.
    """
    if not text:
        return ""
    text = text.strip()
    if _ISO_DATE.match(text):
        return text
    if _DOT_DATE.match(text):
        return text.replace(".", "-")
    if _SLASH_DATE.match(text):
        return text.replace("/", "-")
    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        return text


def parse_date(text: str) -> Optional[date]:
    """Parse a date cell, or None if it is not a recognizable date."""
    normalized = normalize_date(text)
    if not _ISO_DATE.match(normalized):
        return None
    try:
        return date.fromisoformat(normalized)
    except ValueError:
        return None


def parse_schedule(schedule: str) -> tuple[str, str]:
    """Split a "start ~ end" schedule cell into its two parts."""
    if not schedule:
        return "", ""
    parts = schedule.split("~")
    start = parts[0].strip() if parts else ""
    end = parts[1].strip() if len(parts) > 1 else ""
    return start, end


def format_schedule(start: Optional[str], end: Optional[str]) -> str:
    """Build a schedule cell; empty when neither bound is given."""
    start = normalize_date(start or "")
    end = normalize_date(end or "")
    if not start and not end:
        return ""
    return f"{start} ~ {end}"


def format_number(value) -> str:
    """Render an optional numeric form value for a cell."""
    if value is None or value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
