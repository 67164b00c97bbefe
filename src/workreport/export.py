"""CSV export of daily reports."""

import csv
import io
from datetime import date
from typing import Optional
from urllib.parse import quote

from .models.daily_report import DailyReport

BOM = "\ufeff"

EXPORT_HEADERS = ["날짜", "ITEM", "PART NO", "고객사", "단계", "담당자", "계획", "실적", "비고"]


def reports_to_csv(reports: list[DailyReport]) -> str:
    """Render reports as CSV text.

    The text starts with a UTF-8 BOM so spreadsheet programs detect the
    encoding. Data cells are always quoted.
    """
    si = io.StringIO()
    si.write(BOM)

    header_writer = csv.writer(si, lineterminator="\n")
    header_writer.writerow(EXPORT_HEADERS)

    cw = csv.writer(si, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for report in reports:
        cw.writerow([
            report.date,
            report.item,
            report.part_no,
            report.customer,
            report.stage,
            report.manager,
            report.plan,
            report.performance,
            report.note,
        ])

    return si.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    """Suggested download name, e.g. 업무일지_검색결과_20240115.csv."""
    today = today or date.today()
    return f"업무일지_검색결과_{today.strftime('%Y%m%d')}.csv"


def content_disposition(filename: str) -> str:
    """Content-Disposition header value for a non-ASCII filename."""
    return f"attachment; filename*=UTF-8''{quote(filename)}"
