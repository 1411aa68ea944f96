"""Spreadsheet and print exports for report tables."""

import html
import logging
import os
import re
from datetime import date
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from .reports import ReportTable

logger = logging.getLogger(__name__)

MAX_SHEET_TITLE = 31
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")
_SAFE_FILENAME = re.compile(r"[^\w\-]+")


class ExportError(Exception):
    """Raised when a report cannot be written."""


def sheet_title(title: str) -> str:
    """Excel-safe sheet title (no reserved characters, max 31 chars)."""
    cleaned = _INVALID_TITLE_CHARS.sub("-", title).strip() or "Sheet"
    return cleaned[:MAX_SHEET_TITLE]


def _auto_fit_columns(ws, min_width: int = 10, max_width: int = 50) -> None:
    for column in ws.columns:
        values = [str(cell.value) for cell in column if cell.value is not None]
        if not values:
            continue
        width = max(min_width, min(max_width, max(len(v) for v in values) + 2))
        ws.column_dimensions[column[0].column_letter].width = width


def build_workbook(tables: Sequence[ReportTable]) -> Workbook:
    """
    Build a workbook with one right-to-left sheet per table.

    Args:
        tables: reports to include, in sheet order

    Returns:
        Workbook: unsaved workbook
    """
    if not tables:
        raise ExportError("Nothing to export")
    wb = Workbook()
    header_fill = PatternFill("solid", fgColor="D9E1F2")
    used: List[str] = []

    for index, table in enumerate(tables):
        ws = wb.active if index == 0 else wb.create_sheet()
        title = sheet_title(table.title)
        if title in used:
            suffix = f" {index + 1}"
            title = title[: MAX_SHEET_TITLE - len(suffix)] + suffix
        used.append(title)
        ws.title = title
        ws.sheet_view.rightToLeft = True

        ws.append(table.columns)
        for cell in ws[1]:
            cell.font = Font(bold=True)
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        for row in table.rows:
            ws.append(list(row))
        if table.totals:
            ws.append(list(table.totals))
            for cell in ws[ws.max_row]:
                cell.font = Font(bold=True)

        ws.freeze_panes = "A2"
        _auto_fit_columns(ws)
    return wb


def export_filename(name: str, today: Optional[date] = None) -> str:
    """``{name}_{YYYY-MM-DD}.xlsx`` with filesystem-unsafe characters replaced."""
    safe = _SAFE_FILENAME.sub("_", name).strip("_") or "report"
    return f"{safe}_{(today or date.today()).isoformat()}.xlsx"


def export_workbook(
    tables: Sequence[ReportTable],
    directory: str,
    name: str,
    today: Optional[date] = None,
) -> str:
    """
    Write the tables to ``directory`` and return the file path.

    Raises:
        ExportError: the workbook could not be built or written
    """
    path = os.path.join(directory, export_filename(name, today))
    wb = build_workbook(tables)
    try:
        os.makedirs(directory, exist_ok=True)
        wb.save(path)
    except OSError as e:
        logger.error("Export to %s failed: %s", path, e)
        raise ExportError(f"Could not write {path}: {e}") from e
    logger.info("Exported %d table(s) to %s", len(tables), path)
    return path


_PRINT_STYLE = """
body { font-family: Tahoma, Arial, sans-serif; margin: 24px; }
h1 { font-size: 18px; }
pre { white-space: pre-wrap; font-family: inherit; font-size: 15px; line-height: 1.8; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #999; padding: 4px 8px; text-align: center; }
th { background: #d9e1f2; }
tfoot td { font-weight: bold; }
"""


def _cells(values: Sequence[object], tag: str) -> str:
    return "".join(f"<{tag}>{html.escape(str(v))}</{tag}>" for v in values)


def render_print_html(
    title: str, text: Optional[str] = None, table: Optional[ReportTable] = None
) -> str:
    """Printable right-to-left HTML page that opens the print dialog on load."""
    parts = [f"<h1>{html.escape(title)}</h1>"]
    if text:
        parts.append(f"<pre>{html.escape(text)}</pre>")
    if table is not None:
        body = "".join(f"<tr>{_cells(row, 'td')}</tr>" for row in table.rows)
        foot = f"<tfoot><tr>{_cells(table.totals, 'td')}</tr></tfoot>" if table.totals else ""
        parts.append(
            f"<table><thead><tr>{_cells(table.columns, 'th')}</tr></thead>"
            f"<tbody>{body}</tbody>{foot}</table>"
        )
    return (
        '<!DOCTYPE html>\n<html lang="ar" dir="rtl">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{html.escape(title)}</title>\n<style>{_PRINT_STYLE}</style>\n</head>\n"
        '<body onload="window.print()">\n'
        + "\n".join(parts)
        + "\n</body>\n</html>\n"
    )
