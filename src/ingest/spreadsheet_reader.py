"""Spreadsheet extraction -- one rectangular grid of cell strings per sheet.

``.xlsx`` workbooks are read with openpyxl (cached formula values),
legacy ``.xls`` workbooks with xlrd.  Sheets keep workbook order and rows
keep sheet order.  Each grid covers the sheet's used range, starting at
the first used cell.  The first row is ordinary data: rows are positional,
no header row is inferred.
"""
from __future__ import annotations

import datetime as _dt
import io
import logging
from typing import Any, Iterable, List

import openpyxl
import xlrd

from .base import ExtractionError, TableSet

logger = logging.getLogger(__name__)


def cell_to_str(value: Any) -> str:
    """Render a single cell value the way it should appear in the grid."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    return str(value)


def _to_grid(rows: Iterable[Iterable[Any]]) -> List[List[str]]:
    """Convert raw rows to a rectangular grid over the used range.

    Short rows are padded with ``""``.  Leading rows and columns with no
    content are dropped so the grid starts at the first used cell.
    """
    grid = [[cell_to_str(v) for v in row] for row in rows]
    # an untouched sheet still reports a single empty A1 cell
    if not any(cell for row in grid for cell in row):
        return []
    width = max(len(r) for r in grid)
    for row in grid:
        row.extend([""] * (width - len(row)))

    first_row = next(i for i, row in enumerate(grid) if any(row))
    first_col = min(
        next(j for j, cell in enumerate(row) if cell)
        for row in grid if any(row)
    )
    return [row[first_col:] for row in grid[first_row:]]


def _read_xlsx(data: bytes) -> TableSet:
    wb = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
    try:
        sheets: TableSet = {}
        for ws in wb.worksheets:
            sheets[ws.title] = _to_grid(
                ws.iter_rows(min_row=ws.min_row, min_col=ws.min_column, values_only=True)
            )
        return sheets
    finally:
        wb.close()


def _xls_cell_value(book, cell) -> Any:
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate_as_datetime(cell.value, book.datemode)
        except (ValueError, OverflowError):
            return cell.value
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    return cell.value


def _read_xls(data: bytes) -> TableSet:
    book = xlrd.open_workbook(file_contents=data)
    try:
        sheets: TableSet = {}
        for sheet in book.sheets():
            rows = (
                [_xls_cell_value(book, c) for c in sheet.row(r)]
                for r in range(sheet.nrows)
            )
            sheets[sheet.name] = _to_grid(rows)
        return sheets
    finally:
        book.release_resources()


_READERS = {
    ".xlsx": _read_xlsx,
    ".xls": _read_xls,
}


def extract_workbook(data: bytes, extension: str) -> TableSet:
    """Parse a workbook into ``{sheet name: grid}`` in workbook order.

    Raises
    ------
    ExtractionError
        ``reason="unparsable-spreadsheet"`` on malformed input.
    """
    reader = _READERS.get(extension.lower())
    if reader is None:
        raise ExtractionError(
            "unsupported-extension",
            f"no spreadsheet reader for '{extension}'",
        )
    try:
        sheets = reader(data)
    except Exception as exc:
        logger.warning("Spreadsheet extraction (%s) failed: %s", extension, exc)
        raise ExtractionError(
            "unparsable-spreadsheet",
            f"could not parse the spreadsheet ({exc})",
        ) from exc

    logger.info(
        "Spreadsheet parsed: %d sheet(s), %d row(s)",
        len(sheets), sum(len(rows) for rows in sheets.values()),
    )
    return sheets
