"""Decode uploaded spreadsheet bytes into in-memory grids."""

import csv
import io
import logging
import zipfile
from typing import Any, Optional

import openpyxl
import pandas as pd
import xlrd

from ..config import settings
from .models import SheetExtent, SheetGrid, Workbook, WorkbookParseError

logger = logging.getLogger(__name__)

CSV_SHEET_NAME = "Sheet1"
CSV_EXTENSIONS = (".csv", ".tsv", ".txt")
CSV_DELIMITERS = [",", "\t", "|", ";"]

# Legacy .xls files are OLE2 compound documents
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def _looks_binary(data: bytes) -> bool:
    """True when the bytes cannot be delimited text."""
    if b"\x00" in data:
        return True
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Latin-1 text has no C0 control bytes besides whitespace
        return any(byte < 0x20 and byte not in b"\t\r\n\x0c" for byte in data)
    return any(ord(char) < 0x20 and char not in "\t\r\n\x0c" for char in text)


def _detect_format(data: bytes, file_name: Optional[str]) -> str:
    """Pick "xls", "xlsx" or "csv" from the content, then the file name."""
    if data.startswith(OLE2_MAGIC):
        return "xls"
    if zipfile.is_zipfile(io.BytesIO(data)):
        return "xlsx"
    if file_name:
        name = file_name.lower()
        if name.endswith(CSV_EXTENSIONS):
            return "csv"
        return "xls" if name.endswith(".xls") else "xlsx"
    if _looks_binary(data):
        raise ValueError("upload is neither a spreadsheet nor delimited text")
    return "csv"


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _detect_delimiter(text: str) -> str:
    """Pick the delimiter that splits the first lines most consistently."""
    lines = [line for line in text.splitlines()[:10] if line.strip()]

    scores = {}
    for delim in CSV_DELIMITERS:
        counts = [line.count(delim) for line in lines]
        if counts and min(counts) > 0:
            avg = sum(counts) / len(counts)
            variance = sum((c - avg) ** 2 for c in counts) / len(counts)
            scores[delim] = min(counts) if variance < 2 else 0

    return max(scores, key=scores.get) if scores else ","


def _bounding_extent(cells: dict[tuple[int, int], Any]) -> Optional[SheetExtent]:
    """Smallest rectangle holding every populated cell, or None when empty."""
    if not cells:
        return None
    rows = [row for row, _ in cells]
    cols = [col for _, col in cells]
    return SheetExtent(min_row=min(rows), max_row=max(rows), min_col=min(cols), max_col=max(cols))


def _read_csv(data: bytes) -> SheetGrid:
    """Read delimited text into a single sheet."""
    text = _decode_text(data)
    if not text.strip():
        return SheetGrid(name=CSV_SHEET_NAME)

    delimiter = _detect_delimiter(text)
    # Size the frame to the widest row so ragged rows are never dropped
    width = max((len(row) for row in csv.reader(io.StringIO(text), delimiter=delimiter)), default=0)
    if width == 0:
        return SheetGrid(name=CSV_SHEET_NAME)

    df = pd.read_csv(
        io.StringIO(text),
        sep=delimiter,
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
    )

    cells = {}
    for row_idx, row in enumerate(df.itertuples(index=False, name=None)):
        for col_idx, value in enumerate(row):
            # Short rows are padded with NaN
            if isinstance(value, str) and value != "":
                cells[(row_idx, col_idx)] = value

    return SheetGrid(name=CSV_SHEET_NAME, cells=cells, extent=_bounding_extent(cells))


def _read_worksheet(worksheet) -> SheetGrid:
    """Convert an openpyxl worksheet into a SheetGrid."""
    # openpyxl dimensions are 1-based
    min_row = worksheet.min_row or 1
    max_row = worksheet.max_row or min_row
    min_col = worksheet.min_column or 1
    max_col = worksheet.max_column or min_col

    cells = {}
    rows = worksheet.iter_rows(
        min_row=min_row,
        max_row=max_row,
        min_col=min_col,
        max_col=max_col,
        values_only=True,
    )
    for row_offset, values in enumerate(rows):
        for col_offset, value in enumerate(values):
            if value is not None:
                cells[(min_row - 1 + row_offset, min_col - 1 + col_offset)] = value

    if not cells:
        return SheetGrid(name=worksheet.title)

    extent = SheetExtent(
        min_row=min_row - 1,
        max_row=max_row - 1,
        min_col=min_col - 1,
        max_col=max_col - 1,
    )
    return SheetGrid(name=worksheet.title, cells=cells, extent=extent)


def _read_excel(data: bytes) -> list[SheetGrid]:
    workbook = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
    try:
        return [_read_worksheet(workbook[name]) for name in workbook.sheetnames]
    finally:
        workbook.close()


def _xls_value(cell, datemode: int) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value)
    return cell.value


def _read_xls(data: bytes) -> list[SheetGrid]:
    """Read a legacy .xls workbook with xlrd."""
    book = xlrd.open_workbook(file_contents=data)
    try:
        grids = []
        for sheet in book.sheets():
            cells = {}
            for row_idx in range(sheet.nrows):
                for col_idx in range(sheet.ncols):
                    value = _xls_value(sheet.cell(row_idx, col_idx), book.datemode)
                    if value is not None and value != "":
                        cells[(row_idx, col_idx)] = value
            grids.append(SheetGrid(name=sheet.name, cells=cells, extent=_bounding_extent(cells)))
        return grids
    finally:
        book.release_resources()


def decode_workbook(data: bytes, file_name: Optional[str] = None) -> Workbook:
    """
    Decode raw upload bytes into a Workbook.

    Delimited text files become a single sheet named "Sheet1"; Excel files keep
    their sheet order.

    Args:
        data: Raw file contents
        file_name: Original file name, used to pick the decoder

    Returns:
        The decoded Workbook

    Raises:
        WorkbookParseError: If the bytes are empty, too large or malformed
    """
    if not data:
        raise WorkbookParseError("empty upload")
    if len(data) > settings.max_upload_bytes:
        raise WorkbookParseError(
            f"upload of {len(data)} bytes exceeds limit of {settings.max_upload_bytes}"
        )

    try:
        file_format = _detect_format(data, file_name)
        if file_format == "csv":
            grids = [_read_csv(data)]
        elif file_format == "xls":
            grids = _read_xls(data)
        else:
            grids = _read_excel(data)
    except Exception as e:
        logger.warning(f"Failed to decode '{file_name}': {e}")
        raise WorkbookParseError(str(e)) from e

    logger.info(f"Decoded '{file_name}' with {len(grids)} sheet(s)")
    return Workbook(file_name=file_name, sheets={grid.name: grid for grid in grids})
