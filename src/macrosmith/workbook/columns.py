"""Column header extraction for mapping suggestions."""

from typing import Optional

from .models import ColumnDef, Workbook

EMPTY_HEADER = "(Empty Header)"


def column_letter(index: int) -> str:
    """Convert 0-based index to column letter(s). 0=A, 25=Z, 26=AA, etc."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative: {index}")
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def column_index(letter: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    if not letter or not letter.isalpha():
        raise ValueError(f"Invalid column letter: {letter!r}")
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def _header_text(value) -> str:
    if value is None or value == "":
        return EMPTY_HEADER
    return str(value)


def extract_columns(workbook: Optional[Workbook], sheet_name: Optional[str]) -> list[ColumnDef]:
    """
    List the columns of a sheet with their row-0 headers.

    Walks the first row of the sheet's extent from its first to its last
    column. Columns without a header still appear, labelled EMPTY_HEADER, so
    their letter can be offered as a suggestion.

    Args:
        workbook: The decoded workbook, or None when nothing is loaded
        sheet_name: Name of the source sheet

    Returns:
        One ColumnDef per column, or an empty list when the sheet is unknown
    """
    if workbook is None:
        return []
    sheet = workbook.get_sheet(sheet_name)
    if sheet is None:
        return []

    extent = sheet.declared_extent
    return [
        ColumnDef(letter=column_letter(col), header=_header_text(sheet.cell(extent.min_row, col)))
        for col in range(extent.min_col, extent.max_col + 1)
    ]
