"""Spreadsheet decoding and structural introspection."""

from .models import ColumnDef, SheetExtent, SheetGrid, Workbook, WorkbookParseError
from .decoder import decode_workbook
from .columns import EMPTY_HEADER, column_index, column_letter, extract_columns

__all__ = [
    "ColumnDef",
    "SheetExtent",
    "SheetGrid",
    "Workbook",
    "WorkbookParseError",
    "decode_workbook",
    "EMPTY_HEADER",
    "column_index",
    "column_letter",
    "extract_columns",
]
