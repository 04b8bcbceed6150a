"""Data models for decoded workbooks."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel


class ColumnDef(BaseModel):
    """A source column offered as a mapping suggestion."""

    letter: str  # e.g., "A", "B", "AA"
    header: str


@dataclass(frozen=True)
class SheetExtent:
    """Bounding rectangle of a sheet, using 0-based row and column indices."""

    min_row: int = 0
    max_row: int = 0
    min_col: int = 0
    max_col: int = 0

    @property
    def column_count(self) -> int:
        return self.max_col - self.min_col + 1

    @property
    def row_count(self) -> int:
        return self.max_row - self.min_row + 1


@dataclass
class SheetGrid:
    """A named grid of cell values addressable by (row, col)."""

    name: str
    cells: dict[tuple[int, int], Any] = field(default_factory=dict)
    extent: Optional[SheetExtent] = None

    def cell(self, row: int, col: int) -> Any:
        """Return the value at (row, col), or None when the cell is absent."""
        return self.cells.get((row, col))

    @property
    def declared_extent(self) -> SheetExtent:
        """The sheet's extent, defaulting to the single cell A1."""
        return self.extent or SheetExtent()


@dataclass
class Workbook:
    """An uploaded workbook decoded into in-memory grids."""

    file_name: Optional[str] = None
    sheets: dict[str, SheetGrid] = field(default_factory=dict)

    @property
    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def get_sheet(self, name: Optional[str]) -> Optional[SheetGrid]:
        if not name:
            return None
        return self.sheets.get(name)


class WorkbookParseError(Exception):
    """Exception raised when uploaded bytes cannot be decoded as a table file."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(
            "Failed to parse file. Please ensure it is a valid CSV or Excel file."
        )
