"""Column visibility, outline, style and width, plus object placement in pixels."""

from __future__ import annotations

import dataclasses
import math

from .adjust import AdjustDirection, adjust_sheet
from .cells import ColumnInfo, SheetBook, Worksheet
from .coordinates import column_name_to_number, split_cell_name

DEFAULT_COL_WIDTH_PIXELS = 64.0
DEFAULT_ROW_HEIGHT_PIXELS = 20.0
EMU = 9525


def convert_col_width_to_pixels(width: float) -> float:
    """Convert a column width in character units to whole pixels."""
    padding = 5.0
    max_digit_width = 7.0
    if width == 0:
        return 0.0
    if width < 1:
        return float(math.ceil(width * 12 + 0.5))
    return float(math.ceil(width * max_digit_width + 0.5 + padding))


def _convert_row_height_to_pixels(height: float) -> float:
    if height == 0:
        return 0.0
    return float(math.ceil(4.0 / 3.0 * height))


def _matching_columns(ws: Worksheet, col: int) -> list[ColumnInfo]:
    return [info for info in ws.cols or [] if info.min <= col <= info.max]


class ColumnBook(SheetBook):
    """A workbook with column level operations."""

    def get_col_visible(self, sheet: str, col: str) -> bool:
        """Tell whether a column is visible; the last matching definition wins."""
        number = column_name_to_number(col)
        ws = self.worksheet(sheet)
        visible = True
        for info in _matching_columns(ws, number):
            visible = not info.hidden
        return visible

    def _column_definition(self, ws: Worksheet, number: int) -> ColumnInfo:
        matches = _matching_columns(ws, number)
        if matches:
            return dataclasses.replace(matches[-1])
        return ColumnInfo(min=number, max=number)

    def set_col_visible(self, sheet: str, col: str, visible: bool) -> None:
        number = column_name_to_number(col)
        ws = self.worksheet(sheet)
        if ws.cols is None:
            ws.cols = [ColumnInfo(min=number, max=number, hidden=not visible, custom_width=True)]
            return
        info = self._column_definition(ws, number)
        info.min = info.max = number
        info.hidden = not visible
        info.custom_width = True
        ws.cols.append(info)

    def get_col_outline_level(self, sheet: str, col: str) -> int:
        number = column_name_to_number(col)
        ws = self.worksheet(sheet)
        level = 0
        for info in _matching_columns(ws, number):
            level = info.outline_level
        return level

    def set_col_outline_level(self, sheet: str, col: str, level: int) -> None:
        number = column_name_to_number(col)
        if not 0 <= level <= 255:
            raise ValueError(f"invalid outline level {level}")
        ws = self.worksheet(sheet)
        if ws.cols is None:
            ws.cols = [
                ColumnInfo(min=number, max=number, outline_level=level, custom_width=True)
            ]
            return
        info = self._column_definition(ws, number)
        info.min = info.max = number
        info.outline_level = level
        info.custom_width = True
        ws.cols.append(info)

    def set_col_style(self, sheet: str, columns: str, style_id: int) -> None:
        """Set the style of one column (``"H"``) or a range (``"C:F"``)."""
        ws = self.worksheet(sheet)
        names = columns.split(":")
        low = column_name_to_number(names[0])
        high = column_name_to_number(names[1]) if len(names) == 2 else low
        low, high = sorted((low, high))
        if ws.cols is None:
            ws.cols = []
        found = False
        for info in ws.cols:
            if info.min == low and info.max == high:
                info.style = style_id
                found = True
        if not found:
            ws.cols.append(ColumnInfo(min=low, max=high, width=9, style=style_id))

    def set_col_width(self, sheet: str, startcol: str, endcol: str, width: float) -> None:
        low = column_name_to_number(startcol)
        high = column_name_to_number(endcol)
        low, high = sorted((low, high))
        ws = self.worksheet(sheet)
        info = ColumnInfo(min=low, max=high, width=width, custom_width=True)
        if ws.cols is None:
            ws.cols = [info]
        else:
            ws.cols.append(info)

    def get_col_width(self, sheet: str, col: str) -> float:
        """Return the column width, or the default pixel width when none is set."""
        number = column_name_to_number(col)
        ws = self.worksheet(sheet)
        width = 0.0
        for info in _matching_columns(ws, number):
            width = info.width
        return width if width != 0 else DEFAULT_COL_WIDTH_PIXELS

    def col_width_pixels(self, sheet: str, col: int) -> int:
        ws = self.worksheet(sheet)
        width = 0.0
        for info in _matching_columns(ws, col):
            width = info.width
        if width != 0:
            return int(convert_col_width_to_pixels(width))
        return int(DEFAULT_COL_WIDTH_PIXELS)

    def row_height_pixels(self, sheet: str, row: int) -> int:
        """Return the height in pixels of the row at 0-based index ``row``."""
        ws = self.worksheet(sheet)
        for row_data in ws.rows:
            if row_data.r == row + 1 and row_data.height != 0:
                return int(_convert_row_height_to_pixels(row_data.height))
        return int(DEFAULT_ROW_HEIGHT_PIXELS)

    def position_object_pixels(
        self, sheet: str, col: int, row: int, x1: int, y1: int, width: int, height: int
    ) -> tuple[int, int, int, int, int, int, int, int]:
        """Return ``(col_start, row_start, x_abs, y_abs, col_end, row_end, x2, y2)``."""
        x_abs = sum(self.col_width_pixels(sheet, col_id) for col_id in range(1, col + 1)) + x1
        y_abs = sum(self.row_height_pixels(sheet, row_id) for row_id in range(1, row + 1)) + y1

        while x1 >= self.col_width_pixels(sheet, col):
            x1 -= self.col_width_pixels(sheet, col)
            col += 1
        while y1 >= self.row_height_pixels(sheet, row):
            y1 -= self.row_height_pixels(sheet, row)
            row += 1

        col_end, row_end = col, row
        width += x1
        height += y1
        while width >= self.col_width_pixels(sheet, col_end + 1):
            col_end += 1
            width -= self.col_width_pixels(sheet, col_end)
        while height >= self.row_height_pixels(sheet, row_end):
            height -= self.row_height_pixels(sheet, row_end)
            row_end += 1
        return col, row, x_abs, y_abs, col_end, row_end, width, height

    def insert_col(self, sheet: str, col: str) -> None:
        """Insert a new column before the named column."""
        number = column_name_to_number(col)
        adjust_sheet(self, sheet, AdjustDirection.COLUMNS, number, 1)

    def remove_col(self, sheet: str, col: str) -> None:
        """Remove a column and shift the columns to its right."""
        number = column_name_to_number(col)
        ws = self.worksheet(sheet)
        for row in ws.rows:
            for index, cell in enumerate(row.cells):
                try:
                    name, _ = split_cell_name(cell.r)
                except ValueError:
                    continue
                if name == col:
                    del row.cells[index]
                    break
        adjust_sheet(self, sheet, AdjustDirection.COLUMNS, number, -1)