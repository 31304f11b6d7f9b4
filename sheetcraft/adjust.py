"""Keep worksheet references consistent when rows or columns are inserted or removed."""

from __future__ import annotations

from enum import Enum

from .cells import CalcChainEntry, Cell, Hyperlink, Row, SheetBook, Worksheet
from .coordinates import (
    area_ref_to_coordinates,
    cell_name_to_coordinates,
    coordinates_to_area_ref,
    coordinates_to_cell_name,
    join_cell_name,
    split_cell_name,
)


class AdjustDirection(Enum):
    """Whether an insertion or deletion works on columns or on rows."""

    COLUMNS = "columns"
    ROWS = "rows"


def _coordinates_or_none(cell: str) -> tuple[int, int] | None:
    try:
        return cell_name_to_coordinates(cell)
    except ValueError:
        return None


def adjust_col_dimensions(worksheet: Worksheet, col: int, offset: int) -> None:
    """Rename cells at or right of ``col`` by ``offset`` columns."""
    for row in worksheet.rows:
        for cell in row.cells:
            position = _coordinates_or_none(cell.r)
            if position is None:
                continue
            cell_col, cell_row = position
            if col <= cell_col and cell_col + offset > 0:
                cell.r = coordinates_to_cell_name(cell_col + offset, cell_row)


def adjust_row_dimensions(worksheet: Worksheet, row: int, offset: int) -> None:
    """Renumber rows at or below ``row`` by ``offset`` rows."""
    for row_data in worksheet.rows:
        new_number = row_data.r + offset
        if row_data.r >= row and new_number > 0:
            row_data.r = new_number
            for cell in row_data.cells:
                try:
                    col_name, _ = split_cell_name(cell.r)
                except ValueError:
                    continue
                cell.r = join_cell_name(col_name, new_number)


def adjust_hyperlinks(
    worksheet: Worksheet, direction: AdjustDirection, num: int, offset: int
) -> list[Hyperlink]:
    """Shift hyperlink references and return the links that were removed."""
    if not worksheet.hyperlinks:
        return []

    removed: list[Hyperlink] = []
    if offset < 0:
        kept = []
        for link in worksheet.hyperlinks:
            position = _coordinates_or_none(link.ref) or (0, 0)
            col, row = position
            hit = (direction is AdjustDirection.ROWS and num == row) or (
                direction is AdjustDirection.COLUMNS and num == col
            )
            (removed if hit else kept).append(link)
        worksheet.hyperlinks = kept or None

    for link in worksheet.hyperlinks or []:
        position = _coordinates_or_none(link.ref)
        if position is None:
            continue
        col, row = position
        try:
            if direction is AdjustDirection.ROWS:
                if row >= num:
                    link.ref = coordinates_to_cell_name(col, row + offset)
            elif col >= num:
                link.ref = coordinates_to_cell_name(col + offset, row)
        except ValueError:
            continue
    return removed


def adjust_auto_filter(
    worksheet: Worksheet, direction: AdjustDirection, num: int, offset: int
) -> None:
    """Move or drop the auto filter area."""
    if worksheet.auto_filter is None:
        return
    x1, y1, x2, y2 = area_ref_to_coordinates(worksheet.auto_filter.ref)

    if (direction is AdjustDirection.ROWS and y1 == num and offset < 0) or (
        direction is AdjustDirection.COLUMNS and x1 == num and x2 == num
    ):
        worksheet.auto_filter = None
        for row in worksheet.rows:
            if y1 < row.r <= y2:
                row.hidden = False
        return

    if direction is AdjustDirection.ROWS:
        if y1 >= num:
            y1 += offset
        if y2 >= num:
            y2 += offset
    elif x2 >= num:
        x2 += offset
    worksheet.auto_filter.ref = coordinates_to_area_ref([x1, y1, x2, y2])


def _shift_pivot(pivot: int, num: int, offset: int) -> int:
    if pivot >= num:
        return max(pivot + offset, 1)
    return pivot


def adjust_merge_cells(
    worksheet: Worksheet, direction: AdjustDirection, num: int, offset: int
) -> None:
    """Move merged areas, dropping those that vanish or collapse to one cell."""
    if worksheet.merge_cells is None:
        return
    kept: list[str] = []
    for ref in worksheet.merge_cells:
        x1, y1, x2, y2 = area_ref_to_coordinates(ref)
        if direction is AdjustDirection.ROWS:
            if y1 == num and y2 == num and offset < 0:
                continue
            y1 = _shift_pivot(y1, num, offset)
            y2 = _shift_pivot(y2, num, offset)
        else:
            if x1 == num and x2 == num and offset < 0:
                continue
            x1 = _shift_pivot(x1, num, offset)
            x2 = _shift_pivot(x2, num, offset)
        if x1 == x2 and y1 == y2:
            continue
        kept.append(coordinates_to_area_ref([x1, y1, x2, y2]))
    worksheet.merge_cells = kept or None


def adjust_calc_chain(
    entries: list[CalcChainEntry] | None, direction: AdjustDirection, num: int, offset: int
) -> None:
    """Shift the cell references of calculation chain entries in place."""
    for entry in entries or []:
        col, row = cell_name_to_coordinates(entry.r)
        if direction is AdjustDirection.ROWS and num <= row and row + offset > 0:
            entry.r = coordinates_to_cell_name(col, row + offset)
        if direction is AdjustDirection.COLUMNS and num <= col and col + offset > 0:
            entry.r = coordinates_to_cell_name(col + offset, row)


def _normalize(worksheet: Worksheet) -> None:
    """Keep rows and cells contiguous and ordered by their numbers."""
    by_number: dict[int, Row] = {row.r: row for row in worksheet.rows if row.r >= 1}
    last = max(by_number, default=0)
    worksheet.rows = [by_number.get(number) or Row(r=number) for number in range(1, last + 1)]
    for row in worksheet.rows:
        by_col: dict[int, Cell] = {}
        for cell in row.cells:
            position = _coordinates_or_none(cell.r)
            if position is not None:
                by_col[position[0]] = cell
        last_col = max(by_col, default=0)
        row.cells = [
            by_col.get(col) or Cell(r=coordinates_to_cell_name(col, row.r))
            for col in range(1, last_col + 1)
        ]


def adjust_sheet(
    book: SheetBook, sheet: str, direction: AdjustDirection, num: int, offset: int
) -> None:
    """Update a sheet after inserting (positive offset) or deleting rows or columns."""
    worksheet = book.worksheet(sheet)
    if direction is AdjustDirection.ROWS:
        adjust_row_dimensions(worksheet, num, offset)
    else:
        adjust_col_dimensions(worksheet, num, offset)
    for link in adjust_hyperlinks(worksheet, direction, num, offset):
        if link.rid:
            book.delete_sheet_relationship(sheet, link.rid)
    adjust_merge_cells(worksheet, direction, num, offset)
    adjust_auto_filter(worksheet, direction, num, offset)
    adjust_calc_chain(book.calc_chain, direction, num, offset)
    _normalize(worksheet)