"""Conversion between A1-style cell names, column names and numeric coordinates."""

from __future__ import annotations

import re

_CELL_NAME = re.compile(r"([A-Za-z]+)([0-9]+)")


def column_name_to_number(name: str) -> int:
    """Return the 1-based number of a column name such as ``"AK"``."""
    if not name or not name.isascii() or not name.isalpha():
        raise ValueError(f'invalid column name "{name}"')
    number = 0
    for char in name.upper():
        number = number * 26 + ord(char) - ord("A") + 1
    return number


def column_number_to_name(num: int) -> str:
    """Return the column name for a 1-based column number."""
    if num < 1:
        raise ValueError(f"incorrect column number {num}")
    letters = []
    while num > 0:
        num, rest = divmod(num - 1, 26)
        letters.append(chr(ord("A") + rest))
    return "".join(reversed(letters))


def split_cell_name(cell: str) -> tuple[str, int]:
    """Split a cell name into its column name and row number."""
    match = _CELL_NAME.fullmatch(cell)
    if match is None or int(match.group(2)) < 1:
        raise ValueError(f'invalid cell name "{cell}"')
    return match.group(1), int(match.group(2))


def join_cell_name(col: str, row: int) -> str:
    """Join a column name and a row number into an upper-case cell name."""
    if not col or not col.isascii() or not col.isalpha():
        raise ValueError(f'invalid column name "{col}"')
    if row < 1:
        raise ValueError(f"invalid row number {row}")
    return f"{col.upper()}{row}"


def cell_name_to_coordinates(cell: str) -> tuple[int, int]:
    """Return the 1-based ``(column, row)`` pair of a cell name."""
    try:
        col_name, row = split_cell_name(cell)
        col = column_name_to_number(col_name)
    except ValueError as exc:
        raise ValueError(f'cannot convert cell "{cell}" to coordinates: {exc}') from exc
    return col, row


def coordinates_to_cell_name(col: int, row: int) -> str:
    """Return the cell name for 1-based column and row numbers."""
    if col < 1 or row < 1:
        raise ValueError(f"invalid cell coordinates [{col}, {row}]")
    return f"{column_number_to_name(col)}{row}"


def _corner(cell: str) -> tuple[int, int]:
    try:
        return cell_name_to_coordinates(cell)
    except ValueError:
        return 0, 0


def check_cell_in_area(cell: str, area: str) -> bool:
    """Tell whether a cell lies inside an area such as ``"A1:C3"``."""
    col, row = cell_name_to_coordinates(cell)
    corners = area.split(":")
    if len(corners) != 2:
        return False
    first_col, first_row = _corner(corners[0])
    last_col, last_row = _corner(corners[1])
    return first_col <= col <= last_col and first_row <= row <= last_row


def area_ref_to_coordinates(ref: str) -> list[int]:
    """Return ``[x1, y1, x2, y2]`` for an area reference."""
    corners = ref.split(":")
    if len(corners) < 2:
        raise ValueError(f'invalid area "{ref}"')
    x1, y1 = cell_name_to_coordinates(corners[0])
    x2, y2 = cell_name_to_coordinates(corners[1])
    return [x1, y1, x2, y2]


def coordinates_to_area_ref(coordinates) -> str:
    """Return the area reference for ``[x1, y1, x2, y2]``."""
    if len(coordinates) != 4:
        raise ValueError("coordinates length must be 4")
    x1, y1, x2, y2 = coordinates
    return f"{coordinates_to_cell_name(x1, y1)}:{coordinates_to_cell_name(x2, y2)}"