"""Worksheet cell model and the workbook operations on cell values."""

from __future__ import annotations

import datetime as dt
import math
import struct
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from .coordinates import (
    area_ref_to_coordinates,
    cell_name_to_coordinates,
    check_cell_in_area,
    coordinates_to_cell_name,
    split_cell_name,
)

FORMULA_TYPE_ARRAY = "array"
FORMULA_TYPE_DATA_TABLE = "dataTable"
FORMULA_TYPE_NORMAL = "normal"
FORMULA_TYPE_SHARED = "shared"

RELATIONSHIP_HYPERLINK = "hyperlink"
CALC_CHAIN_PART = "xl/calcChain.xml"
MAX_CELL_CHARS = 32767
MAX_HYPERLINKS = 65530


class SheetNotFoundError(LookupError):
    """Raised when a worksheet name is not in the workbook."""


@dataclass
class Formula:
    content: str = ""
    t: str = ""
    ref: str = ""
    si: str = ""


@dataclass
class Cell:
    r: str = ""
    s: int = 0
    t: str = ""
    v: str = ""
    f: Formula | None = None
    xml_space: str = ""


@dataclass
class Row:
    r: int
    cells: list[Cell] = field(default_factory=list)
    hidden: bool = False
    height: float = 0.0
    custom_height: bool = False
    outline_level: int = 0


@dataclass
class Hyperlink:
    ref: str
    rid: str = ""
    location: str = ""


@dataclass
class ColumnInfo:
    min: int
    max: int
    width: float = 0.0
    style: int = 0
    hidden: bool = False
    custom_width: bool = False
    outline_level: int = 0


@dataclass
class AutoFilter:
    ref: str


@dataclass
class CalcChainEntry:
    r: str
    i: int = 0


@dataclass
class _Relationship:
    rid: str
    rel_type: str
    target: str
    target_mode: str = ""


@dataclass
class Worksheet:
    rows: list[Row] = field(default_factory=list)
    cols: list[ColumnInfo] | None = None
    merge_cells: list[str] | None = None
    hyperlinks: list[Hyperlink] | None = None
    auto_filter: AutoFilter | None = None
    drawing_rid: str | None = None

    def prepare_cell(self, col: int, row: int) -> Cell:
        """Make sure rows and cells exist up to the position and return that cell."""
        for number in range(len(self.rows) + 1, row + 1):
            self.rows.append(Row(r=number))
        row_data = self.rows[row - 1]
        for number in range(len(row_data.cells) + 1, col + 1):
            row_data.cells.append(Cell(r=coordinates_to_cell_name(number, row_data.r)))
        return row_data.cells[col - 1]


@dataclass
class MergeCell:
    ref: str
    value: str

    def start_axis(self) -> str:
        return self.ref.split(":")[0]

    def end_axis(self) -> str:
        return self.ref.split(":")[1]


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _format_float(value: float, prec: int, bit_size: int) -> str:
    if bit_size == 32:
        value = _to_float32(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if prec >= 0:
        return f"{value:.{prec}f}"
    if bit_size == 32:
        text = next(
            candidate
            for candidate in (f"{value:.{digits}g}" for digits in range(1, 10))
            if _to_float32(float(candidate)) == value
        )
    else:
        text = repr(value)
    return format(Decimal(text).normalize(), "f")


def _excel_time(value: dt.datetime) -> float:
    wall = value.replace(tzinfo=None)
    if wall < dt.datetime(1900, 1, 1):
        return 0.0
    serial = (wall - dt.datetime(1899, 12, 30)).total_seconds() / 86400.0
    if wall < dt.datetime(1900, 3, 1):
        serial -= 1
    return serial


def _rfc3339(value: dt.datetime) -> str:
    text = value.replace(microsecond=0).isoformat()
    if value.microsecond:
        fraction = f"{value.microsecond:06d}".rstrip("0")
        date_part, sep, zone = text.partition("+") if "+" in text[10:] else (text, "", "")
        text = f"{date_part}.{fraction}{sep}{zone}"
    return text.replace("+00:00", "Z")


CellReader = Callable[[Worksheet, Cell], "tuple[str, bool]"]


class SheetBook:
    """A workbook of worksheets with cell level reading and writing."""

    def __init__(self) -> None:
        self.sheets: dict[str, Worksheet] = {"Sheet1": Worksheet()}
        self.shared_strings: list[str] = []
        self.calc_chain: list[CalcChainEntry] | None = None
        self.parts: dict[str, bytes] = {}
        self.content_type_overrides: list[str] = []
        self.cell_formats: list[int] = [0]
        self._sheet_rels: dict[str, list[_Relationship]] = {}

    # sheets

    def new_sheet(self, name: str) -> int:
        if name not in self.sheets:
            self.sheets[name] = Worksheet()
        return self.get_sheet_index(name)

    def get_sheet_index(self, sheet: str) -> int:
        """Return the 1-based position of a sheet, or 0 when it is absent."""
        for index, name in enumerate(self.sheets, start=1):
            if name == sheet:
                return index
        return 0

    def worksheet(self, sheet: str) -> Worksheet:
        try:
            return self.sheets[sheet]
        except KeyError:
            raise SheetNotFoundError(f"sheet {sheet} is not exist") from None

    # relationships

    def add_sheet_relationship(self, sheet: str, rel_type: str, target: str, target_mode: str = "") -> int:
        rels = self._sheet_rels.setdefault(sheet, [])
        number = len(rels) + 1
        rels.append(_Relationship(f"rId{number}", rel_type, target, target_mode))
        return number

    def delete_sheet_relationship(self, sheet: str, rid: str) -> None:
        rels = self._sheet_rels.get(sheet, [])
        self._sheet_rels[sheet] = [rel for rel in rels if rel.rid != rid]

    def sheet_relationship_target(self, sheet: str, rid: str) -> str:
        return next((rel.target for rel in self._sheet_rels.get(sheet, []) if rel.rid == rid), "")

    # helpers

    def merge_cells_parser(self, ws: Worksheet, axis: str) -> str:
        """Map an axis inside a merged area to the area's top-left cell."""
        axis = axis.upper()
        for ref in ws.merge_cells or []:
            if check_cell_in_area(axis, ref):
                axis = ref.split(":")[0]
        return axis

    def _prepare(self, sheet: str, axis: str) -> tuple[Worksheet, Cell, int]:
        ws = self.worksheet(sheet)
        axis = self.merge_cells_parser(ws, axis)
        col, row = cell_name_to_coordinates(axis)
        return ws, ws.prepare_cell(col, row), col

    @staticmethod
    def _column_style(ws: Worksheet, col: int, style: int) -> int:
        if ws.cols is not None and style == 0:
            for info in ws.cols:
                if info.min <= col <= info.max:
                    style = info.style
        return style

    def _set_raw(self, sheet: str, axis: str, value: str, cell_type: str) -> Cell:
        ws, cell, col = self._prepare(sheet, axis)
        cell.s = self._column_style(ws, col, cell.s)
        cell.t = cell_type
        cell.v = value
        return cell

    def _set_default_time_style(self, sheet: str, axis: str, number_format: int) -> None:
        ws = self.worksheet(sheet)
        col, row = cell_name_to_coordinates(self.merge_cells_parser(ws, axis))
        cell = ws.prepare_cell(col, row)
        if cell.s == 0:
            self.cell_formats.append(number_format)
            cell.s = len(self.cell_formats) - 1

    def _get_cell_string(self, sheet: str, axis: str, reader: CellReader) -> str:
        ws = self.worksheet(sheet)
        axis = self.merge_cells_parser(ws, axis)
        _, row = cell_name_to_coordinates(axis)
        last_row = ws.rows[-1].r if ws.rows else 0
        if row > last_row:
            return ""
        for row_data in ws.rows:
            if row_data.r != row:
                continue
            for cell in row_data.cells:
                if cell.r != axis:
                    continue
                value, found = reader(ws, cell)
                if found:
                    return value
        return ""

    def _cell_value(self, cell: Cell) -> str:
        if cell.t == "s":
            try:
                return self.shared_strings[int(cell.v)]
            except (ValueError, IndexError) as exc:
                raise ValueError(f'invalid shared string index "{cell.v}"') from exc
        return cell.v

    # values

    def get_cell_value(self, sheet: str, axis: str) -> str:
        return self._get_cell_string(sheet, axis, lambda ws, cell: (self._cell_value(cell), True))

    def set_cell_value(self, sheet: str, axis: str, value) -> None:
        """Write a value, choosing the cell type from the Python type."""
        if isinstance(value, bool):
            self.set_cell_bool(sheet, axis, value)
        elif isinstance(value, int):
            self.set_cell_int(sheet, axis, value)
        elif isinstance(value, float):
            self.set_cell_float(sheet, axis, value, -1, 64)
        elif isinstance(value, str):
            self.set_cell_str(sheet, axis, value)
        elif isinstance(value, (bytes, bytearray)):
            self.set_cell_str(sheet, axis, bytes(value).decode("utf-8", errors="replace"))
        elif isinstance(value, dt.timedelta):
            days = value.total_seconds() / 86400.0
            self.set_cell_default(sheet, axis, _format_float(days, -1, 32))
            self._set_default_time_style(sheet, axis, 21)
        elif isinstance(value, dt.datetime):
            self._set_cell_time(sheet, axis, value)
        elif value is None:
            self.set_cell_str(sheet, axis, "")
        else:
            self.set_cell_str(sheet, axis, str(value))

    def _set_cell_time(self, sheet: str, axis: str, value: dt.datetime) -> None:
        serial = _excel_time(value)
        if serial > 0:
            self.set_cell_default(sheet, axis, _format_float(serial, -1, 64))
            self._set_default_time_style(sheet, axis, 22)
        else:
            self.set_cell_str(sheet, axis, _rfc3339(value))

    def set_cell_int(self, sheet: str, axis: str, value: int) -> None:
        self._set_raw(sheet, axis, str(int(value)), "")

    def set_cell_bool(self, sheet: str, axis: str, value: bool) -> None:
        self._set_raw(sheet, axis, "1" if value else "0", "b")

    def set_cell_float(self, sheet: str, axis: str, value: float, prec: int, bit_size: int) -> None:
        """Write a number with ``prec`` decimals, or as few as needed when -1."""
        self._set_raw(sheet, axis, _format_float(float(value), prec, bit_size), "")

    def set_cell_str(self, sheet: str, axis: str, value: str) -> None:
        value = value[:MAX_CELL_CHARS]
        cell = self._set_raw(sheet, axis, value, "str")
        if value.startswith(" "):
            cell.xml_space = "preserve"

    def set_cell_default(self, sheet: str, axis: str, value: str) -> None:
        self._set_raw(sheet, axis, value, "")

    # formulas

    def get_cell_formula(self, sheet: str, axis: str) -> str:
        def read(ws: Worksheet, cell: Cell) -> tuple[str, bool]:
            if cell.f is None:
                return "", False
            if cell.f.t == FORMULA_TYPE_SHARED:
                return _shared_formula(ws, cell.f.si), True
            return cell.f.content, True

        return self._get_cell_string(sheet, axis, read)

    def set_cell_formula(self, sheet: str, axis: str, formula: str) -> None:
        _, cell, _ = self._prepare(sheet, axis)
        if not formula:
            cell.f = None
            self.delete_calc_chain(self.get_sheet_index(sheet), axis)
            return
        if cell.f is not None:
            cell.f.content = formula
        else:
            cell.f = Formula(content=formula)

    def delete_calc_chain(self, index: int, axis: str) -> None:
        """Drop calculation chain entries of a sheet index and cell (any cell when empty)."""
        entries = [
            entry
            for entry in self.calc_chain or []
            if not (entry.i == index and (entry.r == axis or axis == ""))
        ]
        if entries:
            self.calc_chain = entries
            return
        self.calc_chain = None
        self.parts.pop(CALC_CHAIN_PART, None)
        self.content_type_overrides = [
            name for name in self.content_type_overrides if name != "/" + CALC_CHAIN_PART
        ]

    # hyperlinks

    def get_cell_hyperlink(self, sheet: str, axis: str) -> tuple[bool, str]:
        split_cell_name(axis)
        ws = self.worksheet(sheet)
        axis = self.merge_cells_parser(ws, axis)
        for link in ws.hyperlinks or []:
            if link.ref == axis:
                if link.rid:
                    return True, self.sheet_relationship_target(sheet, link.rid)
                return True, link.location
        return False, ""

    def set_cell_hyperlink(self, sheet: str, axis: str, link: str, link_type: str) -> None:
        """Add an ``External`` or ``Location`` hyperlink to a cell."""
        split_cell_name(axis)
        ws = self.worksheet(sheet)
        axis = self.merge_cells_parser(ws, axis)
        if ws.hyperlinks is None:
            ws.hyperlinks = []
        if len(ws.hyperlinks) > MAX_HYPERLINKS - 1:
            raise ValueError("over maximum limit hyperlinks in a worksheet")
        if link_type == "External":
            number = self.add_sheet_relationship(sheet, RELATIONSHIP_HYPERLINK, link, link_type)
            data = Hyperlink(ref=axis, rid=f"rId{number}")
        elif link_type == "Location":
            data = Hyperlink(ref=axis, location=link)
        else:
            raise ValueError(f'invalid link type "{link_type}"')
        ws.hyperlinks.append(data)

    # merged cells and rows

    def merge_cell(self, sheet: str, hcell: str, vcell: str) -> None:
        """Merge an area; nothing is added when it overlaps an existing merge."""
        x1, y1, x2, y2 = area_ref_to_coordinates(f"{hcell}:{vcell}")
        if x1 == x2 and y1 == y2:
            return
        x1, x2 = sorted((x1, x2))
        y1, y2 = sorted((y1, y2))
        hcell = coordinates_to_cell_name(x1, y1)
        vcell = coordinates_to_cell_name(x2, y2)
        ws = self.worksheet(sheet)
        ref = f"{hcell}:{vcell}"
        if ws.merge_cells is None:
            ws.merge_cells = [ref]
            return
        for existing in ws.merge_cells:
            corners = existing.split(":")
            if len(corners) != 2:
                raise ValueError(f'invalid area "{existing}"')
            if (
                _safe_in_area(hcell, existing)
                or _safe_in_area(vcell, existing)
                or _safe_in_area(corners[0], ref)
                or _safe_in_area(corners[1], ref)
            ):
                return
        ws.merge_cells.append(ref)

    def set_sheet_row(self, sheet: str, axis: str, values: Sequence) -> None:
        """Write a sequence of values along a row starting at ``axis``."""
        col, row = cell_name_to_coordinates(axis)
        if isinstance(values, (str, bytes, bytearray)) or not isinstance(values, Sequence):
            raise TypeError("sequence of values expected")
        for offset, value in enumerate(values):
            self.set_cell_value(sheet, coordinates_to_cell_name(col + offset, row), value)

    def get_merge_cells(self, sheet: str) -> list[MergeCell]:
        ws = self.worksheet(sheet)
        result = []
        for ref in ws.merge_cells or []:
            try:
                value = self.get_cell_value(sheet, ref.split(":")[0])
            except ValueError:
                value = ""
            result.append(MergeCell(ref=ref, value=value))
        return result


def _safe_in_area(cell: str, area: str) -> bool:
    try:
        return check_cell_in_area(cell, area)
    except ValueError:
        return False


def _shared_formula(ws: Worksheet, si: str) -> str:
    for row in ws.rows:
        for cell in row.cells:
            f = cell.f
            if f is not None and f.ref and f.t == FORMULA_TYPE_SHARED and f.si == si:
                return f.content
    return ""