import datetime as dt

import pytest

from sheetcraft.cells import (
    CALC_CHAIN_PART,
    CalcChainEntry,
    Cell,
    ColumnInfo,
    Formula,
    MergeCell,
    SheetBook,
    SheetNotFoundError,
    Worksheet,
)

SHEET = "Sheet1"


def cell_at(book, col, row, sheet=SHEET):
    return book.worksheet(sheet).rows[row - 1].cells[col - 1]


def test_set_cell_float_no_decimal():
    book = SheetBook()
    book.set_cell_float(SHEET, "A1", 123.0, -1, 64)
    book.set_cell_float(SHEET, "A2", 123.0, 1, 64)
    assert book.get_cell_value(SHEET, "A1") == "123"
    assert book.get_cell_value(SHEET, "A2") == "123.0"


def test_set_cell_float_precision_limit():
    book = SheetBook()
    book.set_cell_float(SHEET, "A1", 123.42, 1, 64)
    assert book.get_cell_value(SHEET, "A1") == "123.4"


def test_set_cell_float_no_limit():
    book = SheetBook()
    book.set_cell_float(SHEET, "A1", 123.42, -1, 64)
    assert book.get_cell_value(SHEET, "A1") == "123.42"


def test_set_cell_float_example():
    book = SheetBook()
    book.set_cell_float(SHEET, "A1", 3.14159265, 2, 64)
    assert book.get_cell_value(SHEET, "A1") == "3.14"


def test_set_cell_float_32_bit():
    book = SheetBook()
    book.set_cell_float(SHEET, "A1", 1.325, -1, 32)
    book.set_cell_float(SHEET, "A2", 1e20, -1, 64)
    assert book.get_cell_value(SHEET, "A1") == "1.325"
    assert book.get_cell_value(SHEET, "A2") == "100000000000000000000"


def test_get_value_of_missing_cell():
    book = SheetBook()
    book.set_cell_value(SHEET, "A1", "x")
    assert book.get_cell_value(SHEET, "B1") == ""
    assert book.get_cell_value(SHEET, "A9") == ""


def test_set_cell_value_types():
    book = SheetBook()
    book.set_cell_value(SHEET, "A1", True)
    book.set_cell_value(SHEET, "B1", 42)
    book.set_cell_value(SHEET, "C1", b"bytes")
    book.set_cell_value(SHEET, "D1", None)
    book.set_cell_value(SHEET, "E1", 2.5)
    assert cell_at(book, 1, 1).t == "b"
    assert book.get_cell_value(SHEET, "A1") == "1"
    assert book.get_cell_value(SHEET, "B1") == "42"
    assert cell_at(book, 2, 1).t == ""
    assert book.get_cell_value(SHEET, "C1") == "bytes"
    assert cell_at(book, 4, 1).t == "str"
    assert book.get_cell_value(SHEET, "D1") == ""
    assert book.get_cell_value(SHEET, "E1") == "2.5"


def test_set_cell_value_datetime_and_timedelta():
    book = SheetBook()
    book.set_cell_value(SHEET, "A1", dt.datetime(2019, 1, 1))
    book.set_cell_value(SHEET, "B1", dt.timedelta(hours=12))
    book.set_cell_value(SHEET, "C1", dt.datetime(1800, 1, 1))
    assert book.get_cell_value(SHEET, "A1") == "43466"
    assert book.cell_formats[cell_at(book, 1, 1).s] == 22
    assert book.get_cell_value(SHEET, "B1") == "0.5"
    assert book.cell_formats[cell_at(book, 2, 1).s] == 21
    assert book.get_cell_value(SHEET, "C1") == "1800-01-01T00:00:00"


def test_set_cell_str_leading_space_and_limit():
    book = SheetBook()
    book.set_cell_str(SHEET, "A1", " padded")
    book.set_cell_str(SHEET, "A2", "x" * 40000)
    assert cell_at(book, 1, 1).xml_space == "preserve"
    assert len(book.get_cell_value(SHEET, "A2")) == 32767


def test_column_style_applied():
    book = SheetBook()
    book.worksheet(SHEET).cols = [ColumnInfo(min=1, max=3, style=7)]
    book.set_cell_int(SHEET, "B2", 5)
    assert cell_at(book, 2, 2).s == 7


def test_shared_string_value():
    book = SheetBook()
    book.shared_strings = ["hello"]
    ws = book.worksheet(SHEET)
    cell = ws.prepare_cell(1, 1)
    cell.t, cell.v = "s", "0"
    assert book.get_cell_value(SHEET, "A1") == "hello"


def test_prepare_cell_fills_rows_and_cells():
    ws = Worksheet()
    cell = ws.prepare_cell(3, 2)
    assert cell.r == "C2"
    assert [row.r for row in ws.rows] == [1, 2]
    assert [c.r for c in ws.rows[1].cells] == ["A2", "B2", "C2"]


def test_sheet_not_exist():
    book = SheetBook()
    with pytest.raises(SheetNotFoundError, match="sheet SheetN is not exist"):
        book.get_cell_value("SheetN", "A1")
    with pytest.raises(SheetNotFoundError):
        book.set_cell_str("SheetN", "A1", "x")


def test_sheet_index():
    book = SheetBook()
    assert book.new_sheet("Sheet2") == 2
    assert book.new_sheet("Sheet2") == 2
    assert book.get_sheet_index("Missing") == 0


def test_formula_set_get_and_shared():
    book = SheetBook()
    book.set_cell_formula(SHEET, "A1", "SUM(B1:B3)")
    assert book.get_cell_formula(SHEET, "A1") == "SUM(B1:B3)"
    book.set_cell_formula(SHEET, "A1", "B1*2")
    assert book.get_cell_formula(SHEET, "A1") == "B1*2"
    ws = book.worksheet(SHEET)
    ws.prepare_cell(3, 1).f = Formula(content="A1+1", t="shared", ref="C1:C3", si="0")
    ws.prepare_cell(3, 2).f = Formula(t="shared", si="0")
    assert book.get_cell_formula(SHEET, "C2") == "A1+1"
    assert book.get_cell_formula(SHEET, "D1") == ""


def test_clear_formula_updates_calc_chain():
    book = SheetBook()
    book.parts[CALC_CHAIN_PART] = b"<calcChain/>"
    book.content_type_overrides = ["/xl/calcChain.xml", "/xl/workbook.xml"]
    book.calc_chain = [CalcChainEntry("A1", 1), CalcChainEntry("B1", 1)]
    book.set_cell_formula(SHEET, "A1", "")
    assert book.calc_chain == [CalcChainEntry("B1", 1)]
    book.set_cell_formula(SHEET, "B1", "")
    assert book.calc_chain is None
    assert CALC_CHAIN_PART not in book.parts
    assert book.content_type_overrides == ["/xl/workbook.xml"]


def test_delete_calc_chain_whole_sheet():
    book = SheetBook()
    book.calc_chain = [CalcChainEntry("A1", 1), CalcChainEntry("A1", 2)]
    book.delete_calc_chain(1, "")
    assert book.calc_chain == [CalcChainEntry("A1", 2)]


def test_hyperlinks():
    book = SheetBook()
    book.set_cell_hyperlink(SHEET, "A3", "https://example.com", "External")
    book.set_cell_hyperlink(SHEET, "B3", "Sheet1!A40", "Location")
    assert book.get_cell_hyperlink(SHEET, "A3") == (True, "https://example.com")
    assert book.get_cell_hyperlink(SHEET, "B3") == (True, "Sheet1!A40")
    assert book.get_cell_hyperlink(SHEET, "C3") == (False, "")
    assert book.worksheet(SHEET).hyperlinks[0].rid == "rId1"


def test_hyperlink_errors():
    book = SheetBook()
    with pytest.raises(ValueError, match='invalid link type "None"'):
        book.set_cell_hyperlink(SHEET, "A1", "x", "None")
    with pytest.raises(ValueError, match='invalid cell name "A"'):
        book.set_cell_hyperlink(SHEET, "A", "x", "Location")
    with pytest.raises(ValueError, match='invalid cell name "A"'):
        book.get_cell_hyperlink(SHEET, "A")


def test_hyperlink_in_merged_area():
    book = SheetBook()
    book.merge_cell(SHEET, "A1", "B2")
    book.set_cell_hyperlink(SHEET, "B2", "Sheet1!C9", "Location")
    assert book.worksheet(SHEET).hyperlinks[0].ref == "A1"
    assert book.get_cell_hyperlink(SHEET, "b1") == (True, "Sheet1!C9")


def test_merge_cell_normalizes_and_skips_overlap():
    book = SheetBook()
    book.merge_cell(SHEET, "C1", "B3")
    book.merge_cell(SHEET, "C3", "D4")
    book.merge_cell(SHEET, "F1", "G2")
    assert book.worksheet(SHEET).merge_cells == ["B1:C3", "F1:G2"]


def test_merge_single_cell_does_nothing():
    book = SheetBook()
    book.merge_cell(SHEET, "A1", "A1")
    assert book.worksheet(SHEET).merge_cells is None


def test_merge_cell_invalid_existing_area():
    book = SheetBook()
    book.worksheet(SHEET).merge_cells = ["A1"]
    with pytest.raises(ValueError, match='invalid area "A1"'):
        book.merge_cell(SHEET, "C1", "D2")


def test_write_into_merged_cell_goes_to_top_left():
    book = SheetBook()
    book.merge_cell(SHEET, "A1", "B2")
    book.set_cell_value(SHEET, "B2", "merged")
    assert book.get_cell_value(SHEET, "A1") == "merged"
    assert book.get_cell_value(SHEET, "B2") == "merged"


def test_set_sheet_row():
    book = SheetBook()
    book.set_sheet_row(SHEET, "B6", ["1", None, 2])
    assert book.get_cell_value(SHEET, "B6") == "1"
    assert book.get_cell_value(SHEET, "C6") == ""
    assert book.get_cell_value(SHEET, "D6") == "2"
    with pytest.raises(TypeError):
        book.set_sheet_row(SHEET, "B6", "abc")


def test_get_merge_cells():
    wants = [("A1", "A1", "B1"), ("A2", "A2", "A3"), ("A4", "A4", "B5"), ("A7", "A7", "C10")]
    book = SheetBook()
    for value, start, end in wants:
        book.set_cell_value(SHEET, start, value)
    for _, start, end in wants:
        book.merge_cell(SHEET, start, end)
    merged = book.get_merge_cells(SHEET)
    assert len(merged) == len(wants)
    for item, (value, start, end) in zip(merged, wants):
        assert item.value == value
        assert item.start_axis() == start
        assert item.end_axis() == end
    with pytest.raises(SheetNotFoundError, match="sheet SheetN is not exist"):
        book.get_merge_cells("SheetN")


def test_merge_cell_axes():
    item = MergeCell(ref="D4:E10", value="cell value")
    assert (item.start_axis(), item.end_axis()) == ("D4", "E10")


def test_get_merge_cells_empty():
    book = SheetBook()
    assert book.get_merge_cells(SHEET) == []


def test_cell_defaults():
    cell = Cell(r="A1")
    assert (cell.s, cell.t, cell.v, cell.f) == (0, "", "", None)
    book = SheetBook()
    book.set_cell_default(SHEET, "A1", "=raw")
    assert book.get_cell_value(SHEET, "A1") == "=raw"