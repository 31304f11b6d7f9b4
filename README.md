# sheetcraft

A small, dependency-free Python library that models a spreadsheet workbook in
memory: cell values, formulas and hyperlinks, merged areas, column settings,
keeping references consistent when columns or rows move, and charts rendered
as DrawingML chart XML.

## Installation

```
pip install sheetcraft
```

## Cell references

`sheetcraft.coordinates` converts between cell names and numeric coordinates:

```python
from sheetcraft.coordinates import (
    cell_name_to_coordinates,
    coordinates_to_cell_name,
    check_cell_in_area,
    column_name_to_number,
)

cell_name_to_coordinates("C2")        # (3, 2)
coordinates_to_cell_name(28, 5)       # "AB5"
column_name_to_number("AK")           # 37
check_cell_in_area("B9", "A1:B9")     # True
```

`split_cell_name`, `join_cell_name`, `column_number_to_name`,
`area_ref_to_coordinates` and `coordinates_to_area_ref` are also available.
Invalid names and coordinates raise `ValueError`.

## Cells, formulas, hyperlinks and merged areas

`sheetcraft.cells.SheetBook` holds worksheets (it starts with `Sheet1`; add
more with `new_sheet`):

```python
from sheetcraft.cells import SheetBook

book = SheetBook()
book.set_cell_float("Sheet1", "A1", 3.14159265, 2, 64)
book.get_cell_value("Sheet1", "A1")   # "3.14"

book.set_cell_value("Sheet1", "B1", "hello")
book.set_cell_formula("Sheet1", "C1", "SUM(A1:A2)")
book.get_cell_formula("Sheet1", "C1")  # "SUM(A1:A2)"

book.set_cell_hyperlink("Sheet1", "D1", "Sheet1!A40", "Location")
book.get_cell_hyperlink("Sheet1", "D1")  # (True, "Sheet1!A40")

book.merge_cell("Sheet1", "B1", "C2")
for merged in book.get_merge_cells("Sheet1"):
    print(merged.ref, merged.value, merged.start_axis(), merged.end_axis())
```

`set_cell_value` picks the cell type from the Python value: `bool`, `int`,
`float`, `str`, `bytes`, `datetime.timedelta`, `datetime.datetime` and `None`;
anything else is stored as its `str()`. `set_sheet_row` writes a sequence of
values along a row. Strings are cut to 32767 characters. Hyperlink types are
`"External"` and `"Location"`; other types raise `ValueError`.

Using a sheet that does not exist raises `SheetNotFoundError` (a
`LookupError`) with the message `sheet <name> is not exist`.

## Columns

`sheetcraft.columns.ColumnBook` extends `SheetBook` with column visibility,
outline levels, widths and styles, and with inserting or removing columns:

```python
from sheetcraft.columns import ColumnBook

book = ColumnBook()
book.set_col_width("Sheet1", "A", "C", 20)
book.get_col_width("Sheet1", "B")      # 20
book.set_col_visible("Sheet1", "D", False)
book.set_col_style("Sheet1", "C:F", 3)
book.insert_col("Sheet1", "B")
book.remove_col("Sheet1", "B")
```

Inserting or removing a column goes through `sheetcraft.adjust.adjust_sheet`,
which shifts cell references, hyperlinks, merged areas, the auto filter and
the calculation chain. It works for rows too, with `AdjustDirection.ROWS`.

## Charts

`sheetcraft.chart.Workbook` extends `ColumnBook`. It takes a chart description
as JSON, anchors the chart at a cell and stores the chart XML:

```python
from sheetcraft.chart import Workbook

book = Workbook()
book.add_chart("Sheet1", "E4", '{"type":"col3DClustered",'
               '"series":[{"name":"Sheet1!$A$2","categories":"Sheet1!$B$1:$D$1",'
               '"values":"Sheet1!$B$2:$D$2"}],'
               '"title":{"name":"Fruit"}}')
print(book.count_charts())   # 1
chart_bytes = book.chart_xml(1)
drawing_bytes = book.drawings["xl/drawings/drawing1.xml"].to_xml()
```

The JSON settings are parsed by `sheetcraft.chartdefs.parse_format_chart_set`
on top of defaults (480 × 290 pixels, legend at the bottom, blanks shown as
gaps). Supported types include area, bar and column charts (2D and 3D, with
cone, pyramid and cylinder shapes), doughnut, line, pie, 3D pie, radar and
scatter. An unknown type raises `ValueError`. The XML building blocks live in
`sheetcraft.chartxml`.

## What the package does not do

Everything stays in memory. There is no opening or saving of `.xlsx` files,
no styles beyond plain style indices, no row insertion or removal commands,
and no way to create an auto filter; the chart and drawing XML are produced
as bytes for the caller to store. There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```