"""In-memory spreadsheet workbook model with cells, merged areas, columns and charts."""

__version__ = "0.1.0"

__all__ = [
    "coordinates",
    "cells",
    "adjust",
    "columns",
    "chartdefs",
    "chartxml",
    "chart",
]