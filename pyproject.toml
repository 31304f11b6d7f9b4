[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sheetcraft"
version = "0.1.0"
description = "In-memory spreadsheet workbook model with cells, merged areas, columns and charts"
requires-python = ">=3.10"
dependencies = []
keywords = ["spreadsheet", "xlsx", "workbook", "cells", "charts", "drawingml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial :: Spreadsheet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sheetcraft"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
