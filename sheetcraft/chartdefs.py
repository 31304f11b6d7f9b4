"""Chart types, their default properties and the parsed chart format settings."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any

AREA = "area"
AREA_STACKED = "areaStacked"
AREA_PERCENT_STACKED = "areaPercentStacked"
AREA_3D = "area3D"
AREA_3D_STACKED = "area3DStacked"
AREA_3D_PERCENT_STACKED = "area3DPercentStacked"
BAR = "bar"
BAR_STACKED = "barStacked"
BAR_PERCENT_STACKED = "barPercentStacked"
BAR_3D_CLUSTERED = "bar3DClustered"
BAR_3D_STACKED = "bar3DStacked"
BAR_3D_PERCENT_STACKED = "bar3DPercentStacked"
BAR_3D_CONE_CLUSTERED = "bar3DConeClustered"
BAR_3D_CONE_STACKED = "bar3DConeStacked"
BAR_3D_CONE_PERCENT_STACKED = "bar3DConePercentStacked"
BAR_3D_PYRAMID_CLUSTERED = "bar3DPyramidClustered"
BAR_3D_PYRAMID_STACKED = "bar3DPyramidStacked"
BAR_3D_PYRAMID_PERCENT_STACKED = "bar3DPyramidPercentStacked"
BAR_3D_CYLINDER_CLUSTERED = "bar3DCylinderClustered"
BAR_3D_CYLINDER_STACKED = "bar3DCylinderStacked"
BAR_3D_CYLINDER_PERCENT_STACKED = "bar3DCylinderPercentStacked"
COL = "col"
COL_STACKED = "colStacked"
COL_PERCENT_STACKED = "colPercentStacked"
COL_3D = "col3D"
COL_3D_CLUSTERED = "col3DClustered"
COL_3D_STACKED = "col3DStacked"
COL_3D_PERCENT_STACKED = "col3DPercentStacked"
COL_3D_CONE = "col3DCone"
COL_3D_CONE_CLUSTERED = "col3DConeClustered"
COL_3D_CONE_STACKED = "col3DConeStacked"
COL_3D_CONE_PERCENT_STACKED = "col3DConePercentStacked"
COL_3D_PYRAMID = "col3DPyramid"
COL_3D_PYRAMID_CLUSTERED = "col3DPyramidClustered"
COL_3D_PYRAMID_STACKED = "col3DPyramidStacked"
COL_3D_PYRAMID_PERCENT_STACKED = "col3DPyramidPercentStacked"
COL_3D_CYLINDER = "col3DCylinder"
COL_3D_CYLINDER_CLUSTERED = "col3DCylinderClustered"
COL_3D_CYLINDER_STACKED = "col3DCylinderStacked"
COL_3D_CYLINDER_PERCENT_STACKED = "col3DCylinderPercentStacked"
DOUGHNUT = "doughnut"
LINE = "line"
PIE = "pie"
PIE_3D = "pie3D"
RADAR = "radar"
SCATTER = "scatter"

CHART_TYPES: tuple[str, ...] = (
    AREA, AREA_STACKED, AREA_PERCENT_STACKED,
    AREA_3D, AREA_3D_STACKED, AREA_3D_PERCENT_STACKED,
    BAR, BAR_STACKED, BAR_PERCENT_STACKED,
    BAR_3D_CLUSTERED, BAR_3D_STACKED, BAR_3D_PERCENT_STACKED,
    BAR_3D_CONE_CLUSTERED, BAR_3D_CONE_STACKED, BAR_3D_CONE_PERCENT_STACKED,
    BAR_3D_PYRAMID_CLUSTERED, BAR_3D_PYRAMID_STACKED, BAR_3D_PYRAMID_PERCENT_STACKED,
    BAR_3D_CYLINDER_CLUSTERED, BAR_3D_CYLINDER_STACKED, BAR_3D_CYLINDER_PERCENT_STACKED,
    COL, COL_STACKED, COL_PERCENT_STACKED,
    COL_3D, COL_3D_CLUSTERED, COL_3D_STACKED, COL_3D_PERCENT_STACKED,
    COL_3D_CONE, COL_3D_CONE_CLUSTERED, COL_3D_CONE_STACKED, COL_3D_CONE_PERCENT_STACKED,
    COL_3D_PYRAMID, COL_3D_PYRAMID_CLUSTERED, COL_3D_PYRAMID_STACKED,
    COL_3D_PYRAMID_PERCENT_STACKED,
    COL_3D_CYLINDER, COL_3D_CYLINDER_CLUSTERED, COL_3D_CYLINDER_STACKED,
    COL_3D_CYLINDER_PERCENT_STACKED,
    DOUGHNUT, LINE, PIE, PIE_3D, RADAR, SCATTER,
)


def _is_3d(chart_type: str) -> bool:
    return "3D" in chart_type and not chart_type.startswith("pie")


def _grouping(chart_type: str) -> str:
    if chart_type.endswith("PercentStacked"):
        return "percentStacked"
    if chart_type.endswith("Stacked"):
        return "stacked"
    if chart_type.endswith("Clustered") or chart_type in (BAR, COL):
        return "clustered"
    return "standard"


VIEW_3D_ROT_X: dict[str, int] = {
    t: 30 if t == PIE_3D else 15 if _is_3d(t) else 0 for t in CHART_TYPES
}
VIEW_3D_ROT_Y: dict[str, int] = {t: 20 if _is_3d(t) else 0 for t in CHART_TYPES}
VIEW_3D_DEPTH_PERCENT: dict[str, int] = {t: 100 for t in CHART_TYPES}
VIEW_3D_R_ANG_AX: dict[str, int] = {t: 1 if _is_3d(t) else 0 for t in CHART_TYPES}
VAL_AX_NUM_FMT_FORMAT_CODE: dict[str, str] = {
    t: "0%" if t.endswith("PercentStacked") else "General" for t in CHART_TYPES
}
VAL_AX_CROSS_BETWEEN: dict[str, str] = {
    t: "midCat" if t.startswith("area") else "between" for t in CHART_TYPES
}
PLOT_AREA_CHART_GROUPING: dict[str, str] = {
    **{t: _grouping(t) for t in CHART_TYPES if t.startswith(("area", "bar", "col"))},
    LINE: "standard",
}
PLOT_AREA_CHART_BAR_DIR: dict[str, str] = {
    **{t: "bar" for t in CHART_TYPES if t.startswith("bar")},
    **{t: "col" for t in CHART_TYPES if t.startswith("col")},
    LINE: "standard",
}
CHART_SHAPES: dict[str, str] = {
    t: shape
    for t in CHART_TYPES
    for marker, shape in (("Cone", "cone"), ("Pyramid", "pyramid"), ("Cylinder", "cylinder"))
    if marker in t
}
LEGEND_POSITION: dict[str, str] = {
    "bottom": "b",
    "left": "l",
    "right": "r",
    "top": "t",
    "top_right": "tr",
}
ORIENTATION: dict[bool, str] = {True: "maxMin", False: "minMax"}
CAT_AX_POS: dict[bool, str] = {True: "t", False: "b"}
VAL_AX_POS: dict[bool, str] = {True: "r", False: "l"}


def _json(key: str, kind: Any) -> dict[str, Any]:
    return {"json": key, "kind": kind}


@dataclass
class ChartDimension:
    width: int = field(default=480, metadata=_json("width", "int"))
    height: int = field(default=290, metadata=_json("height", "int"))


@dataclass
class PictureFormat:
    f_prints_with_sheet: bool = field(default=True, metadata=_json("print_obj", "bool"))
    f_locks_with_sheet: bool = field(default=False, metadata=_json("locked", "bool"))
    no_change_aspect: bool = field(default=False, metadata=_json("lock_aspect_ratio", "bool"))
    offset_x: int = field(default=0, metadata=_json("x_offset", "int"))
    offset_y: int = field(default=0, metadata=_json("y_offset", "int"))
    x_scale: float = field(default=1.0, metadata=_json("x_scale", "float"))
    y_scale: float = field(default=1.0, metadata=_json("y_scale", "float"))
    positioning: str = field(default="", metadata=_json("positioning", "str"))


@dataclass
class ChartLegend:
    position: str = field(default="bottom", metadata=_json("position", "str"))
    show_legend_key: bool = field(default=False, metadata=_json("show_legend_key", "bool"))


@dataclass
class ChartTitle:
    name: str = field(default=" ", metadata=_json("name", "str"))


@dataclass
class ChartSeries:
    name: str = field(default="", metadata=_json("name", "str"))
    categories: str = field(default="", metadata=_json("categories", "str"))
    values: str = field(default="", metadata=_json("values", "str"))


@dataclass
class ChartPlotArea:
    show_bubble_size: bool = field(default=False, metadata=_json("show_bubble_size", "bool"))
    show_cat_name: bool = field(default=False, metadata=_json("show_cat_name", "bool"))
    show_leader_lines: bool = field(default=False, metadata=_json("show_leader_lines", "bool"))
    show_percent: bool = field(default=False, metadata=_json("show_percent", "bool"))
    show_ser_name: bool = field(default=False, metadata=_json("show_series_name", "bool"))
    show_val: bool = field(default=False, metadata=_json("show_val", "bool"))


@dataclass
class ChartAxis:
    reverse_order: bool = field(default=False, metadata=_json("reverse_order", "bool"))
    maximum: float = field(default=0.0, metadata=_json("maximum", "float"))
    minimum: float = field(default=0.0, metadata=_json("minimum", "float"))


@dataclass
class ChartFormat:
    type: str = field(default="", metadata=_json("type", "str"))
    series: list[ChartSeries] = field(
        default_factory=list, metadata=_json("series", ("list", ChartSeries))
    )
    format: PictureFormat = field(
        default_factory=PictureFormat, metadata=_json("format", PictureFormat)
    )
    dimension: ChartDimension = field(
        default_factory=ChartDimension, metadata=_json("dimension", ChartDimension)
    )
    legend: ChartLegend = field(default_factory=ChartLegend, metadata=_json("legend", ChartLegend))
    title: ChartTitle = field(default_factory=ChartTitle, metadata=_json("title", ChartTitle))
    plotarea: ChartPlotArea = field(
        default_factory=ChartPlotArea, metadata=_json("plotarea", ChartPlotArea)
    )
    show_blanks_as: str = field(default="gap", metadata=_json("show_blanks_as", "str"))
    x_axis: ChartAxis = field(default_factory=ChartAxis, metadata=_json("x_axis", ChartAxis))
    y_axis: ChartAxis = field(default_factory=ChartAxis, metadata=_json("y_axis", ChartAxis))


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _mismatch(value: Any, path: str, kind: str) -> ValueError:
    return ValueError(f"cannot unmarshal {_json_type(value)} into field {path} of type {kind}")


def _decode_scalar(value: Any, kind: str, path: str) -> Any:
    if kind == "bool" and isinstance(value, bool):
        return value
    if kind == "str" and isinstance(value, str):
        return value
    if kind == "int" and isinstance(value, int) and not isinstance(value, bool):
        return value
    if kind == "float" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise _mismatch(value, path, kind)


def _update(target: Any, data: Any, path: str) -> None:
    if not isinstance(data, dict):
        raise _mismatch(data, path or "chart format", "object")
    for spec in fields(target):
        key = spec.metadata["json"]
        if key not in data or data[key] is None:
            continue
        value = data[key]
        kind = spec.metadata["kind"]
        here = f"{path}.{key}" if path else key
        if isinstance(kind, tuple):
            if not isinstance(value, list):
                raise _mismatch(value, here, "array")
            items = []
            for position, item in enumerate(value):
                element = kind[1]()
                if item is not None:
                    _update(element, item, f"{here}[{position}]")
                items.append(element)
            setattr(target, spec.name, items)
        elif isinstance(kind, type):
            _update(getattr(target, spec.name), value, here)
        else:
            setattr(target, spec.name, _decode_scalar(value, kind, here))


def parse_format_chart_set(format_set: str) -> ChartFormat:
    """Parse JSON chart settings on top of the default chart format."""
    result = ChartFormat()
    if not format_set.strip():
        raise ValueError("unexpected end of JSON input")
    try:
        data = json.loads(format_set)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid chart format: {exc.msg}") from exc
    if data is not None:
        _update(result, data, "")
    return result