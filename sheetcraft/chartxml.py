"""Build the DrawingML chart part for a parsed chart format."""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from typing import Any

from .chartdefs import (
    AREA_PERCENT_STACKED,
    BAR_PERCENT_STACKED,
    BAR_STACKED,
    CAT_AX_POS,
    CHART_SHAPES,
    COL_PERCENT_STACKED,
    COL_STACKED,
    DOUGHNUT,
    LEGEND_POSITION,
    LINE,
    ORIENTATION,
    PIE,
    PIE_3D,
    PLOT_AREA_CHART_BAR_DIR,
    PLOT_AREA_CHART_GROUPING,
    RADAR,
    SCATTER,
    VAL_AX_CROSS_BETWEEN,
    VAL_AX_NUM_FMT_FORMAT_CODE,
    VAL_AX_POS,
    VIEW_3D_DEPTH_PERCENT,
    VIEW_3D_R_ANG_AX,
    VIEW_3D_ROT_X,
    VIEW_3D_ROT_Y,
    ChartAxis,
    ChartFormat,
)

C_NS = "http://schemas.openxmlformats.org/drawingml/2006/chart"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
C16R2_NS = "http://schemas.microsoft.com/office/drawing/2015/06/chart"

CAT_AX_ID = 754001152
VAL_AX_ID = 753999904

ET.register_namespace("c", C_NS)
ET.register_namespace("a", A_NS)

_OVERLAP_TYPES = frozenset(
    {COL_STACKED, BAR_STACKED, BAR_PERCENT_STACKED, COL_PERCENT_STACKED, AREA_PERCENT_STACKED}
)


def _c(tag: str) -> str:
    return f"{{{C_NS}}}{tag}"


def _a(tag: str) -> str:
    return f"{{{A_NS}}}{tag}"


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            if math.isnan(value):
                return "NaN"
            return "+Inf" if value > 0 else "-Inf"
        if value == int(value) and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def _el(parent: ET.Element | None, tag: str, attrs: dict[str, Any] | None = None) -> ET.Element:
    clean = {key: _text(value) for key, value in (attrs or {}).items() if value is not None}
    if parent is None:
        return ET.Element(tag, clean)
    return ET.SubElement(parent, tag, clean)


def _val(parent: ET.Element, tag: str, value: Any) -> ET.Element:
    return _el(parent, _c(tag), {"val": value})


def _solid_fill(parent: ET.Element, color: str, lum_mod: int | None = None,
                lum_off: int | None = None) -> ET.Element:
    fill = _el(parent, _a("solidFill"))
    clr = _el(fill, _a("schemeClr"), {"val": color})
    if lum_mod is not None:
        _el(clr, _a("lumMod"), {"val": lum_mod})
    if lum_off is not None:
        _el(clr, _a("lumOff"), {"val": lum_off})
    return fill


def _fonts(parent: ET.Element) -> None:
    _el(parent, _a("latin"), {"typeface": "+mn-lt"})
    _el(parent, _a("ea"), {"typeface": "+mn-ea"})
    _el(parent, _a("cs"), {"typeface": "+mn-cs"})


def chart_shape(chart_type: str) -> str | None:
    """Return the bar shape (cone, pyramid or cylinder) of a chart type, if any."""
    return CHART_SHAPES.get(chart_type)


def _series_sp_pr(index: int, chart_type: str) -> ET.Element | None:
    if chart_type == SCATTER:
        sp_pr = _el(None, _c("spPr"))
        ln = _el(sp_pr, _a("ln"), {"w": 25400})
        _el(ln, _a("noFill"))
        return sp_pr
    if chart_type == LINE:
        sp_pr = _el(None, _c("spPr"))
        ln = _el(sp_pr, _a("ln"), {"w": 25400, "cap": "rnd"})
        if index < 6:
            _solid_fill(ln, f"accent{index + 1}")
        return sp_pr
    return None


def _series_marker(index: int, chart_type: str) -> ET.Element | None:
    if chart_type != SCATTER:
        return None
    marker = _el(None, _c("marker"))
    _val(marker, "symbol", "circle")
    _val(marker, "size", 5)
    if index < 6:
        sp_pr = _el(marker, _c("spPr"))
        _solid_fill(sp_pr, f"accent{index + 1}")
        ln = _el(sp_pr, _a("ln"), {"w": 9252})
        _solid_fill(ln, f"accent{index + 1}")
    return marker


def _series_dpt(index: int, chart_type: str) -> ET.Element | None:
    if chart_type not in (PIE, PIE_3D):
        return None
    dpt = _el(None, _c("dPt"))
    _val(dpt, "idx", index)
    _val(dpt, "bubble3D", False)
    sp_pr = _el(dpt, _c("spPr"))
    _solid_fill(sp_pr, f"accent{index + 1}")
    ln = _el(sp_pr, _a("ln"), {"w": 25400, "cap": "rnd"})
    _solid_fill(ln, f"lt{index + 1}")
    sp3d = _el(sp_pr, _a("sp3d"), {"contourW": 25400})
    contour = _el(sp3d, _a("contourClr"))
    _el(contour, _a("schemeClr"), {"val": f"lt{index + 1}"})
    return dpt


def _draw_dlbls(format_set: ChartFormat) -> ET.Element:
    dlbls = _el(None, _c("dLbls"))
    plot = format_set.plotarea
    _val(dlbls, "showLegendKey", format_set.legend.show_legend_key)
    _val(dlbls, "showVal", plot.show_val)
    _val(dlbls, "showCatName", plot.show_cat_name)
    _val(dlbls, "showSerName", plot.show_ser_name)
    _val(dlbls, "showPercent", plot.show_percent)
    _val(dlbls, "showBubbleSize", plot.show_bubble_size)
    _val(dlbls, "showLeaderLines", plot.show_leader_lines)
    return dlbls


def _ref(parent: ET.Element, tag: str, ref_tag: str, formula: str) -> None:
    holder = _el(parent, _c(tag))
    ref = _el(holder, _c(ref_tag))
    _el(ref, _c("f")).text = formula


def draw_chart_series(format_set: ChartFormat) -> list[ET.Element]:
    """Return the ``c:ser`` elements, one for each series of the chart."""
    chart_type = format_set.type
    result = []
    for index, series in enumerate(format_set.series):
        ser = _el(None, _c("ser"))
        _val(ser, "idx", index)
        _val(ser, "order", index)
        _ref(ser, "tx", "strRef", series.name)
        for part in (
            _series_sp_pr(index, chart_type),
            _series_marker(index, chart_type),
            _series_dpt(index, chart_type),
        ):
            if part is not None:
                ser.append(part)
        if chart_type == SCATTER:
            _ref(ser, "xVal", "strRef", series.categories)
            _ref(ser, "yVal", "numRef", series.values)
        else:
            ser.append(_draw_dlbls(format_set))
            _ref(ser, "cat", "strRef", series.categories)
            _ref(ser, "val", "numRef", series.values)
        result.append(ser)
    return result


def _plot_area_sp_pr(parent: ET.Element) -> None:
    sp_pr = _el(parent, _c("spPr"))
    ln = _el(sp_pr, _a("ln"), {"w": 9525, "cap": "flat", "cmpd": "sng", "algn": "ctr"})
    _solid_fill(ln, "tx1", 15000, 85000)


def _plot_area_tx_pr(parent: ET.Element) -> None:
    tx_pr = _el(parent, _c("txPr"))
    _el(tx_pr, _a("bodyPr"), {
        "rot": -60000000,
        "spcFirstLastPara": True,
        "vertOverflow": "ellipsis",
        "vert": "horz",
        "wrap": "square",
        "anchor": "ctr",
        "anchorCtr": True,
    })
    _el(tx_pr, _a("lstStyle"))
    p = _el(tx_pr, _a("p"))
    ppr = _el(p, _a("pPr"))
    def_rpr = _el(ppr, _a("defRPr"), {
        "sz": 900, "u": "none", "strike": "noStrike", "kern": 1200,
    })
    _solid_fill(def_rpr, "tx1", 15000, 85000)
    _fonts(def_rpr)
    _el(p, _a("endParaRPr"), {"lang": "en-US"})


def _axis_head(axis: ChartAxis, ax_id: int, position: str, tag: str) -> ET.Element:
    ax = _el(None, _c(tag))
    _val(ax, "axId", ax_id)
    scaling = _el(ax, _c("scaling"))
    _val(scaling, "orientation", ORIENTATION[axis.reverse_order])
    if axis.maximum != 0:
        _val(scaling, "max", float(axis.maximum))
    if axis.minimum != 0:
        _val(scaling, "min", float(axis.minimum))
    _val(ax, "delete", False)
    _val(ax, "axPos", position)
    return ax


def _axis_body(ax: ET.Element, format_code: str, cross_ax: int) -> None:
    _el(ax, _c("numFmt"), {"formatCode": format_code, "sourceLinked": True})
    _val(ax, "majorTickMark", "none")
    _val(ax, "minorTickMark", "none")
    _val(ax, "tickLblPos", "nextTo")
    _plot_area_sp_pr(ax)
    _plot_area_tx_pr(ax)
    _val(ax, "crossAx", cross_ax)
    _val(ax, "crosses", "autoZero")


def draw_plot_area_cat_ax(format_set: ChartFormat) -> ET.Element:
    """Return the ``c:catAx`` element built from the x axis settings."""
    axis = format_set.x_axis
    ax = _axis_head(axis, CAT_AX_ID, CAT_AX_POS[axis.reverse_order], "catAx")
    _axis_body(ax, "General", VAL_AX_ID)
    _val(ax, "auto", True)
    _val(ax, "lblAlgn", "ctr")
    _val(ax, "lblOffset", 100)
    _val(ax, "noMultiLvlLbl", False)
    return ax


def draw_plot_area_val_ax(format_set: ChartFormat) -> ET.Element:
    """Return the ``c:valAx`` element built from the y axis settings."""
    axis = format_set.y_axis
    ax = _axis_head(axis, VAL_AX_ID, VAL_AX_POS[axis.reverse_order], "valAx")
    _axis_body(ax, VAL_AX_NUM_FMT_FORMAT_CODE[format_set.type], CAT_AX_ID)
    _val(ax, "crossBetween", VAL_AX_CROSS_BETWEEN[format_set.type])
    return ax


def _ax_ids(chart: ET.Element) -> None:
    _val(chart, "axId", CAT_AX_ID)
    _val(chart, "axId", VAL_AX_ID)


def _base_chart_tag(chart_type: str) -> str | None:
    if chart_type.startswith("area"):
        return "area3DChart" if "3D" in chart_type else "areaChart"
    if chart_type.startswith(("bar", "col")):
        return "bar3DChart" if "3D" in chart_type else "barChart"
    return None


def _base_chart(format_set: ChartFormat, tag: str) -> ET.Element:
    chart = _el(None, _c(tag))
    bar_dir = PLOT_AREA_CHART_BAR_DIR.get(format_set.type)
    if bar_dir is not None:
        _val(chart, "barDir", bar_dir)
    _val(chart, "grouping", PLOT_AREA_CHART_GROUPING[format_set.type])
    _val(chart, "varyColors", True)
    chart.extend(draw_chart_series(format_set))
    chart.append(_draw_dlbls(format_set))
    if format_set.type in _OVERLAP_TYPES:
        _val(chart, "overlap", 100)
    shape = chart_shape(format_set.type)
    if shape is not None:
        _val(chart, "shape", shape)
    _ax_ids(chart)
    return chart


def _special_chart(format_set: ChartFormat) -> tuple[ET.Element, bool]:
    """Return the chart element for non-bar types and whether it has axes."""
    chart_type = format_set.type
    if chart_type == DOUGHNUT:
        chart = _el(None, _c("doughnutChart"))
        _val(chart, "varyColors", True)
        chart.extend(draw_chart_series(format_set))
        _val(chart, "holeSize", 75)
        return chart, False
    if chart_type in (PIE, PIE_3D):
        chart = _el(None, _c("pieChart" if chart_type == PIE else "pie3DChart"))
        _val(chart, "varyColors", True)
        chart.extend(draw_chart_series(format_set))
        return chart, False
    if chart_type == LINE:
        chart = _el(None, _c("lineChart"))
        _val(chart, "grouping", PLOT_AREA_CHART_GROUPING[LINE])
        _val(chart, "varyColors", False)
        chart.extend(draw_chart_series(format_set))
        chart.append(_draw_dlbls(format_set))
        _val(chart, "smooth", False)
        _ax_ids(chart)
        return chart, True
    if chart_type == RADAR:
        chart = _el(None, _c("radarChart"))
        _val(chart, "radarStyle", "marker")
    elif chart_type == SCATTER:
        chart = _el(None, _c("scatterChart"))
        _val(chart, "scatterStyle", "smoothMarker")
    else:
        raise ValueError(f"unsupported chart type {chart_type}")
    _val(chart, "varyColors", False)
    chart.extend(draw_chart_series(format_set))
    chart.append(_draw_dlbls(format_set))
    _ax_ids(chart)
    return chart, True


def draw_plot_area(format_set: ChartFormat) -> ET.Element:
    """Return the ``c:plotArea`` element for the chart type."""
    plot_area = _el(None, _c("plotArea"))
    tag = _base_chart_tag(format_set.type)
    if tag is not None and format_set.type in PLOT_AREA_CHART_GROUPING:
        plot_area.append(_base_chart(format_set, tag))
        with_axes = True
    else:
        chart, with_axes = _special_chart(format_set)
        plot_area.append(chart)
    if with_axes:
        plot_area.append(draw_plot_area_cat_ax(format_set))
        plot_area.append(draw_plot_area_val_ax(format_set))
    return plot_area


def _title(parent: ET.Element, name: str) -> None:
    title = _el(parent, _c("title"))
    tx = _el(title, _c("tx"))
    rich = _el(tx, _c("rich"))
    _el(rich, _a("bodyPr"))
    _el(rich, _a("lstStyle"))
    p = _el(rich, _a("p"))
    ppr = _el(p, _a("pPr"))
    def_rpr = _el(ppr, _a("defRPr"), {
        "kern": 1200, "strike": "noStrike", "u": "none", "sz": 1400,
    })
    _solid_fill(def_rpr, "tx1", 65000, 35000)
    _fonts(def_rpr)
    run = _el(p, _a("r"))
    _el(run, _a("rPr"), {"lang": "en-US", "altLang": "en-US"})
    _el(run, _a("t")).text = name

    tx_pr = _el(title, _c("txPr"))
    _el(tx_pr, _a("bodyPr"))
    _el(tx_pr, _a("lstStyle"))
    p = _el(tx_pr, _a("p"))
    ppr = _el(p, _a("pPr"))
    _el(ppr, _a("defRPr"), {"kern": 1200, "u": "none", "sz": 14000, "strike": "noStrike"})
    _el(p, _a("endParaRPr"), {"lang": "en-US"})


def build_chart_space(format_set: ChartFormat) -> bytes:
    """Serialize the complete ``c:chartSpace`` document for a chart."""
    chart_type = format_set.type
    plot_area = draw_plot_area(format_set)

    root = _el(None, _c("chartSpace"), {"xmlns:r": R_NS, "xmlns:c16r2": C16R2_NS})
    _val(root, "date1904", False)
    _val(root, "lang", "en-US")
    _val(root, "roundedCorners", False)

    chart = _el(root, _c("chart"))
    _title(chart, format_set.title.name)
    view = _el(chart, _c("view3D"))
    _val(view, "rotX", VIEW_3D_ROT_X.get(chart_type, 0))
    _val(view, "rotY", VIEW_3D_ROT_Y.get(chart_type, 0))
    _val(view, "depthPercent", VIEW_3D_DEPTH_PERCENT.get(chart_type, 0))
    _val(view, "rAngAx", VIEW_3D_R_ANG_AX.get(chart_type, 0))
    for wall in ("floor", "sideWall", "backWall"):
        _val(_el(chart, _c(wall)), "thickness", 0)
    chart.append(plot_area)
    legend = _el(chart, _c("legend"))
    _val(legend, "legendPos", LEGEND_POSITION.get(format_set.legend.position, ""))
    _val(legend, "overlay", False)
    _val(chart, "plotVisOnly", False)
    _val(chart, "dispBlanksAs", format_set.show_blanks_as)
    _val(chart, "showDLblsOverMax", False)

    sp_pr = _el(root, _c("spPr"))
    _solid_fill(sp_pr, "bg1")
    ln = _el(sp_pr, _a("ln"), {"w": 9525, "cap": "flat", "cmpd": "sng", "algn": "ctr"})
    _solid_fill(ln, "tx1", 15000, 85000)

    settings = _el(root, _c("printSettings"))
    _el(settings, _c("pageMargins"), {
        "b": 0.75, "l": 0.7, "r": 0.7, "t": 0.7, "header": 0.3, "footer": 0.3,
    })
    return ET.tostring(root, encoding="UTF-8", xml_declaration=True)