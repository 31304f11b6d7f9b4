import xml.etree.ElementTree as ET

import pytest

from sheetcraft.chartdefs import parse_format_chart_set
from sheetcraft.chartxml import (
    A_NS,
    C_NS,
    build_chart_space,
    chart_shape,
    draw_chart_series,
    draw_plot_area,
    draw_plot_area_cat_ax,
    draw_plot_area_val_ax,
)

NS = {"c": C_NS, "a": A_NS}


def _series(count):
    return ",".join(
        f'{{"name":"Sheet1!$A${30 + i}","categories":"Sheet1!$B$29:$D$29",'
        f'"values":"Sheet1!$B${30 + i}:$D${30 + i}"}}'
        for i in range(count)
    )


def _chart(chart_type, count=3, extra=""):
    return parse_format_chart_set(
        f'{{"type":"{chart_type}","series":[{_series(count)}]{extra}}}'
    )


def test_chart_shape():
    assert chart_shape("col3DConeStacked") == "cone"
    assert chart_shape("bar3DPyramidClustered") == "pyramid"
    assert chart_shape("col3DCylinder") == "cylinder"
    assert chart_shape("col") is None


def test_series_indices_and_names():
    fs = _chart("col", 3)
    series = draw_chart_series(fs)
    assert len(series) == len(fs.series)
    for index, ser in enumerate(series):
        assert ser.find("c:idx", NS).get("val") == str(index)
        assert ser.find("c:order", NS).get("val") == str(index)
        assert ser.find("c:tx/c:strRef/c:f", NS).text == fs.series[index].name
        assert ser.find("c:val/c:numRef/c:f", NS).text == fs.series[index].values


def test_scatter_series_use_x_and_y_values():
    fs = _chart("scatter", 2)
    for ser in draw_chart_series(fs):
        assert ser.find("c:cat", NS) is None
        assert ser.find("c:val", NS) is None
        assert ser.find("c:dLbls", NS) is None
        assert ser.find("c:xVal/c:strRef/c:f", NS).text == "Sheet1!$B$29:$D$29"
        assert ser.find("c:marker/c:symbol", NS).get("val") == "circle"


def test_line_series_colors_limited_to_six():
    series = draw_chart_series(_chart("line", 8))
    first = series[0].find("c:spPr/a:ln/a:solidFill/a:schemeClr", NS)
    assert first.get("val") == "accent1"
    assert series[6].find("c:spPr/a:ln/a:solidFill", NS) is None


def test_pie_series_have_data_point():
    ser = draw_chart_series(_chart("pie", 1))[0]
    assert ser.find("c:dPt/c:idx", NS).get("val") == "0"
    assert ser.find("c:dPt/c:spPr/a:solidFill/a:schemeClr", NS).get("val") == "accent1"
    assert draw_chart_series(_chart("col", 1))[0].find("c:dPt", NS) is None


def test_axis_limits_omitted_when_zero():
    fs = _chart("bar3DStacked", extra=',"y_axis":{"maximum":7.5,"minimum":0.5}')
    cat = draw_plot_area_cat_ax(fs)
    assert cat.find("c:scaling/c:max", NS) is None
    assert cat.find("c:scaling/c:min", NS) is None
    val = draw_plot_area_val_ax(fs)
    assert val.find("c:scaling/c:max", NS).get("val") == "7.5"
    assert val.find("c:scaling/c:min", NS).get("val") == "0.5"


def test_reverse_order_orientation():
    fs = _chart(
        "bar3DPercentStacked",
        extra=',"x_axis":{"reverse_order":true},"y_axis":{"reverse_order":true}',
    )
    cat = draw_plot_area_cat_ax(fs)
    val = draw_plot_area_val_ax(fs)
    assert cat.find("c:scaling/c:orientation", NS).get("val") == "maxMin"
    assert cat.find("c:axPos", NS).get("val") == "t"
    assert val.find("c:axPos", NS).get("val") == "r"
    assert cat.find("c:axId", NS).get("val") == "754001152"
    assert val.find("c:crossAx", NS).get("val") == "754001152"


def test_value_axis_format_and_crossing():
    assert draw_plot_area_val_ax(_chart("colPercentStacked")).find(
        "c:numFmt", NS
    ).get("formatCode") == "0%"
    assert draw_plot_area_val_ax(_chart("area")).find("c:crossBetween", NS).get("val") == "midCat"
    assert draw_plot_area_val_ax(_chart("col")).find("c:crossBetween", NS).get("val") == "between"


@pytest.mark.parametrize(
    "chart_type, tag",
    [
        ("area", "areaChart"),
        ("area3DStacked", "area3DChart"),
        ("bar", "barChart"),
        ("colPercentStacked", "barChart"),
        ("col3D", "bar3DChart"),
        ("bar3DCylinderClustered", "bar3DChart"),
        ("doughnut", "doughnutChart"),
        ("line", "lineChart"),
        ("pie", "pieChart"),
        ("pie3D", "pie3DChart"),
        ("radar", "radarChart"),
        ("scatter", "scatterChart"),
    ],
)
def test_plot_area_chart_element(chart_type, tag):
    plot_area = draw_plot_area(_chart(chart_type))
    assert plot_area[0].tag == f"{{{C_NS}}}{tag}"


def test_plot_area_unsupported_type():
    with pytest.raises(ValueError, match="unsupported chart type"):
        draw_plot_area(_chart("funnel"))


def test_overlap_and_bar_direction():
    stacked = draw_plot_area(_chart("colStacked"))[0]
    assert stacked.find("c:overlap", NS).get("val") == "100"
    assert stacked.find("c:barDir", NS).get("val") == "col"
    plain = draw_plot_area(_chart("col"))[0]
    assert plain.find("c:overlap", NS) is None
    assert draw_plot_area(_chart("bar"))[0].find("c:barDir", NS).get("val") == "bar"
    assert draw_plot_area(_chart("area"))[0].find("c:barDir", NS) is None


def test_doughnut_has_hole_and_no_axes():
    plot_area = draw_plot_area(_chart("doughnut", 1))
    assert plot_area[0].find("c:holeSize", NS).get("val") == "75"
    assert plot_area.find("c:catAx", NS) is None
    assert plot_area.find("c:valAx", NS) is None


def test_scatter_style():
    chart = draw_plot_area(_chart("scatter"))[0]
    assert chart.find("c:scatterStyle", NS).get("val") == "smoothMarker"


def test_build_chart_space_document():
    fs = _chart(
        "col3DClustered",
        extra=',"title":{"name":"Fruit 3D Clustered Column Chart"},'
        '"legend":{"position":"left"},"show_blanks_as":"zero"',
    )
    root = ET.fromstring(build_chart_space(fs))
    assert root.tag == f"{{{C_NS}}}chartSpace"
    chart = root.find("c:chart", NS)
    assert chart.find("c:title/c:tx/c:rich/a:p/a:r/a:t", NS).text == "Fruit 3D Clustered Column Chart"
    assert chart.find("c:view3D/c:rotX", NS).get("val") == "15"
    assert chart.find("c:legend/c:legendPos", NS).get("val") == "l"
    assert chart.find("c:dispBlanksAs", NS).get("val") == "zero"
    assert chart.find("c:plotArea/c:bar3DChart/c:shape", NS) is None
    assert len(chart.findall("c:plotArea/c:bar3DChart/c:ser", NS)) == len(fs.series)


def test_build_chart_space_defaults():
    root = ET.fromstring(build_chart_space(_chart("pie3D", 1)))
    chart = root.find("c:chart", NS)
    assert chart.find("c:title/c:tx/c:rich/a:p/a:r/a:t", NS).text == " "
    assert chart.find("c:view3D/c:rotX", NS).get("val") == "30"
    assert chart.find("c:dispBlanksAs", NS).get("val") == "gap"
    assert chart.find("c:legend/c:legendPos", NS).get("val") == "b"


def test_build_chart_space_rejects_unknown_type():
    with pytest.raises(ValueError):
        build_chart_space(_chart("unknown"))