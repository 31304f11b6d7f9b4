"""Charts placed on worksheets through drawing parts."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from .chartdefs import VAL_AX_NUM_FMT_FORMAT_CODE, ChartFormat, PictureFormat, parse_format_chart_set
from .chartxml import A_NS, C_NS, R_NS, build_chart_space
from .columns import EMU, ColumnBook
from .coordinates import cell_name_to_coordinates

XDR_NS = "http://schemas.openxmlformats.org/drawingml/2006/spreadsheetDrawing"
REL_CHART = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/chart"
REL_DRAWING = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/drawing"

ET.register_namespace("xdr", XDR_NS)
ET.register_namespace("a", A_NS)
ET.register_namespace("c", C_NS)
ET.register_namespace("r", R_NS)

_DRAWING_PREFIX = "xl/drawings/drawing"
_CHART_PREFIX = "xl/charts/chart"
_MEDIA_PREFIX = "xl/media/image"


def _xdr(tag: str) -> str:
    return f"{{{XDR_NS}}}{tag}"


def _bool(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class _CellAnchor:
    """A two-cell anchor holding one graphic frame."""

    from_col: int
    from_col_off: int
    from_row: int
    from_row_off: int
    to_col: int
    to_col_off: int
    to_row: int
    to_row_off: int
    graphic_frame: ET.Element
    edit_as: str = ""
    locks_with_sheet: bool = False
    prints_with_sheet: bool = True

    def to_element(self) -> ET.Element:
        attrs = {"editAs": self.edit_as} if self.edit_as else {}
        anchor = ET.Element(_xdr("twoCellAnchor"), attrs)
        for tag, col, col_off, row, row_off in (
            ("from", self.from_col, self.from_col_off, self.from_row, self.from_row_off),
            ("to", self.to_col, self.to_col_off, self.to_row, self.to_row_off),
        ):
            corner = ET.SubElement(anchor, _xdr(tag))
            for name, value in (("col", col), ("colOff", col_off), ("row", row), ("rowOff", row_off)):
                ET.SubElement(corner, _xdr(name)).text = str(value)
        anchor.append(self.graphic_frame)
        ET.SubElement(anchor, _xdr("clientData"), {
            "fLocksWithSheet": _bool(self.locks_with_sheet),
            "fPrintsWithSheet": _bool(self.prints_with_sheet),
        })
        return anchor


@dataclass
class Drawing:
    """A drawing part: anchors read from an existing part plus newly added ones."""

    path: str
    existing: list[ET.Element] = field(default_factory=list)
    anchors: list[_CellAnchor] = field(default_factory=list)

    def to_xml(self) -> bytes:
        root = ET.Element(_xdr("wsDr"))
        root.extend(self.existing)
        root.extend(anchor.to_element() for anchor in self.anchors)
        return ET.tostring(root, encoding="UTF-8", xml_declaration=True)


class Workbook(ColumnBook):
    """A workbook that can place charts on its worksheets."""

    def __init__(self) -> None:
        super().__init__()
        self.drawings: dict[str, Drawing] = {}
        self.drawing_rels: dict[int, list[tuple[str, str, str]]] = {}

    def count_charts(self) -> int:
        return sum(1 for name in self.parts if _CHART_PREFIX in name)

    def _count_media(self) -> int:
        return sum(1 for name in self.parts if _MEDIA_PREFIX in name)

    def _count_drawings(self) -> int:
        names = {name for name in self.parts if _DRAWING_PREFIX in name}
        names.update(name for name in self.drawings if _DRAWING_PREFIX in name)
        return len(names)

    def chart_xml(self, number: int) -> bytes:
        """Return the serialized chart part with the given number."""
        try:
            return self.parts[f"{_CHART_PREFIX}{number}.xml"]
        except KeyError:
            raise LookupError(f"chart {number} does not exist") from None

    def add_chart(self, sheet: str, cell: str, format_set: str) -> None:
        """Add a chart described by JSON settings with its top-left corner at ``cell``."""
        chart_format = parse_format_chart_set(format_set)
        ws = self.worksheet(sheet)
        if chart_format.type not in VAL_AX_NUM_FMT_FORMAT_CODE:
            raise ValueError(f"unsupported chart type {chart_format.type}")
        drawing_id = self._count_drawings() + 1
        chart_id = self.count_charts() + 1
        drawing_path = f"{_DRAWING_PREFIX}{drawing_id}.xml"
        drawing_id, drawing_path = self._prepare_drawing(ws, drawing_id, sheet, drawing_path)
        rid = self._add_drawing_relationship(drawing_id, REL_CHART, f"../charts/chart{chart_id}.xml")
        self.add_drawing_chart(
            sheet,
            drawing_path,
            cell,
            chart_format.dimension.width,
            chart_format.dimension.height,
            rid,
            chart_format.format,
        )
        self._add_chart_part(chart_format)
        self._add_content_type_part(f"/xl/charts/chart{chart_id}.xml")
        self._add_content_type_part(f"/xl/drawings/drawing{drawing_id}.xml")

    def _prepare_drawing(self, ws, drawing_id: int, sheet: str, drawing_path: str) -> tuple[int, str]:
        target = f"../drawings/drawing{drawing_id}.xml"
        if ws.drawing_rid is not None:
            target = self.sheet_relationship_target(sheet, ws.drawing_rid)
            number = target.removeprefix("../drawings/drawing").removesuffix(".xml")
            drawing_id = int(number) if number.isdigit() else 0
            return drawing_id, target.replace("..", "xl")
        number = self.add_sheet_relationship(sheet, REL_DRAWING, target)
        ws.drawing_rid = f"rId{number}"
        return drawing_id, drawing_path

    def _add_drawing_relationship(self, drawing_id: int, rel_type: str, target: str) -> int:
        rels = self.drawing_rels.setdefault(drawing_id, [])
        number = len(rels) + 1
        rels.append((f"rId{number}", rel_type, target))
        return number

    def _add_content_type_part(self, part_name: str) -> None:
        if part_name not in self.content_type_overrides:
            self.content_type_overrides.append(part_name)

    def _add_chart_part(self, chart_format: ChartFormat) -> None:
        count = self.count_charts()
        self.parts[f"{_CHART_PREFIX}{count + 1}.xml"] = build_chart_space(chart_format)

    def _drawing(self, path: str) -> tuple[Drawing, int]:
        """Return the drawing for a path and the id for its next graphic frame name."""
        if path in self.drawings:
            return self.drawings[path], 1
        drawing = Drawing(path=path)
        cnv_pr_id = 1
        if path in self.parts:
            root = ET.fromstring(self.parts[path])
            drawing.existing = root.findall(_xdr("oneCellAnchor")) + root.findall(_xdr("twoCellAnchor"))
            cnv_pr_id = len(drawing.existing) + 1
        self.drawings[path] = drawing
        return drawing, cnv_pr_id

    def add_drawing_chart(
        self,
        sheet: str,
        drawing_path: str,
        cell: str,
        width: int,
        height: int,
        rid: int,
        picture_format: PictureFormat | None,
    ) -> None:
        """Anchor a chart graphic frame in a drawing at the given cell."""
        col, row = cell_name_to_coordinates(cell)
        fmt = picture_format if picture_format is not None else PictureFormat()
        width = int(width * fmt.x_scale)
        height = int(height * fmt.y_scale)
        col_start, row_start, _, _, col_end, row_end, x2, y2 = self.position_object_pixels(
            sheet, col - 1, row - 1, fmt.offset_x, fmt.offset_y, width, height
        )
        drawing, cnv_pr_id = self._drawing(drawing_path)
        frame = self._graphic_frame(self.count_charts() + self._count_media() + 1, cnv_pr_id, rid)
        drawing.anchors.append(
            _CellAnchor(
                from_col=col_start,
                from_col_off=fmt.offset_x * EMU,
                from_row=row_start,
                from_row_off=fmt.offset_y * EMU,
                to_col=col_end,
                to_col_off=x2 * EMU,
                to_row=row_end,
                to_row_off=y2 * EMU,
                graphic_frame=frame,
                edit_as=fmt.positioning,
                locks_with_sheet=fmt.f_locks_with_sheet,
                prints_with_sheet=fmt.f_prints_with_sheet,
            )
        )

    @staticmethod
    def _graphic_frame(frame_id: int, cnv_pr_id: int, rid: int) -> ET.Element:
        frame = ET.Element(_xdr("graphicFrame"), {"macro": ""})
        nv = ET.SubElement(frame, _xdr("nvGraphicFramePr"))
        ET.SubElement(nv, _xdr("cNvPr"), {"id": str(frame_id), "name": f"Chart {cnv_pr_id}"})
        ET.SubElement(nv, _xdr("cNvGraphicFramePr"))
        xfrm = ET.SubElement(frame, _xdr("xfrm"))
        ET.SubElement(xfrm, f"{{{A_NS}}}off", {"x": "0", "y": "0"})
        ET.SubElement(xfrm, f"{{{A_NS}}}ext", {"cx": "0", "cy": "0"})
        graphic = ET.SubElement(frame, f"{{{A_NS}}}graphic")
        data = ET.SubElement(graphic, f"{{{A_NS}}}graphicData", {"uri": C_NS})
        ET.SubElement(data, f"{{{C_NS}}}chart", {f"{{{R_NS}}}id": f"rId{rid}"})
        return frame