"""
DXF 读取器 - 把 ezdxf 文档转换为只读图块树

职责：
1. 读取DXF文件（ezdxf.readfile）
2. 每个块布局 → BlockDefinition（名称 + BLOCK_RECORD 句柄）
3. 图元映射：LWPOLYLINE/POLYLINE(2D)/LINE/ARC/CIRCLE/ELLIPSE/SPLINE/SOLID/TRACE/
   TEXT/MTEXT/INSERT，其余类型 → IgnoredEntity
4. 角度由度转为弧度；块参照解析为被引用图块的句柄

依赖：
- ezdxf: DXF解析

测试要点：
- test_read_line_block: 直线图块转换
- test_insert_resolves_handle: 块参照句柄解析
- test_hatch_ignored: 填充映射为忽略分支
- test_units: $INSUNITS 映射
"""

from __future__ import annotations

import math
from pathlib import Path

import ezdxf
from ezdxf.enums import InsertUnits

from ..interfaces import DocumentReadError, IDocumentReader
from ..models import (
    ArcEntity,
    BlockDefinition,
    CadDocument,
    CircleEntity,
    EllipseEntity,
    Entity,
    IgnoredEntity,
    InsertEntity,
    LineEntity,
    MTextEntity,
    Point2D,
    PolylineEntity,
    SolidEntity,
    SplineEntity,
    TextEntity,
)


def _xy(v) -> Point2D:
    return (float(v[0]), float(v[1]))


class DxfDocumentReader(IDocumentReader):
    """DXF 文档读取器实现"""

    def read(self, path: Path) -> CadDocument:
        """读取DXF文件"""
        path = Path(path)
        if not path.exists():
            raise DocumentReadError(f"DXF文件不存在: {path}")

        try:
            doc = ezdxf.readfile(str(path))
        except Exception as e:
            raise DocumentReadError(f"DXF解析失败: {e}") from e

        return self.from_ezdxf(doc)

    def from_ezdxf(self, doc) -> CadDocument:
        """转换内存中的 ezdxf 文档"""
        handles_by_name = {
            layout.name.upper(): layout.block_record_handle for layout in doc.blocks
        }

        blocks = []
        for layout in doc.blocks:
            entities = [self._convert(e, handles_by_name) for e in layout]
            blocks.append(
                BlockDefinition(
                    name=layout.name,
                    handle=layout.block_record_handle,
                    entities=entities,
                )
            )

        return CadDocument(blocks=blocks, unit=self._unit_name(doc))

    @staticmethod
    def _unit_name(doc) -> str | None:
        """$INSUNITS → 单位名；无单位或未知时为 None"""
        try:
            units = InsertUnits(int(doc.units))
        except ValueError:
            return None
        if units == InsertUnits.Unitless:
            return None
        return units.name

    def _convert(self, e, handles_by_name: dict[str, str]) -> Entity:
        """单个 ezdxf 图元 → 模型图元"""
        dxftype = e.dxftype()
        layer = e.dxf.get("layer")

        if dxftype == "LWPOLYLINE":
            return PolylineEntity(
                layer=layer,
                vertices=[_xy(p) for p in e.get_points("xy")],
                closed=bool(e.closed),
            )

        if dxftype == "POLYLINE":
            if not e.is_2d_polyline:
                return IgnoredEntity(layer=layer, dxftype=dxftype)
            return PolylineEntity(
                layer=layer,
                vertices=[_xy(p) for p in e.points()],
                closed=bool(e.is_closed),
            )

        if dxftype == "LINE":
            return LineEntity(layer=layer, start=_xy(e.dxf.start), end=_xy(e.dxf.end))

        if dxftype == "ARC":
            return ArcEntity(
                layer=layer,
                center=_xy(e.dxf.center),
                radius=float(e.dxf.radius),
                start_angle=math.radians(e.dxf.start_angle),
                end_angle=math.radians(e.dxf.end_angle),
            )

        if dxftype == "CIRCLE":
            return CircleEntity(
                layer=layer, center=_xy(e.dxf.center), radius=float(e.dxf.radius)
            )

        if dxftype == "ELLIPSE":
            start = float(e.dxf.start_param)
            end = float(e.dxf.end_param)
            return EllipseEntity(
                layer=layer,
                center=_xy(e.dxf.center),
                major_axis=_xy(e.dxf.major_axis),
                ratio=float(e.dxf.ratio),
                start_param=start,
                end_param=end,
                full_ellipse=math.isclose(abs(end - start), math.tau, abs_tol=1e-9),
            )

        if dxftype == "SPLINE":
            return SplineEntity(
                layer=layer,
                control_points=[_xy(p) for p in e.control_points],
                fit_points=[_xy(p) for p in e.fit_points],
                closed=bool(e.closed),
            )

        if dxftype in ("SOLID", "TRACE"):
            vtx2 = e.dxf.vtx2
            return SolidEntity(
                layer=layer,
                corners=[
                    _xy(e.dxf.vtx0),
                    _xy(e.dxf.vtx1),
                    _xy(vtx2),
                    _xy(e.dxf.get("vtx3", vtx2)),
                ],
            )

        if dxftype == "TEXT":
            return TextEntity(
                layer=layer,
                insert=_xy(e.dxf.insert),
                height=float(e.dxf.height),
                text=e.dxf.text,
            )

        if dxftype == "MTEXT":
            return MTextEntity(
                layer=layer,
                insert=_xy(e.dxf.insert),
                height=float(e.dxf.char_height),
                text=e.plain_text(),
                rect_width=float(e.dxf.get("width", 0.0)),
            )

        if dxftype == "INSERT":
            name = e.dxf.name
            return InsertEntity(
                layer=layer,
                block_handle=handles_by_name.get(name.upper()),
                block_name=name,
                insert=_xy(e.dxf.insert),
                x_scale=float(e.dxf.xscale),
                y_scale=float(e.dxf.yscale),
                rotation=math.radians(e.dxf.rotation),
            )

        # 填充/标注/引线/点等：显式忽略
        return IgnoredEntity(layer=layer, dxftype=dxftype)
