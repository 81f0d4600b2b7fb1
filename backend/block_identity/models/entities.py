"""
图元模型 - 图块内各类二维图元的只读表示

所有角度均为弧度，坐标为图块局部坐标。
由文档读取器（cad/dxf_reader）生成，核心只读取不修改。
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Point2D = tuple[float, float]


class EntityKind(str, Enum):
    """图元类型枚举（IGNORED 为显式不支持分支）"""
    POLYLINE = "polyline"
    LINE = "line"
    ARC = "arc"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    SPLINE = "spline"
    SOLID = "solid"
    TEXT = "text"
    MTEXT = "mtext"
    INSERT = "insert"
    IGNORED = "ignored"


class EntityBase(BaseModel):
    """图元公共字段"""
    layer: str | None = Field(None, description="图层名")

    model_config = {"frozen": True}


class PolylineEntity(EntityBase):
    """多段线（LWPOLYLINE / 2D POLYLINE）"""
    kind: Literal["polyline"] = "polyline"
    vertices: list[Point2D] = Field(default_factory=list)
    closed: bool = False


class LineEntity(EntityBase):
    """直线"""
    kind: Literal["line"] = "line"
    start: Point2D
    end: Point2D


class ArcEntity(EntityBase):
    """圆弧（逆时针，从 start_angle 到 end_angle）"""
    kind: Literal["arc"] = "arc"
    center: Point2D
    radius: float
    start_angle: float = Field(..., description="起始角(弧度)")
    end_angle: float = Field(..., description="终止角(弧度)")


class CircleEntity(EntityBase):
    """圆"""
    kind: Literal["circle"] = "circle"
    center: Point2D
    radius: float


class EllipseEntity(EntityBase):
    """椭圆/椭圆弧"""
    kind: Literal["ellipse"] = "ellipse"
    center: Point2D
    major_axis: Point2D = Field(..., description="长轴向量(相对圆心)")
    ratio: float = Field(1.0, description="短轴/长轴")
    start_param: float = 0.0
    end_param: float = math.tau
    full_ellipse: bool = False

    @property
    def minor_axis(self) -> Point2D:
        mx, my = self.major_axis
        return (-my * self.ratio, mx * self.ratio)


class SplineEntity(EntityBase):
    """样条（仅取拟合点/控制点作折线近似）"""
    kind: Literal["spline"] = "spline"
    control_points: list[Point2D] = Field(default_factory=list)
    fit_points: list[Point2D] = Field(default_factory=list)
    closed: bool = False


class SolidEntity(EntityBase):
    """实心填充（三角形/四边形）"""
    kind: Literal["solid"] = "solid"
    corners: list[Point2D] = Field(..., min_length=3, max_length=4)


class TextEntity(EntityBase):
    """单行文字"""
    kind: Literal["text"] = "text"
    insert: Point2D
    height: float = 0.0
    text: str = ""


class MTextEntity(EntityBase):
    """多行文字"""
    kind: Literal["mtext"] = "mtext"
    insert: Point2D
    height: float = 0.0
    text: str = ""
    rect_width: float = Field(0.0, description="声明的文字框宽度")


class InsertEntity(EntityBase):
    """块参照（插入另一个图块定义）"""
    kind: Literal["insert"] = "insert"
    block_handle: str | None = Field(None, description="被引用图块的句柄，无法解析时为None")
    block_name: str | None = Field(None, description="被引用图块名(用于日志)")
    insert: Point2D = (0.0, 0.0)
    x_scale: float = 1.0
    y_scale: float = 1.0
    rotation: float = Field(0.0, description="旋转角(弧度)")


class IgnoredEntity(EntityBase):
    """不参与指纹计算的图元（填充/标注/引线等）"""
    kind: Literal["ignored"] = "ignored"
    dxftype: str = ""


Entity = Annotated[
    Union[
        PolylineEntity,
        LineEntity,
        ArcEntity,
        CircleEntity,
        EllipseEntity,
        SplineEntity,
        SolidEntity,
        TextEntity,
        MTextEntity,
        InsertEntity,
        IgnoredEntity,
    ],
    Field(discriminator="kind"),
]
