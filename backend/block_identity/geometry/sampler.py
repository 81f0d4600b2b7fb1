"""
图元采样器 - 把非折线图元转换为点序列

采样策略：
1. 圆/圆弧: 固定段数（默认64，最少8）；圆弧终止角补整圈直到不小于起始角
2. 椭圆: 固定段数（默认72，最少12），整椭圆取 [0, 2π] 并闭合
3. 样条: 拟合点≥2时取拟合点，否则取控制点（不做曲线求值）
4. 实心: 3~4个角点作为闭合折线
5. 文字: 以插入点为锚点的轴对齐矩形（粗略近似，不做字形度量）

每个采样点都先经过当前累计变换再输出；相同输入总是产生相同序列。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..models import (
    ArcEntity,
    CircleEntity,
    EllipseEntity,
    LineEntity,
    MTextEntity,
    Point2D,
    PolylineEntity,
    SolidEntity,
    SplineEntity,
    TextEntity,
)
from .transform import AffineTransform

MIN_CIRCLE_SEGMENTS = 8
MIN_ELLIPSE_SEGMENTS = 12

PathEntity = (
    PolylineEntity
    | LineEntity
    | ArcEntity
    | CircleEntity
    | EllipseEntity
    | SplineEntity
    | SolidEntity
)


@dataclass(frozen=True)
class SampledPath:
    """世界坐标下的折线"""
    points: list[Point2D]
    closed: bool = False


class PrimitiveSampler:
    """图元采样器"""

    def __init__(
        self,
        circle_segments: int = 64,
        arc_segments: int = 64,
        ellipse_segments: int = 72,
        text_width_factor: float = 0.6,
    ) -> None:
        self.circle_segments = max(circle_segments, MIN_CIRCLE_SEGMENTS)
        self.arc_segments = max(arc_segments, MIN_CIRCLE_SEGMENTS)
        self.ellipse_segments = max(ellipse_segments, MIN_ELLIPSE_SEGMENTS)
        self.text_width_factor = text_width_factor

    def sample(self, entity: PathEntity, transform: AffineTransform) -> SampledPath:
        """
        采样折线族图元

        Args:
            entity: 折线族图元
            transform: 当前累计变换

        Returns:
            世界坐标折线
        """
        if isinstance(entity, PolylineEntity):
            return self._transformed(entity.vertices, transform, entity.closed)
        if isinstance(entity, LineEntity):
            return self._transformed([entity.start, entity.end], transform, False)
        if isinstance(entity, CircleEntity):
            return self._transformed(self.circle_points(entity), transform, True)
        if isinstance(entity, ArcEntity):
            return self._transformed(self.arc_points(entity), transform, False)
        if isinstance(entity, EllipseEntity):
            return self._transformed(
                self.ellipse_points(entity), transform, entity.full_ellipse
            )
        if isinstance(entity, SplineEntity):
            pts = entity.fit_points if len(entity.fit_points) >= 2 else entity.control_points
            return self._transformed(pts, transform, entity.closed)
        if isinstance(entity, SolidEntity):
            return self._transformed(self.solid_corners(entity), transform, True)
        raise TypeError(f"不支持采样的图元类型: {type(entity).__name__}")

    def circle_points(self, circle: CircleEntity) -> list[Point2D]:
        cx, cy = circle.center
        r = circle.radius
        n = self.circle_segments
        pts = []
        for i in range(n):
            ang = (i / n) * math.tau
            pts.append((cx + r * math.cos(ang), cy + r * math.sin(ang)))
        return pts

    def arc_points(self, arc: ArcEntity) -> list[Point2D]:
        cx, cy = arc.center
        r = arc.radius
        start = arc.start_angle
        end = _normalize_end(start, arc.end_angle)
        n = self.arc_segments
        pts = []
        for i in range(n + 1):
            ang = start + (end - start) * (i / n)
            pts.append((cx + r * math.cos(ang), cy + r * math.sin(ang)))
        return pts

    def ellipse_points(self, ellipse: EllipseEntity) -> list[Point2D]:
        if ellipse.full_ellipse:
            start, end = 0.0, math.tau
        else:
            start = ellipse.start_param
            end = _normalize_end(start, ellipse.end_param)
        cx, cy = ellipse.center
        mx, my = ellipse.major_axis
        nx, ny = ellipse.minor_axis
        n = self.ellipse_segments
        pts = []
        for i in range(n + 1):
            t = start + (end - start) * (i / n)
            cos = math.cos(t)
            sin = math.sin(t)
            pts.append((cx + mx * cos + nx * sin, cy + my * cos + ny * sin))
        return pts

    @staticmethod
    def solid_corners(solid: SolidEntity) -> list[Point2D]:
        corners = list(solid.corners)
        # 三角形在DXF中以重复的第4角点表示
        if len(corners) == 4 and corners[3] == corners[2]:
            corners.pop()
        return corners

    def text_box(
        self,
        entity: TextEntity | MTextEntity,
        transform: AffineTransform,
    ) -> tuple[float, float, float, float]:
        """
        文字占位矩形（世界坐标，轴对齐）

        h = max(字高, 0)
        w = h * 0.6 * 字符数（多行文字取与声明框宽的较大者）
        box = [x, y - 0.8h] .. [x + w, y + 0.2h]
        """
        x, y = transform.apply(*entity.insert)
        h = max(entity.height, 0.0)
        w = h * self.text_width_factor * len(entity.text or "")
        if isinstance(entity, MTextEntity):
            w = max(entity.rect_width, w)
        return (x, y - 0.8 * h, x + w, y + 0.2 * h)

    @staticmethod
    def _transformed(
        points: list[Point2D],
        transform: AffineTransform,
        closed: bool,
    ) -> SampledPath:
        return SampledPath(points=[transform.apply(x, y) for x, y in points], closed=closed)


def _normalize_end(start: float, end: float) -> float:
    """补整圈使终止角不小于起始角"""
    if not (math.isfinite(start) and math.isfinite(end)):
        return end
    if end < start:
        end += math.ceil((start - end) / math.tau) * math.tau
    while end < start:
        end += math.tau
    return end
