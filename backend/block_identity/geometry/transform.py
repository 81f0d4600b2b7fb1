"""
二维仿射变换

矩阵形式：
    [ m11  m12  tx ]
    [ m21  m22  ty ]
    [  0    0    1 ]

compose(outer, inner) 为矩阵乘法 outer × inner，
即 compose(outer, inner).apply(p) == outer.apply(inner.apply(p))。
NaN/∞ 原样传播，不在此处清洗。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import InsertEntity


@dataclass(frozen=True)
class AffineTransform:
    """不可变二维仿射变换"""
    m11: float = 1.0
    m12: float = 0.0
    m21: float = 0.0
    m22: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def from_instance(
        cls,
        scale_x: float,
        scale_y: float,
        rotation: float,
        translate_x: float,
        translate_y: float,
    ) -> AffineTransform:
        """由插入参数构造：先缩放，再旋转(弧度)，最后平移"""
        cos = math.cos(rotation)
        sin = math.sin(rotation)
        return cls(
            m11=scale_x * cos,
            m12=-scale_y * sin,
            m21=scale_x * sin,
            m22=scale_y * cos,
            tx=translate_x,
            ty=translate_y,
        )

    @classmethod
    def from_insert(cls, insert: InsertEntity) -> AffineTransform:
        return cls.from_instance(
            insert.x_scale,
            insert.y_scale,
            insert.rotation,
            insert.insert[0],
            insert.insert[1],
        )

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.m11 * x + self.m12 * y + self.tx,
            self.m21 * x + self.m22 * y + self.ty,
        )

    @staticmethod
    def compose(outer: AffineTransform, inner: AffineTransform) -> AffineTransform:
        """outer × inner"""
        return AffineTransform(
            m11=outer.m11 * inner.m11 + outer.m12 * inner.m21,
            m12=outer.m11 * inner.m12 + outer.m12 * inner.m22,
            m21=outer.m21 * inner.m11 + outer.m22 * inner.m21,
            m22=outer.m21 * inner.m12 + outer.m22 * inner.m22,
            tx=outer.m11 * inner.tx + outer.m12 * inner.ty + outer.tx,
            ty=outer.m21 * inner.tx + outer.m22 * inner.ty + outer.ty,
        )

    def __matmul__(self, other: AffineTransform) -> AffineTransform:
        return AffineTransform.compose(self, other)

    @property
    def is_identity(self) -> bool:
        return self == _IDENTITY


_IDENTITY = AffineTransform()
