"""
几何基础模块

子模块：
- transform: 二维仿射变换（构造/应用/复合）
- sampler: 曲线图元采样为点序列
- canonicalizer: 规范化记号流与包围范围
"""

from .canonicalizer import (
    CanonToken,
    GeometryCanonicalizer,
    GeometryExtent,
    TokenTag,
    format_number,
)
from .sampler import PrimitiveSampler, SampledPath
from .transform import AffineTransform

__all__ = [
    "AffineTransform",
    "PrimitiveSampler",
    "SampledPath",
    "GeometryCanonicalizer",
    "GeometryExtent",
    "CanonToken",
    "TokenTag",
    "format_number",
]
