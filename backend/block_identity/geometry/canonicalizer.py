"""
几何规范化器 - 累积确定性记号流与包围范围

记号格式（固定、与区域设置无关、6位小数）：
    P|{layer}|{x}|{y}|\\n
    L|{layer}|{x1}|{y1}|{x2}|{y2}|\\n
    B|{layer}|{minx}|{miny}|{maxx}|{maxy}|\\n

记号顺序即遍历顺序（插入顺序），参与摘要计算。
负零写作 0.000000（不保留符号），旋转产生的 -0.0 与 0.0 得到相同摘要。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

DECIMALS = 6


class TokenTag(str, Enum):
    """记号类型"""
    POINT = "P"
    SEGMENT = "L"
    BOX = "B"


@dataclass(frozen=True)
class CanonToken:
    """规范化记号"""
    tag: TokenTag
    layer: str
    values: tuple[float, ...]

    def render(self) -> str:
        nums = "".join(f"{format_number(v)}|" for v in self.values)
        return f"{self.tag.value}|{self.layer}|{nums}\n"


def format_number(value: float) -> str:
    """
    定点格式化（6位小数，'.'作小数点）

    Python 的 format 规范与区域设置无关；-0.000000 归一为 0.000000。
    """
    text = format(value, f".{DECIMALS}f")
    if text.startswith("-") and float(text) == 0.0:
        return text[1:]
    return text


class GeometryExtent:
    """运行中的包围范围；初始为 (+∞, +∞, -∞, -∞)，单调扩展"""

    def __init__(self) -> None:
        self.min_x = math.inf
        self.min_y = math.inf
        self.max_x = -math.inf
        self.max_y = -math.inf

    def include(self, x: float, y: float) -> None:
        if x < self.min_x:
            self.min_x = x
        if y < self.min_y:
            self.min_y = y
        if x > self.max_x:
            self.max_x = x
        if y > self.max_y:
            self.max_y = y

    @property
    def is_degenerate(self) -> bool:
        """从未包含任何有限坐标"""
        return math.isinf(self.min_x) or math.isinf(self.max_x)

    @property
    def width(self) -> float:
        if math.isinf(self.min_x) or math.isinf(self.max_x):
            return 0.0
        return max(0.0, self.max_x - self.min_x)

    @property
    def height(self) -> float:
        if math.isinf(self.min_y) or math.isinf(self.max_y):
            return 0.0
        return max(0.0, self.max_y - self.min_y)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)


class GeometryCanonicalizer:
    """几何规范化器"""

    def __init__(self) -> None:
        self.extent = GeometryExtent()
        self._tokens: list[CanonToken] = []
        self._parts: list[str] = []

    def add_point(self, layer: str | None, x: float, y: float) -> None:
        self.extent.include(x, y)
        self._append(TokenTag.POINT, layer, (x, y))

    def add_segment(
        self, layer: str | None, x1: float, y1: float, x2: float, y2: float
    ) -> None:
        self.extent.include(x1, y1)
        self.extent.include(x2, y2)
        self._append(TokenTag.SEGMENT, layer, (x1, y1, x2, y2))

    def add_box(
        self, layer: str | None, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> None:
        self.extent.include(min_x, min_y)
        self.extent.include(max_x, max_y)
        self._append(TokenTag.BOX, layer, (min_x, min_y, max_x, max_y))

    def has_any_geometry(self) -> bool:
        return bool(self._tokens)

    def tokens(self) -> list[CanonToken]:
        return list(self._tokens)

    def canonical_text(self) -> str:
        return "".join(self._parts)

    def to_bytes(self) -> bytes:
        return self.canonical_text().encode("utf-8")

    def __len__(self) -> int:
        return len(self._tokens)

    def _append(self, tag: TokenTag, layer: str | None, values: tuple[float, ...]) -> None:
        token = CanonToken(tag=tag, layer=layer or "", values=values)
        self._tokens.append(token)
        self._parts.append(token.render())
