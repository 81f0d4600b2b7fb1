"""
图块图遍历器 - 深度优先展开单个图块

流程：
1. 深度预算耗尽 → RecursionDepthExceeded
2. 图块已在当前祖先链（visiting）中 → 静默返回（断环，不重试）
3. 入栈 → 按列表顺序分派图元 → 出栈（finally）

visiting 只记录当前递归栈上的图块，而不是“已处理”集合：
同一图块可在互不相关的兄弟分支中合法地多次出现。

测试要点：
- test_cycle_is_omitted: 自引用图块终止且环分支无贡献
- test_depth_limit: 40层链超限，20层链通过
- test_sibling_reuse: 兄弟插入重复使用同一图块
"""

from __future__ import annotations

import logging

from ..geometry import AffineTransform, GeometryCanonicalizer, PrimitiveSampler
from ..interfaces import RecursionDepthExceeded
from ..models import (
    ArcEntity,
    BlockDefinition,
    CadDocument,
    CircleEntity,
    EllipseEntity,
    IgnoredEntity,
    InsertEntity,
    LineEntity,
    MTextEntity,
    PolylineEntity,
    SolidEntity,
    SplineEntity,
    TextEntity,
)

logger = logging.getLogger(__name__)

DEFAULT_DEPTH_BUDGET = 32

PATH_ENTITY_TYPES = (
    PolylineEntity,
    LineEntity,
    ArcEntity,
    CircleEntity,
    EllipseEntity,
    SplineEntity,
    SolidEntity,
)


class BlockGraphWalker:
    """图块图遍历器"""

    def __init__(
        self,
        document: CadDocument,
        sampler: PrimitiveSampler | None = None,
    ) -> None:
        self.document = document
        self.sampler = sampler or PrimitiveSampler()

    def walk(
        self,
        block: BlockDefinition,
        transform: AffineTransform,
        canonicalizer: GeometryCanonicalizer,
        visiting: set[str] | None = None,
        depth_budget: int = DEFAULT_DEPTH_BUDGET,
    ) -> None:
        """
        展开图块并把世界坐标几何送入规范化器

        Args:
            block: 待展开的图块
            transform: 当前累计变换
            canonicalizer: 记号流累积器
            visiting: 当前祖先链上的图块句柄
            depth_budget: 剩余嵌套深度

        Raises:
            RecursionDepthExceeded: 无环嵌套链超过深度预算
        """
        if depth_budget <= 0:
            raise RecursionDepthExceeded(block.name)
        if visiting is None:
            visiting = set()
        if block.handle in visiting:
            logger.debug(f"断开循环引用: {block.name} ({block.handle})")
            return

        visiting.add(block.handle)
        try:
            for entity in block.entities:
                self._visit_entity(entity, transform, canonicalizer, visiting, depth_budget)
        finally:
            visiting.discard(block.handle)

    def _visit_entity(
        self,
        entity,
        transform: AffineTransform,
        canonicalizer: GeometryCanonicalizer,
        visiting: set[str],
        depth_budget: int,
    ) -> None:
        if isinstance(entity, PATH_ENTITY_TYPES):
            path = self.sampler.sample(entity, transform)
            self._emit_path(path.points, path.closed, entity.layer, canonicalizer)

        elif isinstance(entity, (TextEntity, MTextEntity)):
            canonicalizer.add_box(entity.layer, *self.sampler.text_box(entity, transform))

        elif isinstance(entity, InsertEntity):
            child = self.document.get_block(entity.block_handle)
            if child is None:
                logger.warning(
                    f"跳过无法解析的块参照: {entity.block_name or entity.block_handle}"
                )
                return
            child_transform = AffineTransform.compose(
                transform, AffineTransform.from_insert(entity)
            )
            self.walk(child, child_transform, canonicalizer, visiting, depth_budget - 1)

        elif isinstance(entity, IgnoredEntity):
            # 填充/标注等不参与指纹
            return

        else:
            raise TypeError(f"未知图元类型: {type(entity).__name__}")

    @staticmethod
    def _emit_path(
        points: list[tuple[float, float]],
        closed: bool,
        layer: str | None,
        canonicalizer: GeometryCanonicalizer,
    ) -> None:
        """逐点 add_point，相邻点 add_segment，闭合时补回首点"""
        for x, y in points:
            canonicalizer.add_point(layer, x, y)
        if len(points) < 2:
            return
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            canonicalizer.add_segment(layer, x1, y1, x2, y2)
        if closed:
            (x1, y1), (x2, y2) = points[-1], points[0]
            canonicalizer.add_segment(layer, x1, y1, x2, y2)
