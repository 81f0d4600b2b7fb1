"""
内容指纹 - 把规范化记号流定稿为摘要与世界尺寸

- 摘要: SHA-256(记号流的UTF-8字节)
- 宽高: 由包围范围得出；范围仍为初始状态时宽高均为 0.0
"""

from __future__ import annotations

import hashlib

from ..geometry import AffineTransform, GeometryCanonicalizer
from ..models import BlockDefinition, ContentIdentity
from .walker import DEFAULT_DEPTH_BUDGET, BlockGraphWalker


def compute_block_identity(
    walker: BlockGraphWalker,
    block: BlockDefinition,
    depth_budget: int = DEFAULT_DEPTH_BUDGET,
) -> ContentIdentity | None:
    """展开单个图块并定稿指纹；没有任何几何时返回 None"""
    canonicalizer = GeometryCanonicalizer()
    walker.walk(block, AffineTransform.identity(), canonicalizer, set(), depth_budget)
    if not canonicalizer.has_any_geometry():
        return None
    return finalize(canonicalizer)


def finalize(canonicalizer: GeometryCanonicalizer) -> ContentIdentity:
    """定稿内容指纹"""
    digest = hashlib.sha256(canonicalizer.to_bytes()).digest()
    extent = canonicalizer.extent
    return ContentIdentity(
        digest=digest,
        width_world=extent.width,
        height_world=extent.height,
    )
