"""
指纹计算模块 - 图块展开与内容指纹

子模块：
- walker: 深度优先展开嵌套块参照（断环 + 深度预算）
- content_identity: 记号流定稿为摘要与世界尺寸
"""

from .content_identity import compute_block_identity, finalize
from .walker import DEFAULT_DEPTH_BUDGET, BlockGraphWalker

__all__ = [
    "BlockGraphWalker",
    "DEFAULT_DEPTH_BUDGET",
    "compute_block_identity",
    "finalize",
]
