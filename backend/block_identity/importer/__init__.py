"""
导入编排模块

子模块：
- engine: 文档级导入引擎（原子批次）
- cancellation: 协作式取消令牌
"""

from .cancellation import CancelToken
from .engine import BlockImportEngine

__all__ = [
    "BlockImportEngine",
    "CancelToken",
]
