"""
存储模块 - 图块目录（存储协作者实现）

子模块：
- memory: 内存目录 + 工作单元
- json_catalog: JSON 文件持久化目录
"""

from .json_catalog import JsonBlockCatalog
from .memory import InMemoryBlockRepository, InMemoryUnitOfWork

__all__ = [
    "InMemoryBlockRepository",
    "InMemoryUnitOfWork",
    "JsonBlockCatalog",
]
