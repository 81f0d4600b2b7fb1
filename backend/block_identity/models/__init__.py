"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- 图元: 多段线/直线/圆弧/圆/椭圆/样条/实心/文字/多行文字/块参照/忽略
- BlockDefinition / CadDocument: 只读图块树
- ContentIdentity: 图块内容指纹
- BlockRecord / StoredBlock: 存储协作者的输入/输出
- ImportSummary: 文档导入统计
"""

from .block import BlockDefinition, CadDocument
from .entities import (
    ArcEntity,
    CircleEntity,
    EllipseEntity,
    Entity,
    EntityKind,
    IgnoredEntity,
    InsertEntity,
    LineEntity,
    MTextEntity,
    Point2D,
    PolylineEntity,
    SolidEntity,
    SplineEntity,
    TextEntity,
)
from .identity import BlockRecord, ContentIdentity, ImportSummary, StoredBlock

__all__ = [
    "Point2D",
    "Entity",
    "EntityKind",
    "PolylineEntity",
    "LineEntity",
    "ArcEntity",
    "CircleEntity",
    "EllipseEntity",
    "SplineEntity",
    "SolidEntity",
    "TextEntity",
    "MTextEntity",
    "InsertEntity",
    "IgnoredEntity",
    "BlockDefinition",
    "CadDocument",
    "ContentIdentity",
    "BlockRecord",
    "StoredBlock",
    "ImportSummary",
]
