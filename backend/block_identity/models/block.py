"""
图块与文档模型 - 图块定义树

CadDocument 按句柄索引图块定义；插入之间可以成环（图块可直接或间接引用自身）。
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PrivateAttr

from .entities import Entity


class BlockDefinition(BaseModel):
    """图块定义"""
    name: str = Field(..., description="图块名")
    handle: str = Field(..., description="文档内稳定句柄")
    entities: list[Entity] = Field(default_factory=list)


class CadDocument(BaseModel):
    """图纸文档（只读图块树）"""
    blocks: list[BlockDefinition] = Field(default_factory=list)
    unit: str | None = Field(None, description="插入单位名称，无单位时为None")

    _by_handle: dict[str, BlockDefinition] | None = PrivateAttr(default=None)

    def get_block(self, handle: str | None) -> BlockDefinition | None:
        """按句柄获取图块定义"""
        if handle is None:
            return None
        if self._by_handle is None:
            self._by_handle = {b.handle: b for b in self.blocks}
        return self._by_handle.get(handle)

    def get_block_by_name(self, name: str) -> BlockDefinition | None:
        """按名称获取图块定义（首个匹配）"""
        for block in self.blocks:
            if block.name == name:
                return block
        return None
