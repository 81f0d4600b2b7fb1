"""
指纹与导入结果模型

- ContentIdentity: 单个图块的内容指纹（一次成功遍历后生成，不可变）
- BlockRecord: 交给存储协作者的图块记录
- StoredBlock: 存储中的图块记录（带ID与时间戳）
- ImportSummary: 单次文档导入的统计
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

DIGEST_SIZE = 32


class ContentIdentity(BaseModel):
    """图块内容指纹"""
    digest: bytes = Field(..., description="SHA-256 摘要(32字节)")
    width_world: float = 0.0
    height_world: float = 0.0

    model_config = {"frozen": True}

    @field_validator("digest")
    @classmethod
    def _check_digest(cls, v: bytes) -> bytes:
        if len(v) != DIGEST_SIZE:
            raise ValueError(f"摘要长度应为{DIGEST_SIZE}字节: {len(v)}")
        return v

    @property
    def hex_digest(self) -> str:
        """大写十六进制摘要（存储层使用的 content_hash）"""
        return self.digest.hex().upper()


class BlockRecord(BaseModel):
    """图块记录（upsert 的输入）"""
    source_path: str
    block_name: str
    block_handle: str | None = None
    version_tag: str | None = None
    content_hash: str
    unit: str | None = None
    width_world: float | None = None
    height_world: float | None = None


class StoredBlock(BlockRecord):
    """存储中的图块记录"""
    id: int
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class ImportSummary(BaseModel):
    """单次文档导入统计"""
    upserted: int = 0
    skipped_empty: int = 0
    skipped_ignored: int = 0
    record_ids: dict[str, int] = Field(default_factory=dict, description="图块名 -> 记录ID")
