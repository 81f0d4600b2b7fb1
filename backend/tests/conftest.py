"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(engine, repository, wall_block):
        summary = engine.import_document(make_document(wall_block), "a.dxf")
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from block_identity.config import RuntimeConfig
from block_identity.geometry import PrimitiveSampler
from block_identity.importer import BlockImportEngine
from block_identity.models import (
    BlockDefinition,
    CadDocument,
    InsertEntity,
    LineEntity,
)
from block_identity.storage import InMemoryBlockRepository


# ============================================================================
# 构造辅助
# ============================================================================

def make_document(*blocks: BlockDefinition, unit: str | None = None) -> CadDocument:
    """按给定顺序组装文档"""
    return CadDocument(blocks=list(blocks), unit=unit)


def make_chain(length: int) -> list[BlockDefinition]:
    """
    构造无环嵌套链 C0 → C1 → … → C{length-1}

    末端图块只有一条直线，其余图块只包含指向下一级的块参照。
    """
    blocks = []
    for i in range(length):
        if i == length - 1:
            entities = [LineEntity(layer="0", start=(0.0, 0.0), end=(1.0, 0.0))]
        else:
            entities = [InsertEntity(block_handle=f"C{i + 1}", block_name=f"CHAIN{i + 1}")]
        blocks.append(BlockDefinition(name=f"CHAIN{i}", handle=f"C{i}", entities=entities))
    return blocks


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值，不读取YAML）"""
    return RuntimeConfig()


@pytest.fixture
def sampler() -> PrimitiveSampler:
    return PrimitiveSampler()


# ============================================================================
# 存储与引擎 Fixtures
# ============================================================================

@pytest.fixture
def repository() -> InMemoryBlockRepository:
    return InMemoryBlockRepository()


@pytest.fixture
def engine(repository: InMemoryBlockRepository, runtime_config: RuntimeConfig) -> BlockImportEngine:
    return BlockImportEngine(repository, config=runtime_config)


# ============================================================================
# 图块 Fixtures
# ============================================================================

@pytest.fixture
def wall_block() -> BlockDefinition:
    """WALL: 图层E上 (0,0)→(10,0) 的直线"""
    return BlockDefinition(
        name="WALL",
        handle="1A",
        entities=[LineEntity(layer="E", start=(0.0, 0.0), end=(10.0, 0.0))],
    )


@pytest.fixture
def wall2_block() -> BlockDefinition:
    """WALL2: 与WALL相同但图层为F"""
    return BlockDefinition(
        name="WALL2",
        handle="1B",
        entities=[LineEntity(layer="F", start=(0.0, 0.0), end=(10.0, 0.0))],
    )


@pytest.fixture
def dup_block() -> BlockDefinition:
    """DUP: 在(5,5)插入一次WALL"""
    return BlockDefinition(
        name="DUP",
        handle="1C",
        entities=[
            InsertEntity(
                block_handle="1A",
                block_name="WALL",
                insert=(5.0, 5.0),
                x_scale=1.0,
                y_scale=1.0,
                rotation=0.0,
            )
        ],
    )


@pytest.fixture
def self_block() -> BlockDefinition:
    """SELF: 一条直线 + 对自身的块参照"""
    return BlockDefinition(
        name="SELF",
        handle="2A",
        entities=[
            LineEntity(layer="0", start=(0.0, 0.0), end=(3.0, 4.0)),
            InsertEntity(block_handle="2A", block_name="SELF", insert=(1.0, 1.0), x_scale=2.0),
        ],
    )


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
