"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 导入引擎只依赖存储接口，不依赖具体存储技术
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from block_identity.interfaces import IBlockRepository

    class MyRepository(IBlockRepository):
        def unit_of_work(self) -> IUnitOfWork:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BlockRecord, CadDocument, StoredBlock


# ============================================================================
# 文档读取接口
# ============================================================================

class IDocumentReader(ABC):
    """文档读取器接口 - 把图纸文件转换为只读实体树"""

    @abstractmethod
    def read(self, path: Path) -> CadDocument:
        """
        读取图纸文件

        Args:
            path: DXF文件路径

        Returns:
            只读的图块定义树

        Raises:
            DocumentReadError: 文件不存在或解析失败
        """
        ...


class IDwgConverter(ABC):
    """DWG 转换器接口"""

    @abstractmethod
    def dwg_to_dxf(self, dwg_path: Path, output_dir: Path) -> Path:
        """
        DWG 转 DXF

        Args:
            dwg_path: 输入DWG文件路径
            output_dir: 输出目录

        Returns:
            生成的DXF文件路径

        Raises:
            ConversionError: 转换失败
        """
        ...


# ============================================================================
# 存储协作者接口
# ============================================================================

class IUnitOfWork(ABC):
    """
    工作单元接口 - 一次文档导入的原子批次

    约定：
    - upsert 只暂存，commit 后才对仓库可见
    - 未 commit 即退出 with 块（含异常）时全部丢弃
    """

    @abstractmethod
    def upsert(self, record: BlockRecord) -> int:
        """按 (source_path, block_name) 插入或更新，返回记录ID"""
        ...

    @abstractmethod
    def commit(self) -> None:
        """提交暂存的全部写入"""
        ...

    @abstractmethod
    def rollback(self) -> None:
        """丢弃暂存的全部写入"""
        ...

    def __enter__(self) -> IUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()


class IBlockRepository(ABC):
    """图块目录仓库接口"""

    @abstractmethod
    def unit_of_work(self) -> IUnitOfWork:
        """开启一个工作单元"""
        ...

    @abstractmethod
    def get_by_id(self, record_id: int) -> StoredBlock | None:
        """按ID获取"""
        ...

    @abstractmethod
    def get_by_source_and_name(self, source_path: str, block_name: str) -> StoredBlock | None:
        """按来源文件+图块名获取"""
        ...

    @abstractmethod
    def get_by_hash(self, content_hash: str) -> StoredBlock | None:
        """按内容指纹获取（多条时取最近更新的）"""
        ...

    @abstractmethod
    def query(
        self,
        text_filter: str | None = None,
        offset: int = 0,
        limit: int = 100,
    ) -> list[StoredBlock]:
        """按图块名/来源路径模糊查询（最近更新在前）"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class BlockIdentityError(Exception):
    """基础异常"""
    pass


class InvalidArgumentError(BlockIdentityError, ValueError):
    """调用方传入的必填参数为空"""
    pass


class RecursionDepthExceeded(BlockIdentityError):
    """嵌套插入超过深度预算"""

    def __init__(self, block_name: str) -> None:
        super().__init__(f"展开图块时超过最大嵌套深度: '{block_name}'")
        self.block_name = block_name


class ImportCancelled(BlockIdentityError):
    """导入被取消"""
    pass


class DocumentReadError(BlockIdentityError):
    """文档读取错误"""
    pass


class ConversionError(BlockIdentityError):
    """转换错误"""
    pass


class StorageError(BlockIdentityError):
    """存储错误"""
    pass
