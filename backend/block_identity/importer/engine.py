"""
图块导入引擎 - 文档级导入编排

流程：
1. 参数校验（文档/来源路径为空立即失败，不做任何遍历）
2. 开启一个工作单元（整个文档一个原子批次）
3. 对每个顶层图块：检查取消 → 过滤（匿名/模型空间/图纸空间/忽略名单）
   → 全新的规范化器与 visiting 集合展开 → 无几何计入 skipped_empty
   → 定稿指纹并 upsert
4. 全部成功才 commit；任何异常（深度超限/取消/存储错误）都回滚并原样抛出

测试要点：
- test_scenario_wall: 单直线图块
- test_layer_changes_digest: 图层参与摘要
- test_instance_translated: 块参照平移
- test_self_reference: 自引用图块
- test_depth_abort_rolls_back: 深度超限整批回滚
- test_cancel_between_blocks: 取消
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..cad import DxfDocumentReader, ODAConverter
from ..config import RuntimeConfig, get_config
from ..geometry import PrimitiveSampler
from ..hashing import BlockGraphWalker, compute_block_identity
from ..interfaces import (
    IBlockRepository,
    IDocumentReader,
    IDwgConverter,
    ImportCancelled,
    InvalidArgumentError,
)
from ..models import BlockDefinition, BlockRecord, CadDocument, ImportSummary
from .cancellation import CancelToken

logger = logging.getLogger(__name__)

MODEL_SPACE = "*MODEL_SPACE"
PAPER_SPACE = "*PAPER_SPACE"


class BlockImportEngine:
    """图块导入引擎"""

    def __init__(
        self,
        repository: IBlockRepository,
        config: RuntimeConfig | None = None,
        reader: IDocumentReader | None = None,
        converter: IDwgConverter | None = None,
    ):
        if repository is None:
            raise InvalidArgumentError("存储仓库不能为空")
        self.repository = repository
        self.config = config or get_config()

        hashing = self.config.hashing
        self.sampler = PrimitiveSampler(
            circle_segments=hashing.circle_segments,
            arc_segments=hashing.arc_segments,
            ellipse_segments=hashing.ellipse_segments,
            text_width_factor=hashing.text_width_factor,
        )
        self.max_depth = hashing.max_depth

        self.reader = reader or DxfDocumentReader()
        self._converter = converter
        self._ignored = self.config.import_.ignore_set()

    @property
    def converter(self) -> IDwgConverter:
        """DWG转换器（惰性创建）"""
        if self._converter is None:
            self._converter = ODAConverter()
        return self._converter

    def import_file(
        self,
        path: str | Path,
        include_anonymous: bool | None = None,
        cancel_token: CancelToken | None = None,
    ) -> ImportSummary:
        """读取DXF/DWG文件并导入其中的图块"""
        if not path or not str(path).strip():
            raise InvalidArgumentError("文件路径不能为空")
        file_path = Path(path)
        suffix = file_path.suffix.lower()

        if suffix == ".dxf":
            doc = self.reader.read(file_path)
        elif suffix == ".dwg":
            with tempfile.TemporaryDirectory() as tmpdir:
                dxf_path = self.converter.dwg_to_dxf(file_path, Path(tmpdir))
                doc = self.reader.read(dxf_path)
        else:
            raise InvalidArgumentError(f"不支持的文件类型: {file_path.suffix}")

        return self.import_document(doc, str(file_path), include_anonymous, cancel_token)

    def import_document(
        self,
        doc: CadDocument,
        source_path: str,
        include_anonymous: bool | None = None,
        cancel_token: CancelToken | None = None,
    ) -> ImportSummary:
        """
        导入文档中的全部顶层图块

        Args:
            doc: 只读图块树
            source_path: 来源文件路径（存储唯一键的一部分）
            include_anonymous: 是否包含匿名图块，None 时取配置
            cancel_token: 取消令牌（每个顶层图块检查一次）

        Returns:
            导入统计

        Raises:
            InvalidArgumentError: 文档或来源路径为空
            RecursionDepthExceeded: 嵌套深度超限（整批回滚）
            ImportCancelled: 已取消（整批回滚）
        """
        if doc is None:
            raise InvalidArgumentError("文档不能为空")
        if not source_path or not str(source_path).strip():
            raise InvalidArgumentError("来源路径不能为空")
        source_path = str(source_path)
        if include_anonymous is None:
            include_anonymous = self.config.import_.include_anonymous

        summary = ImportSummary()
        walker = BlockGraphWalker(doc, self.sampler)
        version_tag = self.config.import_.version_tag
        logger.info(f"开始导入图块: {source_path} (共{len(doc.blocks)}个块定义)")

        try:
            with self.repository.unit_of_work() as uow:
                for block in doc.blocks:
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()

                    if not self._is_eligible(block, include_anonymous):
                        continue
                    if block.name.casefold() in self._ignored:
                        summary.skipped_ignored += 1
                        continue

                    identity = compute_block_identity(walker, block, self.max_depth)
                    if identity is None:
                        logger.debug(f"图块无可渲染几何，跳过: {block.name}")
                        summary.skipped_empty += 1
                        continue

                    record = BlockRecord(
                        source_path=source_path,
                        block_name=block.name,
                        block_handle=block.handle,
                        version_tag=version_tag,
                        content_hash=identity.hex_digest,
                        unit=doc.unit,
                        width_world=identity.width_world,
                        height_world=identity.height_world,
                    )
                    record_id = uow.upsert(record)
                    summary.upserted += 1
                    summary.record_ids[block.name] = record_id
                    logger.debug(f"图块已暂存: {block.name} -> {record.content_hash[:12]}")

                uow.commit()
        except ImportCancelled:
            logger.info(f"导入已取消，已回滚: {source_path}")
            raise
        except Exception:
            logger.exception(f"导入失败，已回滚: {source_path}")
            raise

        logger.info(
            f"导入完成: {source_path} upserted={summary.upserted} "
            f"skipped_empty={summary.skipped_empty} skipped_ignored={summary.skipped_ignored}"
        )
        return summary

    def _is_eligible(self, block: BlockDefinition, include_anonymous: bool) -> bool:
        """匿名块按开关过滤；模型空间/图纸空间始终跳过"""
        name = block.name or ""
        if not include_anonymous:
            if not name or name.startswith(self.config.import_.anonymous_prefix):
                return False
        upper = name.upper()
        if upper == MODEL_SPACE or upper.startswith(PAPER_SPACE):
            return False
        return True
