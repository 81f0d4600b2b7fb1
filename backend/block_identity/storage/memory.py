"""
内存图块目录 - 存储协作者的参考实现

职责：
1. 按 (source_path, block_name) 唯一键 upsert，冲突时保留ID并覆盖其余字段
2. 工作单元暂存写入，commit 时一次性生效，rollback/异常时全部丢弃
3. 按ID/来源+名称/内容指纹/模糊文本查询

测试要点：
- test_upsert_conflict_keeps_id: 同键覆盖保留ID
- test_rollback_discards: 回滚后不可见
- test_get_by_hash_latest: 同指纹取最近更新
- test_interleaved_units_same_key: 并发工作单元对同一新键返回同一ID
"""

from __future__ import annotations

import threading
from datetime import datetime

from ..interfaces import IBlockRepository, IUnitOfWork, StorageError
from ..models import BlockRecord, StoredBlock

RecordKey = tuple[str, str]


class InMemoryUnitOfWork(IUnitOfWork):
    """内存工作单元"""

    def __init__(self, repository: InMemoryBlockRepository) -> None:
        self._repo = repository
        self._staged: dict[RecordKey, tuple[int, BlockRecord]] = {}
        self._closed = False

    def upsert(self, record: BlockRecord) -> int:
        if self._closed:
            raise StorageError("工作单元已结束，不能继续写入")
        key = (record.source_path, record.block_name)
        if key in self._staged:
            record_id = self._staged[key][0]
        else:
            record_id = self._repo._resolve_id(key)
        self._staged[key] = (record_id, record)
        return record_id

    def commit(self) -> None:
        if self._closed:
            raise StorageError("工作单元已结束，不能重复提交")
        self._repo._apply(list(self._staged.values()))
        self._staged.clear()
        self._closed = True

    def rollback(self) -> None:
        self._staged.clear()
        self._closed = True

    @property
    def pending(self) -> int:
        """暂存的写入数"""
        return len(self._staged)


class InMemoryBlockRepository(IBlockRepository):
    """内存图块目录实现"""

    def __init__(self) -> None:
        self._rows: dict[int, StoredBlock] = {}
        self._key_index: dict[RecordKey, int] = {}
        # 已分配ID但尚未提交的键（跨工作单元共享）
        self._reserved: dict[RecordKey, int] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self)

    def get_by_id(self, record_id: int) -> StoredBlock | None:
        return self._rows.get(record_id)

    def get_by_source_and_name(self, source_path: str, block_name: str) -> StoredBlock | None:
        record_id = self._key_index.get((source_path, block_name))
        if record_id is None:
            return None
        return self._rows.get(record_id)

    def get_by_hash(self, content_hash: str) -> StoredBlock | None:
        matches = [r for r in self._rows.values() if r.content_hash == content_hash]
        if not matches:
            return None
        return max(matches, key=lambda r: (r.updated_at, r.id))

    def query(
        self,
        text_filter: str | None = None,
        offset: int = 0,
        limit: int = 100,
    ) -> list[StoredBlock]:
        rows = list(self._rows.values())
        needle = (text_filter or "").strip().casefold()
        if needle:
            rows = [
                r for r in rows
                if needle in r.block_name.casefold() or needle in r.source_path.casefold()
            ]

        # 按更新时间降序
        rows.sort(key=lambda r: (r.updated_at, r.id), reverse=True)

        return rows[offset: offset + limit]

    def __len__(self) -> int:
        return len(self._rows)

    def _resolve_id(self, key: RecordKey) -> int:
        """已存在或已被其他工作单元预留的键沿用ID，否则分配并预留新ID"""
        with self._lock:
            existing = self._key_index.get(key)
            if existing is None:
                existing = self._reserved.get(key)
            if existing is not None:
                return existing
            record_id = self._next_id
            self._next_id += 1
            self._reserved[key] = record_id
            return record_id

    def _apply(self, staged: list[tuple[int, BlockRecord]]) -> None:
        """
        提交暂存写入

        先在副本上合并，持久化钩子成功后才替换可见状态；
        钩子抛出异常时仓库保持提交前的内容。
        """
        with self._lock:
            rows = dict(self._rows)
            key_index = dict(self._key_index)
            now = datetime.now()
            for record_id, record in staged:
                key = (record.source_path, record.block_name)
                previous = rows.get(record_id)
                rows[record_id] = StoredBlock(
                    id=record_id,
                    created_at=previous.created_at if previous else now,
                    updated_at=now,
                    **record.model_dump(),
                )
                key_index[key] = record_id

            self._on_commit(rows)

            self._rows = rows
            self._key_index = key_index
            for _, record in staged:
                self._reserved.pop((record.source_path, record.block_name), None)

    def _on_commit(self, rows: dict[int, StoredBlock]) -> None:
        """提交生效前的钩子（子类用于持久化）；抛出异常则本次提交不生效"""
        pass
