"""
JSON 图块目录 - 把已提交的图块记录持久化到单个JSON文件

每次 commit 生效前整体重写文件，写盘失败则本次提交不生效；构造时从文件加载。
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from ..config import get_config
from ..interfaces import StorageError
from ..models import StoredBlock
from .memory import InMemoryBlockRepository


class JsonBlockCatalog(InMemoryBlockRepository):
    """JSON 文件图块目录"""

    def __init__(self, catalog_path: str | Path | None = None):
        super().__init__()
        self.catalog_path = Path(catalog_path or get_config().storage.catalog_path)
        self._load()

    def _on_commit(self, rows: dict[int, StoredBlock]) -> None:
        self._persist(rows)

    def _persist(self, rows: dict[int, StoredBlock]) -> None:
        """持久化目录；写盘失败时删除临时文件并抛出 StorageError"""
        data = {
            "schema_version": "1.0",
            "next_id": self._next_id,
            "blocks": [row.model_dump(mode="json") for row in rows.values()],
        }

        tmp_path = self.catalog_path.with_suffix(self.catalog_path.suffix + ".tmp")
        try:
            self.catalog_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.catalog_path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"图块目录写入失败: {self.catalog_path}: {e}") from e

    def _load(self) -> None:
        """从磁盘加载目录"""
        if not self.catalog_path.exists():
            return

        try:
            with open(self.catalog_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            rows = [StoredBlock(**item) for item in data.get("blocks", [])]
        except (OSError, ValueError) as e:
            raise StorageError(f"图块目录加载失败: {self.catalog_path}: {e}") from e

        for row in rows:
            self._rows[row.id] = row
            self._key_index[(row.source_path, row.block_name)] = row.id
        max_id = max(self._rows, default=0)
        self._next_id = max(int(data.get("next_id", 1)), max_id + 1)
