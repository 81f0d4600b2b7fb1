"""
协作式取消令牌

导入引擎只在顶层图块之间检查一次，不在单个图块的递归展开内检查。
"""

from __future__ import annotations

import threading

from ..interfaces import ImportCancelled


class CancelToken:
    """取消令牌（可跨线程设置）"""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ImportCancelled("导入已取消")
