"""
ODA 转换器 - 把 DWG 图纸转为 DXF 供 DxfDocumentReader 读取

ODA File Converter 命令行参数：
    <输入目录> <输出目录> <输出版本> <输出格式> <递归> <审计> [文件过滤]

每次只转换一个文件（以文件名作为过滤条件），输出写入调用方给定的目录。

测试要点：
- test_dwg_not_found: 输入文件不存在
- test_missing_exe: 可执行文件不存在或未配置
- test_timeout: 超时映射为 ConversionError
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from ..config import get_config
from ..interfaces import ConversionError, IDwgConverter

logger = logging.getLogger(__name__)

DXF_SUFFIX = ".dxf"


class ODAConverter(IDwgConverter):
    """ODA File Converter 封装（仅 DWG → DXF）"""

    def __init__(
        self,
        exe_path: str | None = None,
        timeout: int | None = None,
        output_version: str | None = None,
    ):
        config = get_config()
        self.exe = exe_path or config.oda.exe_path
        self.timeout = timeout or config.timeouts.oda_convert_sec
        self.output_version = output_version or config.oda.output_version
        self.audit = config.oda.audit

    def locate_exe(self) -> Path:
        """定位可执行文件：先按路径，再按 PATH 中的命令名"""
        if not self.exe:
            raise ConversionError("未配置 ODA File Converter 路径")
        candidate = Path(self.exe)
        if candidate.is_file():
            return candidate
        found = shutil.which(self.exe)
        if found:
            return Path(found)
        raise ConversionError(f"ODA可执行文件不存在: {self.exe}")

    def build_command(self, exe: Path, dwg_path: Path, output_dir: Path) -> list[str]:
        return [
            str(exe),
            str(dwg_path.parent),
            str(output_dir),
            self.output_version,
            "DXF",
            "0",
            "1" if self.audit else "0",
            dwg_path.name,
        ]

    def dwg_to_dxf(self, dwg_path: Path, output_dir: Path) -> Path:
        """DWG 转 DXF，返回生成的DXF路径"""
        dwg_path = Path(dwg_path)
        output_dir = Path(output_dir)
        if dwg_path.suffix.lower() != ".dwg":
            raise ConversionError(f"不是DWG文件: {dwg_path}")
        if not dwg_path.is_file():
            raise ConversionError(f"DWG文件不存在: {dwg_path}")

        exe = self.locate_exe()
        output_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(exe, dwg_path, output_dir)

        logger.info(f"DWG转DXF: {dwg_path.name} ({self.output_version})")
        started = time.monotonic()
        try:
            subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=True)
        except subprocess.TimeoutExpired as e:
            raise ConversionError(f"ODA转换超时({self.timeout}s): {dwg_path}") from e
        except subprocess.CalledProcessError as e:
            message = (e.stderr or e.stdout or "").strip()
            raise ConversionError(f"ODA转换失败(退出码{e.returncode}): {message}") from e
        except OSError as e:
            raise ConversionError(f"无法启动ODA转换器: {e}") from e

        result = self._find_dxf(output_dir, dwg_path.stem)
        logger.debug(f"DWG转DXF完成: {result.name} 用时{time.monotonic() - started:.1f}s")
        return result

    @staticmethod
    def _find_dxf(output_dir: Path, stem: str) -> Path:
        """按主文件名查找输出（扩展名大小写不敏感）"""
        matches = sorted(
            p for p in output_dir.iterdir()
            if p.stem == stem and p.suffix.lower() == DXF_SUFFIX
        )
        if not matches:
            raise ConversionError(f"转换后未找到DXF文件: {output_dir / (stem + DXF_SUFFIX)}")
        return matches[0]
