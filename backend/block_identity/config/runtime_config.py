"""
运行期配置 - 读取 config/runtime.yaml

职责：
- 加载采样段数/深度预算/导入过滤/存储路径等运行参数
- 提供环境变量覆盖机制（前缀 BLOCKID_，嵌套分隔符 __）
- 类型安全的配置访问
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class HashingConfig(BaseModel):
    """几何展开与采样配置"""

    circle_segments: int = 64
    arc_segments: int = 64
    ellipse_segments: int = 72
    text_width_factor: float = 0.6
    max_depth: int = 32


class ImportConfig(BaseModel):
    """导入过滤配置"""

    include_anonymous: bool = False
    anonymous_prefix: str = "*"
    version_tag: str = "v1"
    ignore_blocks: list[str] = Field(default_factory=list)

    def ignore_set(self) -> set[str]:
        """忽略名单（大小写不敏感）"""
        return {name.strip().casefold() for name in self.ignore_blocks if name and name.strip()}


class StorageConfig(BaseModel):
    """图块目录存储配置"""

    catalog_path: Path = Path("storage/block_catalog.json")


class ODAConfig(BaseModel):
    """ODA转换器配置"""

    exe_path: str = ""
    output_version: str = "ACAD2018"
    audit: bool = True


class TimeoutConfig(BaseModel):
    """超时配置"""

    oda_convert_sec: int = 600


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    hashing: HashingConfig = Field(default_factory=HashingConfig)
    import_: ImportConfig = Field(default_factory=ImportConfig, alias="import")
    storage: StorageConfig = Field(default_factory=StorageConfig)
    oda: ODAConfig = Field(default_factory=ODAConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "BLOCKID_",
        "env_nested_delimiter": "__",
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        # "import" 是关键字，按别名传入
        sections = {
            "hashing": HashingConfig(**cls._extract(runtime_opts, "hashing")),
            "import": ImportConfig(**cls._extract(runtime_opts, "import")),
            "storage": StorageConfig(**cls._extract(runtime_opts, "storage")),
            "oda": ODAConfig(**cls._extract(runtime_opts, "oda_converter")),
            "timeouts": TimeoutConfig(**cls._extract(runtime_opts, "timeouts")),
            "logging": LoggingConfig(**cls._extract(runtime_opts, "logging")),
        }
        config = cls(**sections)

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.storage.catalog_path.is_absolute():
            self.storage.catalog_path = (base_dir / self.storage.catalog_path).resolve()
        # 仅含目录部分的相对路径按配置文件解析；裸命令名留给 PATH 查找
        exe_path = Path(self.oda.exe_path) if self.oda.exe_path else None
        if exe_path and not exe_path.is_absolute() and exe_path.parent != Path("."):
            self.oda.exe_path = str((base_dir / exe_path).resolve())


def configure_logging(config: RuntimeConfig | None = None) -> None:
    """按配置设置包级日志级别"""
    cfg = config or get_config()
    level = logging.getLevelName(cfg.logging.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger("block_identity").setLevel(level)


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
