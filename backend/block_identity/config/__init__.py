"""
配置层 - 加载运行期配置

职责：
- 加载 config/runtime.yaml（运行期参数）
- 提供环境变量覆盖与类型安全的配置访问
"""

from .runtime_config import (
    HashingConfig,
    ImportConfig,
    RuntimeConfig,
    configure_logging,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "HashingConfig",
    "ImportConfig",
    "configure_logging",
    "get_config",
    "reload_config",
]
