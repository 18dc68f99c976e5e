"""
swap-config 配置模块。

提供 YAML 配置加载与 Schema 定义。
"""

from swap_config.config.loader import (
    load_config,
    load_config_from_stream,
    load_config_from_text,
    validate_config_file,
)
from swap_config.config.schema import ModelConfig, ModelFilters, ProxyConfig

__all__ = [
    "ModelConfig",
    "ModelFilters",
    "ProxyConfig",
    "load_config",
    "load_config_from_stream",
    "load_config_from_text",
    "validate_config_file",
]
