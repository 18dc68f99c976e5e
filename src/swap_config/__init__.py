"""
swap-config — 模型路由代理的配置解析库。

把声明式的 YAML 模型配置解析为路由层可以直接使用的形式：
宏替换、stripParams 清洗、启动命令切分、本地/远程判定。

快速上手::

    from swap_config import load_config

    config = load_config("config.yaml")
    resolved = config.resolve("llama-8b")
    resolved.command        # → ("llama-server", "--port", "5800", ...)
    resolved.strip_params   # → ("temperature", "top_p")
    resolved.is_remote      # → False
"""

from swap_config.config import (
    ModelConfig,
    ModelFilters,
    ProxyConfig,
    load_config,
    load_config_from_stream,
    load_config_from_text,
    validate_config_file,
)
from swap_config.errors import (
    CommandParseError,
    ConfigLoadError,
    ConfigValidationError,
    ModelNotFoundError,
    SwapConfigError,
)
from swap_config.resolve import (
    ResolvedModel,
    is_loopback_url,
    is_remote_model,
    resolve_model,
    resolve_models,
    sanitize_command,
    sanitize_strip_params,
    substitute_macros,
)

__version__ = "0.1.0"

__all__ = [
    # 配置
    "ModelConfig",
    "ModelFilters",
    "ProxyConfig",
    "load_config",
    "load_config_from_stream",
    "load_config_from_text",
    "validate_config_file",
    # 解析
    "ResolvedModel",
    "is_loopback_url",
    "is_remote_model",
    "resolve_model",
    "resolve_models",
    "sanitize_command",
    "sanitize_strip_params",
    "substitute_macros",
    # 异常
    "CommandParseError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ModelNotFoundError",
    "SwapConfigError",
]
