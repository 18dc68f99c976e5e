"""
模型配置解析流水线。

宏替换 → stripParams 清洗 / 命令切分 / 远程判定 → ResolvedModel。
"""

from swap_config.resolve.command import sanitize_command
from swap_config.resolve.filters import PROTECTED_PARAMS, sanitize_strip_params
from swap_config.resolve.macros import (
    RESERVED_MACROS,
    find_placeholders,
    substitute_macros,
)
from swap_config.resolve.model import (
    ResolvedModel,
    allocate_ports,
    model_macros,
    resolve_model,
    resolve_models,
)
from swap_config.resolve.remote import is_loopback_url, is_remote_model

__all__ = [
    "PROTECTED_PARAMS",
    "RESERVED_MACROS",
    "ResolvedModel",
    "allocate_ports",
    "find_placeholders",
    "is_loopback_url",
    "is_remote_model",
    "model_macros",
    "resolve_model",
    "resolve_models",
    "sanitize_command",
    "sanitize_strip_params",
    "substitute_macros",
]
