"""
swap-config 结构化异常体系。

所有异常遵循"三段式"规范：What / Why / How to fix。
"""

from swap_config.errors.exceptions import (
    CommandParseError,
    ConfigLoadError,
    ConfigValidationError,
    ModelNotFoundError,
    SwapConfigError,
)

__all__ = [
    "CommandParseError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ModelNotFoundError",
    "SwapConfigError",
]
