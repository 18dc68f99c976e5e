"""
swap-config CLI — 命令行工具。

- validate: 校验配置文件
- inspect: 查看模型解析结果
- version: 显示版本
"""

from swap_config.cli.app import app, main

__all__ = ["app", "main"]
