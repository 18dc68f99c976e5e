"""
CLI 工具函数 — Rich 美化、日志配置、通用辅助。

提供 CLI 各子命令共用的实用函数，包括：
- Rich Console 美化输出
- 错误/成功信息统一格式
- 日志级别配置
- 解析结果表格
"""

from __future__ import annotations

import logging
import sys
from typing import NoReturn

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from swap_config.errors import CommandParseError, SwapConfigError
from swap_config.resolve import ResolvedModel

# 全局 Console 实例
_console: Console | None = None

# 配置文件中的 logLevel → logging 级别
_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def create_console() -> Console:
    """
    创建或获取全局 Rich Console 实例。

    # [DX Decision] 全局单例 Console，确保所有 CLI 输出格式一致。
    """
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_error(message: str, exit_code: int = 1) -> NoReturn:
    """打印错误信息并退出程序。"""
    console = create_console()
    # [DX Decision] 使用 X 而非 ✗，避免 Windows 终端编码问题
    console.print(f"[bold red]X 错误：[/bold red]{message}")
    sys.exit(exit_code)


def print_success(message: str) -> None:
    """打印成功信息。"""
    console = create_console()
    console.print(f"[bold green]OK[/bold green] {message}")


def configure_logging(log_level: str = "info", verbose: bool = False) -> None:
    """
    配置 swap_config 日志级别，verbose 时额外安装 DEBUG 级别的根 handler。

    参数:
        log_level: 配置文件中的 logLevel（debug / info / warn / error）
        verbose: 为 True 时强制 DEBUG
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
        level = logging.DEBUG
    else:
        level = _LOG_LEVELS.get(log_level, logging.INFO)
    logging.getLogger("swap_config").setLevel(level)


def create_model_table(results: dict[str, ResolvedModel | CommandParseError]) -> Table:
    """
    创建模型解析结果表格。

    参数:
        results: 模型 ID → 解析结果（或解析错误）

    返回:
        Rich Table 对象
    """
    table = Table(title="模型", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("类型", style="green")
    table.add_column("命令", style="white", max_width=60)
    table.add_column("Proxy", style="blue")
    table.add_column("stripParams", style="yellow")
    table.add_column("加载状态", justify="center")

    for model_id, result in results.items():
        if isinstance(result, CommandParseError):
            table.add_row(
                escape(model_id), "[red]错误[/red]", f"[red]{escape(result.what)}[/red]", "", "", ""
            )
            continue
        table.add_row(
            escape(model_id),
            "remote" if result.is_remote else "local",
            escape(" ".join(result.command)) if result.command else "[dim]-[/dim]",
            escape(result.proxy) or "[dim]-[/dim]",
            escape(", ".join(result.strip_params)) or "[dim]-[/dim]",
            "on" if result.send_loading_state else "off",
        )

    return table


def handle_swap_config_error(error: SwapConfigError) -> NoReturn:
    """
    统一处理 SwapConfigError 异常。

    # [DX Decision] 三段式错误信息：What / Why / How
    # 直接显示 full_message，无需重新格式化
    """
    console = create_console()
    console.print("\n[bold red]X 错误[/bold red]\n")
    console.print(error.full_message, markup=False)
    sys.exit(1)
