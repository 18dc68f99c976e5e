"""
validate 命令 — 校验配置文件并预解析全部模型。

- 结构错误（YAML 语法、字段类型、宏名称、别名冲突）→ 失败
- 启动命令无法切分 → 失败
- 未定义的宏 → 警告；--strict 下视为错误
"""

from __future__ import annotations

import sys
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from swap_config.cli.utils import create_console, print_error, print_success
from swap_config.config.loader import load_config
from swap_config.errors import CommandParseError, ConfigLoadError, ConfigValidationError

console = create_console()


def validate_command(path: str, strict: bool = False) -> None:
    """
    校验配置文件的语法和语义正确性。

    使用 --strict 可将未定义宏的警告也视为错误（CI 流程中推荐）。
    """
    if not Path(path).exists():
        print_error(f"文件不存在：{path}")

    console.print(f"[bold]校验配置文件：[/bold] {escape(path)}\n")

    errors: list[str] = []
    warnings: list[str] = []
    try:
        config = load_config(path)
    except (ConfigLoadError, ConfigValidationError) as e:
        config = None
        errors.append(e.full_message)

    # 只解析一次，错误和警告都取自同一份结果
    if config is not None:
        for model_id, result in config.resolve_all().items():
            if isinstance(result, CommandParseError):
                errors.append(result.full_message)
            elif result.unresolved_macros:
                names = ", ".join(f"${{{name}}}" for name in result.unresolved_macros)
                warnings.append(f"模型 '{model_id}' 引用了未定义的宏：{names}")

    if errors:
        console.print(Panel(
            "\n".join(f"[red]X[/red] {escape(err)}" for err in errors),
            title=f"[bold red]校验失败（{len(errors)} 个错误）[/bold red]",
            border_style="red",
        ))
        sys.exit(1)

    if warnings:
        console.print(Panel(
            "\n".join(f"[yellow]![/yellow] {escape(w)}" for w in warnings),
            title=f"[bold yellow]警告（{len(warnings)} 条）[/bold yellow]",
            border_style="yellow",
        ))
        if strict:
            console.print("\n[bold red]严格模式下警告视为错误。[/bold red]")
            sys.exit(1)

    print_success(f"{escape(path)} 校验通过（{len(config.models)} 个模型）")
    if warnings:
        console.print(f"[dim]（有 {len(warnings)} 条警告，但不影响使用）[/dim]")
