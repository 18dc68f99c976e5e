"""
swap-config CLI — 命令行工具入口。

提供 validate / inspect / version 子命令。

用法::

    swap-config --help
    swap-config validate config.yaml
    swap-config inspect config.yaml --model llama-8b --format json
"""

from __future__ import annotations

import typer

from swap_config.cli.utils import create_console

app = typer.Typer(
    name="swap-config",
    help="swap-config — 模型路由代理配置解析工具",
    add_completion=False,
    no_args_is_help=True,
)

console = create_console()


# ============================================================
# 子命令注册
# ============================================================

@app.command(name="validate")
def validate(
    path: str = typer.Argument(
        "config.yaml",
        help="YAML 配置文件路径",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="严格模式：将未定义宏的警告视为错误",
    ),
) -> None:
    """校验配置文件并预解析全部模型。"""
    from swap_config.cli.cmd_validate import validate_command
    validate_command(path=path, strict=strict)


@app.command(name="inspect")
def inspect(
    path: str = typer.Argument(
        "config.yaml",
        help="YAML 配置文件路径",
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="只查看指定模型（ID 或别名）",
    ),
    format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="输出格式：rich（表格）/ json（完整解析结果）",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="详细输出（显示调试日志）",
    ),
) -> None:
    """查看模型的解析结果。"""
    from swap_config.cli.cmd_inspect import inspect_command
    inspect_command(path=path, model=model, format=format, verbose=verbose)


@app.command(name="version")
def version() -> None:
    """显示版本信息。"""
    from swap_config import __version__
    console.print(f"swap-config v{__version__}")


# ============================================================
# CLI 入口点
# ============================================================

def main() -> None:
    """CLI 入口点。"""
    app()


if __name__ == "__main__":
    main()
