"""
inspect 命令 — 查看模型解析结果。

支持两种输出：
1. rich：表格展示每个模型的类型、命令、proxy 与过滤参数
2. json：完整的 ResolvedModel 字典，便于脚本处理
"""

from __future__ import annotations

import json
from typing import Any

from swap_config.cli.utils import (
    configure_logging,
    create_console,
    create_model_table,
    handle_swap_config_error,
    print_error,
)
from swap_config.config.loader import load_config
from swap_config.errors import CommandParseError, SwapConfigError
from swap_config.resolve import ResolvedModel

console = create_console()


def inspect_command(
    path: str,
    model: str | None = None,
    format: str = "rich",
    verbose: bool = False,
) -> None:
    """加载配置并输出一个或全部模型的解析结果。"""
    if format not in ("rich", "json"):
        print_error(f"不支持的输出格式：{format}（可选 rich / json）")

    try:
        config = load_config(path)
        configure_logging(config.log_level, verbose)
        results: dict[str, ResolvedModel | CommandParseError]
        if model is not None:
            resolved = config.resolve(model)
            results = {resolved.model_id: resolved}
        else:
            results = config.resolve_all()
    except SwapConfigError as e:
        handle_swap_config_error(e)

    if format == "json":
        _output_json(results)
    else:
        console.print(create_model_table(results))


def _output_json(results: dict[str, ResolvedModel | CommandParseError]) -> None:
    """输出 JSON 格式。"""
    data: dict[str, Any] = {}
    for model_id, result in results.items():
        data[model_id] = result.to_dict()
    json_text = json.dumps(data, ensure_ascii=False, indent=2)
    console.print(json_text, markup=False, highlight=False, soft_wrap=True)
