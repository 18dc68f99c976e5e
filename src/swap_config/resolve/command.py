"""启动命令清洗：多行命令字符串 → argv 列表。

YAML 中的 cmd 常写成多行::

    cmd: |
      llama-server \\
        --model /models/llama-8b.gguf \\
        # --flash-attn
        --port ${PORT}

清洗规则：
- 以 ``#`` 开头的行视为注释，整行丢弃
- 行尾反斜杠为续行符，去掉后与下一行以空格拼接
- 跨行引号内部的行原样保留（其中的 ``#`` 行不是注释）
- 拼接结果按 POSIX shell 分词规则切分（支持单双引号，不做变量展开和通配）

# [Design Decision] 只做词法切分，绝不交给真实 shell 执行，
# 因此不存在注入问题，结果也完全确定。
"""

from __future__ import annotations

import shlex

from swap_config.errors import CommandParseError


def _scan_quotes(line: str, quote: str | None) -> str | None:
    """返回扫描完 line 之后仍未闭合的引号字符，没有则为 None。"""
    escaped = False
    for ch in line:
        if escaped:
            escaped = False
        elif quote == "'":
            if ch == "'":
                quote = None
        elif ch == "\\":
            escaped = True
        elif quote == '"':
            if ch == '"':
                quote = None
        elif ch in "'\"":
            quote = ch
    return quote


def _join_lines(raw: str) -> str:
    """去掉注释行并处理续行符。"""
    lines: list[str] = []
    quote: str | None = None
    for line in raw.splitlines():
        in_quote = quote is not None
        if not in_quote and line.strip().startswith("#"):
            continue
        quote = _scan_quotes(line, quote)
        if quote is None and line.rstrip().endswith("\\"):
            # 引号内的前导空白属于参数内容，不能去掉
            text = line.rstrip() if in_quote else line.strip()
            lines.append(text[:-1] + " ")
        else:
            lines.append(line)
    return "\n".join(lines)


def sanitize_command(raw: str, model_id: str = "") -> list[str]:
    """
    将原始命令字符串切分为参数列表。

    参数:
        raw: cmd 原始字符串（已完成宏替换）
        model_id: 所属模型 ID，仅用于错误信息

    返回:
        参数列表，第一个元素是可执行文件

    异常:
        CommandParseError: 引号未闭合或命令为空
    """
    joined = _join_lines(raw or "")

    try:
        args = shlex.split(joined)
    except ValueError as e:
        owner = f"模型 '{model_id}' 的" if model_id else ""
        raise CommandParseError(
            what=f"{owner}启动命令无法解析。",
            why=f"{e}（命令：{raw!r}）",
            how="检查命令中的单引号/双引号是否成对出现，行尾反斜杠后不要跟其他字符。",
            command=raw,
            model_id=model_id,
        ) from e

    if not args:
        owner = f"模型 '{model_id}' 的" if model_id else ""
        raise CommandParseError(
            what=f"{owner}启动命令为空。",
            why="去掉注释行和续行符后没有剩下任何参数。",
            how="为 cmd 填写可执行文件及其参数，或删除 cmd 改用 proxy 指向远程服务。",
            command=raw,
            model_id=model_id,
        )

    return args
