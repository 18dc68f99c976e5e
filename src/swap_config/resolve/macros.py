"""宏替换。

将字符串中的 ``${name}`` 占位符替换为宏表中的值。

规则：
- 宏表中不存在的占位符原样保留（宽松策略，拼写错误不会阻断加载）
- 单次扫描、不递归：宏值本身不会再被展开，避免无限展开
- 永不抛出异常
"""

from __future__ import annotations

import re
from collections.abc import Mapping

# 宏名称：字母、数字、下划线、连字符
MACRO_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z0-9_-]+)\}")

# 由解析流程为每个模型自动注入的宏，用户不可定义
RESERVED_MACROS = frozenset({"PORT", "MODEL_ID"})


def substitute_macros(text: str, macros: Mapping[str, str]) -> str:
    """替换 text 中所有已知的 ``${name}`` 占位符。

    Examples:
        >>> substitute_macros("--port ${PORT}", {"PORT": "5800"})
        '--port 5800'
        >>> substitute_macros("${unknown}", {})
        '${unknown}'
    """
    if not text or not macros:
        return text

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in macros:
            return str(macros[name])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, text)


def find_placeholders(text: str) -> list[str]:
    """返回 text 中出现的占位符名称（按出现顺序，去重）。"""
    seen: dict[str, None] = {}
    for match in _PLACEHOLDER_RE.finditer(text or ""):
        seen.setdefault(match.group(1), None)
    return list(seen)
