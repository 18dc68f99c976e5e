"""stripParams 过滤指令的清洗。

→ 代理在转发请求前要从请求体中移除的参数列表。

原始字符串可能包含宏占位符、重复项、空段和多余空白，
清洗后输出去重、排序、非空的参数名列表。
"""

from __future__ import annotations

from collections.abc import Mapping

from swap_config.resolve.macros import substitute_macros

# 路由依赖请求中的 model 字段，永远不能被剥离
PROTECTED_PARAMS = frozenset({"model"})


def sanitize_strip_params(
    raw: str,
    macros: Mapping[str, str] | None = None,
) -> list[str]:
    """
    展开宏并清洗逗号分隔的参数列表。

    处理步骤：
    1. 宏替换
    2. 按逗号切分并去除两端空白
    3. 丢弃空段与受保护参数（model）
    4. 去重后按字典序升序排列

    参数:
        raw: stripParams 原始字符串
        macros: 宏表

    返回:
        清洗后的参数名列表

    示例::

        >>> sanitize_strip_params("model, top_k, top_k, temperature, , ,")
        ['temperature', 'top_k']
    """
    if not raw:
        return []

    expanded = substitute_macros(raw, macros or {})

    cleaned: set[str] = set()
    for segment in expanded.split(","):
        param = segment.strip()
        if not param or param in PROTECTED_PARAMS:
            continue
        cleaned.add(param)

    return sorted(cleaned)
