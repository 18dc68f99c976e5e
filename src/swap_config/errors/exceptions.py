"""
结构化异常体系 — 错误信息即文档。

每条异常遵循"三段式"规范：
1. What went wrong（发生了什么）
2. Why it happened（为什么发生）
3. How to fix it（怎么修）

# [DX Decision] 配置错误通常由运维人员在启动代理时看到，
# 错误信息必须指明是哪个模型、哪个字段、哪段命令出了问题。

示例::

    CommandParseError(
        what="模型 'llama-8b' 的启动命令无法解析。",
        why="命令中存在未闭合的引号。",
        how="检查 cmd 字段中的单引号/双引号是否成对出现。",
        command="llama-server --alias 'llama",
        model_id="llama-8b",
    )
"""

from __future__ import annotations

from typing import Any


class SwapConfigError(Exception):
    """
    swap-config 异常基类。

    所有异常都继承自此类，支持三段式错误消息。

    属性:
        what: 发生了什么
        why: 为什么发生
        how: 怎么修复
        details: 额外的上下文信息（用于调试）
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.what = what
        self.why = why
        self.how = how
        self.details = details or {}

        parts = [what]
        if why:
            parts.append(f"→ 原因：{why}")
        if how:
            parts.append(f"→ 修复建议：{how}")

        self.full_message = "\n".join(parts)
        super().__init__(self.full_message)

    def __str__(self) -> str:
        return self.full_message

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式，用于 JSON 输出。"""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "what": self.what,
        }
        if self.why:
            result["why"] = self.why
        if self.how:
            result["how"] = self.how
        if self.details:
            result["details"] = self.details
        return result


# === 配置相关异常 ===


class ConfigValidationError(SwapConfigError):
    """
    配置校验异常。

    当 YAML 配置字段不合法（类型错误、宏名称非法、别名冲突等）时抛出。

    示例::

        raise ConfigValidationError(
            what="配置 'config.yaml' 校验失败。",
            why="宏名称 'my macro' 含有非法字符。",
            how="宏名称只能包含字母、数字、下划线和连字符。",
            config_path="config.yaml",
            field_path="macros.my macro",
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        config_path: str = "",
        field_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {
            "config_path": config_path,
            "field_path": field_path,
        }
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.config_path = config_path
        self.field_path = field_path


class ConfigLoadError(SwapConfigError):
    """
    配置加载异常。

    当配置文件不存在、无法读取或 YAML 格式错误时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        file_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"file_path": file_path}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.file_path = file_path


# === 解析相关异常 ===


class CommandParseError(SwapConfigError):
    """
    启动命令解析异常。

    当 cmd / cmdStop 中存在未闭合的引号，或命令为空时抛出。
    只影响出错的那个模型，其余模型照常解析。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        command: str = "",
        model_id: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"command": command, "model_id": model_id}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.command = command
        self.model_id = model_id


# === 模型相关异常 ===


class ModelNotFoundError(SwapConfigError):
    """
    模型未找到异常。

    当请求解析的模型 ID 不在配置的 models 中时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        model_id: str = "",
        available_models: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {"model_id": model_id}
        if available_models:
            details["available_models"] = available_models
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.model_id = model_id
