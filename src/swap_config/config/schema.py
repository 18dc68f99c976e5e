"""
代理配置的 Schema 定义与校验。

配置文件描述一组具名模型后端：本地拉起的进程（cmd）或远程代理目标（proxy），
以及每个模型的请求过滤规则。本模块定义 YAML 文件的 Schema 并负责结构校验。

# [Design Decision] 使用 Pydantic 模型作为 Schema 定义，
# 字段名与 YAML 键保持一致（camelCase 通过 alias 映射），
# 未知键一律拒绝，拼错的字段在加载时就会暴露。

# [Design Decision] 模型对象 frozen=True，加载后不可变。
# 清洗后的命令、过滤列表等派生值每次调用重新计算，不做缓存，
# 因此多线程并发读取无需加锁。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from swap_config.resolve.command import sanitize_command
from swap_config.resolve.filters import sanitize_strip_params
from swap_config.resolve.macros import (
    MACRO_NAME_PATTERN,
    RESERVED_MACROS,
    substitute_macros,
)
from swap_config.resolve.remote import is_remote_model

if TYPE_CHECKING:
    from swap_config.resolve.model import ResolvedModel


class ModelFilters(BaseModel):
    """
    请求过滤规则。

    stripParams 为规范字段名，strip_params 为旧版字段名（向后兼容）。
    两者同时存在时以 stripParams 为准。
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    strip_params: str | None = Field(
        default=None,
        alias="stripParams",
        description="转发前从请求中移除的参数，逗号分隔",
    )
    legacy_strip_params: str | None = Field(
        default=None,
        alias="strip_params",
        description="stripParams 的旧版写法",
    )

    @property
    def raw_strip_params(self) -> str:
        """实际生效的原始字符串（尚未宏替换）。"""
        # 空字符串与缺省等价，回退到旧版字段
        if self.strip_params:
            return self.strip_params
        return self.legacy_strip_params or ""

    def sanitized_strip_params(self, macros: Mapping[str, str] | None = None) -> list[str]:
        """展开宏后返回去重、排序的参数名列表。"""
        return sanitize_strip_params(self.raw_strip_params, macros)


class ModelConfig(BaseModel):
    """
    单个模型后端的配置。

    YAML 示例::

        models:
          llama-8b:
            cmd: |
              llama-server --port ${PORT}
                --model /models/llama-8b.gguf
            aliases: [gpt-4o-mini]
            ttl: 300
            sendLoadingState: false
            filters:
              stripParams: "temperature, top_p"
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    cmd: str = Field(default="", description="本地启动命令")
    cmd_stop: str = Field(default="", alias="cmdStop", description="自定义停止命令")
    proxy: str = Field(default="", description="请求转发目标 URL")
    aliases: list[str] = Field(default_factory=list, description="模型别名")
    env: list[str] = Field(default_factory=list, description="KEY=VALUE 形式的环境变量")
    check_endpoint: str = Field(
        default="/health",
        alias="checkEndpoint",
        description="健康检查路径，none 表示不检查",
    )
    ttl: int = Field(default=0, ge=0, description="空闲多少秒后卸载，0 表示不卸载")
    unlisted: bool = Field(default=False, description="是否在 /v1/models 中隐藏")
    use_model_name: str = Field(
        default="",
        alias="useModelName",
        description="转发时改写的上游模型名",
    )
    name: str = Field(default="", description="展示名称")
    description: str = Field(default="", description="展示描述")
    send_loading_state: bool | None = Field(
        default=None,
        alias="sendLoadingState",
        description="覆盖全局 sendLoadingState，缺省表示继承",
    )
    filters: ModelFilters = Field(default_factory=ModelFilters)

    @field_validator(
        "cmd", "cmd_stop", "proxy", "use_model_name", "name", "description", mode="before"
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        # YAML 中 `proxy:` 留空会得到 None
        return "" if value is None else value

    @field_validator("aliases", "env", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("filters", mode="before")
    @classmethod
    def _none_as_empty_filters(cls, value: Any) -> Any:
        # 整个 filters 块被注释掉时只剩下 `filters:`
        return {} if value is None else value

    @field_validator("env")
    @classmethod
    def _validate_env(cls, value: list[str]) -> list[str]:
        for entry in value:
            if "=" not in entry or entry.startswith("="):
                raise ValueError(f"环境变量 '{entry}' 格式错误，应为 KEY=VALUE。")
        return value

    def sanitized_command(
        self,
        macros: Mapping[str, str] | None = None,
        model_id: str = "",
    ) -> list[str]:
        """展开宏后将 cmd 切分为 argv。

        异常:
            CommandParseError: 引号未闭合或命令为空
        """
        return sanitize_command(substitute_macros(self.cmd, macros or {}), model_id)

    def sanitized_cmd_stop(
        self,
        macros: Mapping[str, str] | None = None,
        model_id: str = "",
    ) -> list[str] | None:
        """cmdStop 的 argv；未配置时返回 None。"""
        if not self.cmd_stop.strip():
            return None
        return sanitize_command(substitute_macros(self.cmd_stop, macros or {}), model_id)

    def is_remote_model(self, macros: Mapping[str, str] | None = None) -> bool:
        """是否为远程模型（没有 cmd 且 proxy 不指向回环地址）。"""
        return is_remote_model(self.cmd, substitute_macros(self.proxy, macros or {}))

    def effective_send_loading_state(self, global_default: bool) -> bool:
        """模型自身的覆盖值优先，否则继承全局默认值。"""
        if self.send_loading_state is None:
            return global_default
        return self.send_loading_state


class ProxyConfig(BaseModel):
    """
    完整的代理配置 — 对应 YAML 配置文件的根结构。

    YAML 文件示例::

        startPort: 10001
        sendLoadingState: true
        macros:
          default_strip: "temperature, top_p"
        models:
          model1:
            cmd: path/to/cmd --port ${PORT}
            filters:
              stripParams: "model, top_k, ${default_strip}"
          remote:
            proxy: https://api.example.com/v1
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    health_check_timeout: int = Field(
        default=120,
        ge=15,
        alias="healthCheckTimeout",
        description="等待模型就绪的秒数",
    )
    log_level: Literal["debug", "info", "warn", "error"] = Field(
        default="info",
        alias="logLevel",
        description="日志级别",
    )
    start_port: int = Field(
        default=5800,
        ge=1,
        le=65535,
        alias="startPort",
        description="${PORT} 宏的起始端口",
    )
    send_loading_state: bool = Field(
        default=False,
        alias="sendLoadingState",
        description="模型加载期间是否向客户端推送状态",
    )
    macros: dict[str, str] = Field(default_factory=dict, description="全局宏表")
    models: dict[str, ModelConfig] = Field(default_factory=dict, description="模型定义")

    @field_validator("macros", mode="before")
    @classmethod
    def _stringify_macros(cls, value: Any) -> Any:
        # YAML 会把 `ctx: 4096` 解析成 int，宏值统一按字符串处理
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        result = {}
        for name, macro_value in value.items():
            if isinstance(macro_value, bool):
                macro_value = "true" if macro_value else "false"
            elif isinstance(macro_value, (int, float)):
                macro_value = str(macro_value)
            result[name] = macro_value
        return result

    @field_validator("models", mode="before")
    @classmethod
    def _empty_models(cls, value: Any) -> Any:
        # `models:` 或 `model1:` 留空时 YAML 给出 None
        if value is None:
            return {}
        if isinstance(value, dict):
            return {k: ({} if v is None else v) for k, v in value.items()}
        return value

    @field_validator("macros")
    @classmethod
    def _validate_macro_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not MACRO_NAME_PATTERN.match(name):
                raise ValueError(
                    f"宏名称 '{name}' 不合法，只能包含字母、数字、下划线和连字符。"
                )
            if name in RESERVED_MACROS:
                raise ValueError(
                    f"宏名称 '{name}' 是保留名称（{', '.join(sorted(RESERVED_MACROS))}），"
                    f"由系统自动注入。"
                )
        return value

    @model_validator(mode="after")
    def _validate_aliases(self) -> ProxyConfig:
        """别名在所有模型间唯一，且不能与模型 ID 重名。"""
        owners: dict[str, str] = {}
        for model_id, model in self.models.items():
            for alias in model.aliases:
                if alias in self.models:
                    raise ValueError(
                        f"模型 '{model_id}' 的别名 '{alias}' 与已有模型 ID 冲突。"
                    )
                if alias in owners:
                    raise ValueError(
                        f"别名 '{alias}' 同时被模型 '{owners[alias]}' 和 '{model_id}' 使用。"
                    )
                owners[alias] = model_id
        return self

    def real_model_name(self, name: str) -> str | None:
        """按模型 ID 或别名查找，返回模型 ID；找不到返回 None。"""
        if name in self.models:
            return name
        for model_id, model in self.models.items():
            if name in model.aliases:
                return model_id
        return None

    def resolve(self, model_id: str) -> ResolvedModel:
        """解析单个模型。见 :func:`swap_config.resolve.model.resolve_model`。"""
        from swap_config.resolve.model import resolve_model

        return resolve_model(self, model_id)

    def resolve_all(self) -> dict[str, Any]:
        """解析全部模型。见 :func:`swap_config.resolve.model.resolve_models`。"""
        from swap_config.resolve.model import resolve_models

        return resolve_models(self)
