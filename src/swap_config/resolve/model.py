"""
模型解析 — 组合宏替换、过滤清洗、命令切分与远程判定。

输入是加载后的 ProxyConfig，输出是路由层直接使用的 ResolvedModel。

解析是纯函数：不修改配置、不做 I/O、不缓存结果，
对同一配置重复调用得到相同结果，可在多个线程中并发调用。

每个模型的宏表 = 全局 macros + 系统注入宏：
- ``MODEL_ID``：模型 ID
- ``PORT``：从 startPort 起按声明顺序分配给需要端口的模型
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from swap_config.errors import CommandParseError, ModelNotFoundError
from swap_config.resolve.macros import find_placeholders, substitute_macros
from swap_config.resolve.remote import is_remote_model

if TYPE_CHECKING:
    from swap_config.config.schema import ModelConfig, ProxyConfig

logger = logging.getLogger(__name__)

PORT_PLACEHOLDER = "${PORT}"

# 有 cmd 但没有 proxy 时使用的默认转发目标
DEFAULT_PROXY = "http://localhost:${PORT}"


@dataclass(frozen=True)
class ResolvedModel:
    """解析完成的模型视图。

    Attributes:
        model_id: 模型 ID
        command: 启动命令 argv；没有 cmd 时为 None
        cmd_stop: 停止命令 argv；未配置时为 None
        proxy: 宏替换后的转发目标
        strip_params: 转发前要移除的参数（去重、排序）
        send_loading_state: 继承全局默认值后的实际取值
        is_remote: 是否为远程模型
        unresolved_macros: 解析后仍残留的占位符名称
    """
    model_id: str
    command: tuple[str, ...] | None
    cmd_stop: tuple[str, ...] | None
    proxy: str
    strip_params: tuple[str, ...]
    send_loading_state: bool
    is_remote: bool
    aliases: tuple[str, ...] = ()
    env: tuple[str, ...] = ()
    check_endpoint: str = "/health"
    ttl: int = 0
    unlisted: bool = False
    use_model_name: str = ""
    unresolved_macros: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """转换为 JSON 友好的字典。"""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data


def _needs_port(model: ModelConfig) -> bool:
    for text in (model.cmd, model.cmd_stop, model.proxy):
        if PORT_PLACEHOLDER in text:
            return True
    return bool(model.cmd.strip()) and not model.proxy.strip()


def allocate_ports(config: ProxyConfig) -> dict[str, int]:
    """
    为引用了 ``${PORT}`` 的模型分配端口。

    按 models 的声明顺序从 startPort 递增分配，结果只取决于配置内容。
    有 cmd 但未配置 proxy 的模型会使用默认 proxy，因此也会分配端口。
    """
    ports: dict[str, int] = {}
    next_port = config.start_port
    for model_id, model in config.models.items():
        if _needs_port(model):
            ports[model_id] = next_port
            next_port += 1
    return ports


def model_macros(
    config: ProxyConfig,
    model_id: str,
    ports: dict[str, int] | None = None,
) -> dict[str, str]:
    """构造单个模型使用的宏表（全局宏 + 系统注入宏）。"""
    if ports is None:
        ports = allocate_ports(config)
    macros = dict(config.macros)
    macros["MODEL_ID"] = model_id
    if model_id in ports:
        macros["PORT"] = str(ports[model_id])
    return macros


def _build(
    config: ProxyConfig,
    model_id: str,
    ports: dict[str, int],
) -> ResolvedModel:
    model = config.models[model_id]
    macros = model_macros(config, model_id, ports)

    raw_proxy = model.proxy
    if not raw_proxy.strip() and model.cmd.strip():
        raw_proxy = DEFAULT_PROXY
    proxy = substitute_macros(raw_proxy, macros)

    command = None
    if model.cmd.strip():
        command = tuple(model.sanitized_command(macros, model_id=model_id))
    cmd_stop = model.sanitized_cmd_stop(macros, model_id=model_id)
    strip_params = tuple(model.filters.sanitized_strip_params(macros))
    check_endpoint = substitute_macros(model.check_endpoint, macros)

    unresolved: dict[str, None] = {}
    for text in (model.cmd, model.cmd_stop, raw_proxy, model.filters.raw_strip_params):
        for name in find_placeholders(substitute_macros(text, macros)):
            unresolved.setdefault(name, None)
    if unresolved:
        logger.warning(
            "模型 %s 中存在未定义的宏：%s（已按原样保留）",
            model_id,
            ", ".join(unresolved),
        )

    resolved = ResolvedModel(
        model_id=model_id,
        command=command,
        cmd_stop=tuple(cmd_stop) if cmd_stop is not None else None,
        proxy=proxy,
        strip_params=strip_params,
        send_loading_state=model.effective_send_loading_state(config.send_loading_state),
        is_remote=is_remote_model(model.cmd, proxy),
        aliases=tuple(model.aliases),
        env=tuple(model.env),
        check_endpoint=check_endpoint,
        ttl=model.ttl,
        unlisted=model.unlisted,
        use_model_name=model.use_model_name,
        unresolved_macros=tuple(unresolved),
    )
    logger.debug(
        "模型 %s 解析完成：remote=%s, proxy=%s, strip_params=%s",
        model_id,
        resolved.is_remote,
        resolved.proxy,
        list(resolved.strip_params),
    )
    return resolved


def resolve_model(config: ProxyConfig, name: str) -> ResolvedModel:
    """
    解析单个模型，name 可以是模型 ID 或别名。

    异常:
        ModelNotFoundError: 模型不存在
        CommandParseError: cmd / cmdStop 无法切分
    """
    model_id = config.real_model_name(name)
    if model_id is None:
        available = list(config.models)
        raise ModelNotFoundError(
            what=f"未找到模型 '{name}'。",
            why="该名称既不是 models 中的模型 ID，也不是任何模型的别名。",
            how=f"可用模型：{', '.join(available) or '（无）'}。",
            model_id=name,
            available_models=available,
        )
    return _build(config, model_id, allocate_ports(config))


def resolve_models(config: ProxyConfig) -> dict[str, ResolvedModel | CommandParseError]:
    """
    解析配置中的全部模型。

    单个模型的命令解析失败不会影响其他模型：
    失败的模型在结果中对应一个 CommandParseError 实例。
    """
    ports = allocate_ports(config)
    results: dict[str, ResolvedModel | CommandParseError] = {}
    for model_id in config.models:
        try:
            results[model_id] = _build(config, model_id, ports)
        except CommandParseError as e:
            logger.error("模型 %s 解析失败：%s", model_id, e.what)
            results[model_id] = e
    return results
