"""
YAML 配置文件加载与校验。

本模块负责：
1. 从文件路径、字符串或文本流加载 YAML 配置
2. 使用 Pydantic Schema 校验配置内容
3. 提供人类可读的校验错误信息
4. 预解析全部模型，收集命令切分错误（validate 命令使用）

# [DX Decision] 加载失败时的错误信息必须精确到字段级别，
# 告诉用户哪个文件、哪个字段、什么值有问题、应该改成什么。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TextIO

import yaml
from pydantic import ValidationError

from swap_config.config.schema import ProxyConfig
from swap_config.errors import CommandParseError, ConfigLoadError, ConfigValidationError

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> ProxyConfig:
    """
    加载并校验配置文件。

    参数:
        path: YAML 文件路径

    返回:
        ProxyConfig 实例

    异常:
        ConfigLoadError: 文件不存在或格式错误
        ConfigValidationError: 配置校验失败
    """
    path = Path(path)
    if not path.exists():
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 不存在。",
            why=f"在路径 '{path.absolute()}' 下未找到该文件。",
            how="请检查文件路径是否正确。",
            file_path=str(path),
        )

    try:
        content = path.read_text(encoding="utf-8")
    except Exception as e:
        raise ConfigLoadError(
            what=f"无法读取配置文件 '{path}'。",
            why=str(e),
            how="请检查文件权限和编码（需要 UTF-8）。",
            file_path=str(path),
        ) from e

    logger.info("加载配置文件：%s", path)
    return load_config_from_text(content, source=str(path))


def load_config_from_stream(stream: TextIO, source: str = "<stream>") -> ProxyConfig:
    """从文本流加载配置。"""
    return load_config_from_text(stream.read(), source=source)


def load_config_from_text(content: str, source: str = "<string>") -> ProxyConfig:
    """从 YAML 字符串加载配置。"""
    raw = _parse_yaml(content, source)
    return _validate_config(raw, source)


def _parse_yaml(content: str, source: str) -> dict[str, Any]:
    """解析 YAML 文本，根元素必须是字典。"""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(
            what=f"配置 '{source}' 的 YAML 格式无效。",
            why=str(e),
            how="请使用 YAML 格式校验工具检查文件语法。",
            file_path=source,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            what=f"配置 '{source}' 的根元素必须是字典（mapping）。",
            why=f"实际类型为 {type(data).__name__}。",
            how="请确保 YAML 文件的根元素是键值对形式，例如：\n"
                "  models:\n"
                "    model1:\n"
                "      cmd: llama-server --port ${PORT}",
            file_path=source,
        )
    return data


def _validate_config(raw: dict[str, Any], source: str) -> ProxyConfig:
    """使用 Pydantic 校验配置字典。"""
    try:
        return ProxyConfig.model_validate(raw)
    except ValidationError as e:
        error_details = []
        field_paths = []
        for err in e.errors():
            field_path = ".".join(str(loc) for loc in err["loc"])
            field_paths.append(field_path)
            label = f"字段 '{field_path}'" if field_path else "配置"
            error_details.append(f"  {label}: {err['msg']}")

        raise ConfigValidationError(
            what=f"配置 '{source}' 校验失败（{len(e.errors())} 个错误）。",
            why="\n".join(error_details),
            how="请对照错误字段修正配置项。"
                "可以使用 'swap-config validate <path>' 命令进行预校验。",
            config_path=source,
            field_path=field_paths[0] if field_paths else "",
        ) from e


def validate_config_file(path: str | Path) -> list[str]:
    """
    校验配置文件并预解析全部模型，返回错误列表。

    这个方法不会抛出异常，而是收集所有错误并返回。
    用于 CLI 的 validate 命令和 CI 流程。

    参数:
        path: YAML 文件路径

    返回:
        错误信息列表（空列表表示校验通过）
    """
    errors: list[str] = []

    try:
        config = load_config(path)
    except (ConfigLoadError, ConfigValidationError) as e:
        errors.append(e.full_message)
        return errors

    for result in config.resolve_all().values():
        if isinstance(result, CommandParseError):
            errors.append(result.full_message)

    return errors
