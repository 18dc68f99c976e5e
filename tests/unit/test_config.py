"""
配置模块单元测试 — 测试 Schema 校验与 YAML 加载。

覆盖范围:
- config/schema.py: ProxyConfig / ModelConfig 字段、默认值与校验
- config/loader.py: load_config(), load_config_from_text(), load_config_from_stream(),
  validate_config_file()
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from pydantic import ValidationError

from swap_config.config.loader import (
    load_config,
    load_config_from_stream,
    load_config_from_text,
    validate_config_file,
)
from swap_config.config.schema import ModelConfig, ProxyConfig
from swap_config.errors import ConfigLoadError, ConfigValidationError


# === ProxyConfig 测试 ===


class TestProxyConfig:
    """ProxyConfig 根配置测试。"""

    def test_default_values(self) -> None:
        """测试所有字段都有合理的默认值。"""
        config = ProxyConfig()
        assert config.macros == {}
        assert config.models == {}
        assert config.send_loading_state is False
        assert config.health_check_timeout == 120
        assert config.log_level == "info"
        assert config.start_port == 5800

    def test_camel_case_keys(self) -> None:
        """测试 YAML 键名（camelCase）映射。"""
        config = ProxyConfig.model_validate({
            "healthCheckTimeout": 30,
            "logLevel": "debug",
            "startPort": 10001,
            "sendLoadingState": True,
        })
        assert config.health_check_timeout == 30
        assert config.log_level == "debug"
        assert config.start_port == 10001
        assert config.send_loading_state is True

    def test_unknown_key_rejected(self) -> None:
        """测试未知键被拒绝。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({"modles": {}})

    def test_health_check_timeout_minimum(self) -> None:
        """测试健康检查超时下限。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({"healthCheckTimeout": 5})

    def test_invalid_log_level(self) -> None:
        """测试非法日志级别。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({"logLevel": "verbose"})

    def test_macro_values_stringified(self) -> None:
        """测试数字和布尔宏值被转为字符串。"""
        config = ProxyConfig.model_validate({"macros": {"ctx": 4096, "flag": True}})
        assert config.macros == {"ctx": "4096", "flag": "true"}

    def test_invalid_macro_name(self) -> None:
        """测试宏名称含非法字符。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({"macros": {"bad name": "x"}})

    def test_reserved_macro_name(self) -> None:
        """测试保留宏名称不能被用户定义。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({"macros": {"PORT": "8080"}})

    def test_duplicate_alias(self) -> None:
        """测试别名在模型间重复。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({
                "models": {
                    "a": {"cmd": "srv", "aliases": ["shared"]},
                    "b": {"cmd": "srv", "aliases": ["shared"]},
                },
            })

    def test_alias_shadowing_model_id(self) -> None:
        """测试别名与模型 ID 重名。"""
        with pytest.raises(ValidationError):
            ProxyConfig.model_validate({
                "models": {
                    "a": {"cmd": "srv", "aliases": ["b"]},
                    "b": {"cmd": "srv"},
                },
            })

    def test_real_model_name(self, sample_config: ProxyConfig) -> None:
        """测试按 ID 或别名查找模型。"""
        assert sample_config.real_model_name("llama") == "llama"
        assert sample_config.real_model_name("gpt-4o-mini") == "llama"
        assert sample_config.real_model_name("missing") is None

    def test_immutable(self, sample_config: ProxyConfig) -> None:
        """测试加载后的配置不可变。"""
        with pytest.raises(ValidationError):
            sample_config.send_loading_state = False  # type: ignore[misc]


# === ModelConfig 测试 ===


class TestModelConfig:
    """ModelConfig 测试。"""

    def test_default_values(self) -> None:
        """测试默认值。"""
        model = ModelConfig()
        assert model.cmd == ""
        assert model.proxy == ""
        assert model.check_endpoint == "/health"
        assert model.ttl == 0
        assert model.send_loading_state is None

    def test_null_fields_become_empty(self) -> None:
        """测试 YAML 中留空的字段被视为空字符串。"""
        model = ModelConfig.model_validate({"cmd": "srv", "proxy": None})
        assert model.proxy == ""

    def test_env_format(self) -> None:
        """测试环境变量格式校验。"""
        model = ModelConfig.model_validate({"env": ["CUDA_VISIBLE_DEVICES=0"]})
        assert model.env == ["CUDA_VISIBLE_DEVICES=0"]
        with pytest.raises(ValidationError):
            ModelConfig.model_validate({"env": ["NO_EQUALS_SIGN"]})

    def test_negative_ttl_rejected(self) -> None:
        """测试 ttl 不能为负数。"""
        with pytest.raises(ValidationError):
            ModelConfig.model_validate({"ttl": -1})

    def test_effective_send_loading_state(self) -> None:
        """测试覆盖值优先，缺省时继承全局默认值。"""
        assert ModelConfig().effective_send_loading_state(True) is True
        assert ModelConfig().effective_send_loading_state(False) is False
        override = ModelConfig.model_validate({"sendLoadingState": False})
        assert override.effective_send_loading_state(True) is False
        override_on = ModelConfig.model_validate({"sendLoadingState": True})
        assert override_on.effective_send_loading_state(False) is True


# === 加载测试 ===


class TestLoadConfig:
    """load_config() 系列函数测试。"""

    def test_load_from_file(self, config_file: Path) -> None:
        """测试从 YAML 文件加载。"""
        config = load_config(config_file)
        assert list(config.models) == ["llama", "qwen", "remote", "sidecar"]
        assert config.start_port == 9000

    def test_load_from_stream(self, sample_config_text: str) -> None:
        """测试从文本流加载。"""
        config = load_config_from_stream(io.StringIO(sample_config_text))
        assert "remote" in config.models

    def test_filters_keep_raw_text(self) -> None:
        """测试加载后过滤规则保留原始文本，宏在解析时展开。"""
        config = load_config_from_text("""
macros:
  default_strip: "temperature, top_p"
models:
  model1:
    cmd: path/to/cmd --port ${PORT}
    filters:
      stripParams: "model, top_k, top_k, temperature, ${default_strip}, , ,"
  legacy:
    cmd: path/to/cmd --port ${PORT}
    filters:
      strip_params: "model, top_k, top_k, temperature, ${default_strip}, , ,"
""")
        for model in config.models.values():
            assert model.filters.raw_strip_params == (
                "model, top_k, top_k, temperature, ${default_strip}, , ,"
            )
            assert model.filters.sanitized_strip_params(config.macros) == [
                "temperature", "top_k", "top_p",
            ]

    def test_send_loading_state_inheritance(self) -> None:
        """测试全局 sendLoadingState 与模型覆盖。"""
        config = load_config_from_text("""
sendLoadingState: true
models:
  model1:
    cmd: path/to/cmd --port ${PORT}
    sendLoadingState: false
  model2:
    cmd: path/to/cmd --port ${PORT}
""")
        assert config.send_loading_state is True
        assert config.models["model1"].send_loading_state is False
        assert config.models["model2"].send_loading_state is None
        assert config.models["model1"].effective_send_loading_state(True) is False
        assert config.models["model2"].effective_send_loading_state(True) is True

    def test_empty_document(self) -> None:
        """测试空文档使用全部默认值。"""
        config = load_config_from_text("")
        assert config.models == {}

    def test_empty_model_entry(self) -> None:
        """测试模型条目留空。"""
        config = load_config_from_text("models:\n  bare:\n")
        assert config.models["bare"].cmd == ""

    def test_empty_filters_block(self) -> None:
        """测试 filters 留空时等同于未配置。"""
        config = load_config_from_text("models:\n  m:\n    cmd: srv\n    filters:\n")
        assert config.models["m"].filters.raw_strip_params == ""
        assert config.resolve("m").strip_params == ()

    def test_empty_aliases_and_env(self) -> None:
        """测试 aliases / env 留空时得到空列表。"""
        config = load_config_from_text("models:\n  m:\n    cmd: srv\n    aliases:\n    env:\n")
        assert config.models["m"].aliases == []
        assert config.models["m"].env == []

    def test_nonexistent_file(self) -> None:
        """测试加载不存在的文件。"""
        with pytest.raises(ConfigLoadError) as exc_info:
            load_config("/nonexistent/path/config.yaml")
        assert exc_info.value.file_path == "/nonexistent/path/config.yaml"

    def test_invalid_yaml(self) -> None:
        """测试无效的 YAML。"""
        with pytest.raises(ConfigLoadError):
            load_config_from_text("models: [unclosed")

    def test_non_mapping_root(self) -> None:
        """测试根元素不是字典。"""
        with pytest.raises(ConfigLoadError):
            load_config_from_text("- a\n- b\n")

    def test_validation_error_lists_field(self) -> None:
        """测试校验错误包含字段路径。"""
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config_from_text("models:\n  m1:\n    ttl: -5\n", source="bad.yaml")

        error = exc_info.value
        assert error.config_path == "bad.yaml"
        assert error.field_path == "models.m1.ttl"
        assert "models.m1.ttl" in str(error)


class TestValidateConfigFile:
    """validate_config_file() 测试。"""

    def test_valid_file(self, config_file: Path) -> None:
        """测试合法文件返回空列表。"""
        assert validate_config_file(config_file) == []

    def test_missing_file(self, tmp_path: Path) -> None:
        """测试文件不存在。"""
        errors = validate_config_file(tmp_path / "missing.yaml")
        assert len(errors) == 1

    def test_command_errors_collected(self, tmp_path: Path) -> None:
        """测试命令解析错误被收集，每个出错模型一条。"""
        path = tmp_path / "config.yaml"
        path.write_text(
            "models:\n"
            "  good:\n"
            "    cmd: srv --port ${PORT}\n"
            "  bad1:\n"
            "    cmd: srv --name 'oops\n"
            "  bad2:\n"
            "    cmd: 'srv --name \"oops'\n",
            encoding="utf-8",
        )
        errors = validate_config_file(path)
        assert len(errors) == 2
        assert "bad1" in errors[0]
        assert "bad2" in errors[1]
