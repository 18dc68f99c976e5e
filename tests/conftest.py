"""
测试套件共享 Fixtures。
"""

from __future__ import annotations

from pathlib import Path

import pytest

from swap_config.config.loader import load_config_from_text
from swap_config.config.schema import ProxyConfig

SAMPLE_CONFIG = """
startPort: 9000
sendLoadingState: true
macros:
  default_strip: "temperature, top_p"
  server: "llama-server --host 127.0.0.1"
models:
  llama:
    cmd: |
      ${server} \\
        --port ${PORT} \\
        # --flash-attn
        --model /models/${MODEL_ID}.gguf
    aliases: [gpt-4o-mini]
    sendLoadingState: false
    filters:
      stripParams: "model, top_k, top_k, temperature, ${default_strip}, , ,"
  qwen:
    cmd: llama-server --port ${PORT} --model /models/qwen.gguf
    filters:
      strip_params: "top_k"
  remote:
    proxy: https://api.example.com/v1
  sidecar:
    proxy: http://127.0.0.1:8081
"""


@pytest.fixture
def sample_config_text() -> str:
    """多模型示例配置（YAML 文本）。"""
    return SAMPLE_CONFIG


@pytest.fixture
def sample_config() -> ProxyConfig:
    """多模型示例配置。"""
    return load_config_from_text(SAMPLE_CONFIG)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """写入临时目录的示例配置文件。"""
    path = tmp_path / "config.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path
