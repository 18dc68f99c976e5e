"""本地 / 远程模型判定。

- 配置了 cmd 的模型由代理拉起本地进程，一定是本地模型
- 没有 cmd 时，proxy 指向回环地址（localhost、127.0.0.0/8、::1）视为本地，
  其他地址一律视为远程

URL 只做结构解析，不发起任何连接。解析失败按"非回环"处理，永不抛异常。
"""

from __future__ import annotations

import ipaddress
from urllib.parse import urlsplit


def is_loopback_url(url: str) -> bool:
    """判断 URL 的主机部分是否为回环地址。

    Examples:
        >>> is_loopback_url("http://127.0.0.2:8080")
        True
        >>> is_loopback_url("http://192.168.1.100:8080")
        False
        >>> is_loopback_url("not-a-url")
        False
    """
    if not url:
        return False

    try:
        hostname = urlsplit(url.strip()).hostname
    except ValueError:
        return False

    if not hostname:
        return False
    if hostname == "localhost":
        return True

    try:
        return ipaddress.ip_address(hostname).is_loopback
    except ValueError:
        return False


def is_remote_model(cmd: str, proxy: str) -> bool:
    """有 cmd 即本地；否则 proxy 非回环即远程。"""
    if cmd and cmd.strip():
        return False
    return not is_loopback_url(proxy)
