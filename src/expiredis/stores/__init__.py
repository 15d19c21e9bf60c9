"""
存储模块 - 扫描引擎访问的键值存储实现

本模块提供了可插拔的存储注册系统，按连接地址的 scheme 选择实现。

核心功能:
- 存储工厂注册机制: 通过 `register_store` 注册自定义存储
- 存储实例化: 通过 `create_store` 根据名称创建实例
- 地址解析: 通过 `create_store_from_url` 根据 URL scheme 创建实例

内置存储:
- redis: Redis 服务器（redis://、rediss://、unix://）
- memory: 进程内键空间（memory://），用于演练和测试

使用示例:
    ```python
    from expiredis.stores import create_store_from_url

    store = create_store_from_url("redis://localhost:6379/0")
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit

from .base import BaseStore
from .memory import MemoryStore
from .redis import RedisStore

StoreFactory = Callable[..., BaseStore]
"""存储工厂类型,接收关键字参数并返回 BaseStore 实例的可调用对象"""

_STORE_REGISTRY: dict[str, StoreFactory] = {}
"""全局存储注册表,存储名称到工厂函数的映射"""

_SCHEME_ALIASES: dict[str, str] = {
    "redis": "redis",
    "rediss": "redis",
    "unix": "redis",
    "memory": "memory",
}
"""URL scheme 到存储名称的映射"""


def register_store(name: str, factory: StoreFactory, *, override: bool = False) -> None:
    """
    注册新的存储工厂到全局注册表

    Args:
        name: 存储唯一标识符,会被转换为小写,同时作为 URL scheme 使用
        factory: 存储工厂函数,签名为 ``(**kwargs) -> BaseStore``
        override: 是否允许覆盖已存在的名称(默认 False)

    Raises:
        ValueError: 名称为空,或名称已存在且 override=False
    """
    key = name.strip().lower()
    if not key:
        raise ValueError("存储名称不能为空")

    if key in _STORE_REGISTRY and not override:
        msg = f"存储 '{name}' 已注册,如需覆盖请显式传入 override=True"
        raise ValueError(msg)

    _STORE_REGISTRY[key] = factory
    _SCHEME_ALIASES.setdefault(key, key)


def create_store(name: str, **options: Any) -> BaseStore:
    """
    根据注册的名称创建存储实例

    Raises:
        ValueError: 名称未注册
    """
    key = name.strip().lower()
    try:
        factory = _STORE_REGISTRY[key]
    except KeyError as exc:
        msg = f"未注册的存储 '{name}'"
        raise ValueError(msg) from exc
    return factory(**options)


def create_store_from_url(url: str, **options: Any) -> BaseStore:
    """
    根据连接地址创建存储实例

    Args:
        url: 连接地址，scheme 决定存储类型
        **options: 额外传递给工厂的参数

    Returns:
        已完成连接校验的存储实例

    Raises:
        ValueError: scheme 不受支持
        StoreConnectionError: 无法连接

    示例:
        >>> store = create_store_from_url("memory://")
        >>> type(store).__name__
        'MemoryStore'
    """
    scheme = urlsplit(url).scheme.lower()
    try:
        name = _SCHEME_ALIASES[scheme]
    except KeyError as exc:
        supported = ", ".join(f"{s}://" for s in sorted(_SCHEME_ALIASES))
        msg = f"不支持的地址 '{url}'。支持: {supported}"
        raise ValueError(msg) from exc

    if name == "redis":
        options.setdefault("url", url)
    return create_store(name, **options)


def get_registered_stores() -> list[str]:
    """返回所有已注册的存储名称列表,按字母顺序排序"""
    return sorted(_STORE_REGISTRY.keys())


def _memory_factory(**options: Any) -> BaseStore:
    options.pop("url", None)
    return MemoryStore(**options)


register_store("memory", _memory_factory)
register_store("redis", lambda **opts: RedisStore(**opts))


__all__ = [
    "BaseStore",
    "MemoryStore",
    "RedisStore",
    "StoreFactory",
    "register_store",
    "create_store",
    "create_store_from_url",
    "get_registered_stores",
]
