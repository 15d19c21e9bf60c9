"""
存储抽象基类模块

本模块定义了扫描引擎依赖的最小命令集合：
SCAN / TTL / DEL / EXPIRE，以及连接检查和关闭。

所有实现必须把底层客户端异常包装为 StoreError 的子类，
扫描器和动作执行器只捕获 StoreError。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..types import Key, ScanPage


class BaseStore(ABC):
    """
    键值存储抽象基类

    存储连接只在扫描线程中使用，实现无需保证线程安全。

    使用示例：
        >>> with create_store_from_url("redis://localhost:6379/0") as store:
        ...     page = store.scan(0, "session:*", 100)
        ...     for key in page.keys:
        ...         print(key, store.ttl(key))
    """

    @abstractmethod
    def ping(self) -> None:
        """
        检查连接是否可用

        Raises:
            StoreConnectionError: 无法连接到存储
        """
        raise NotImplementedError

    @abstractmethod
    def scan(self, cursor: int, pattern: str, count: int) -> ScanPage:
        """
        执行一次 ``SCAN cursor MATCH pattern COUNT count``

        Args:
            cursor: 起始游标，0 表示从头开始
            pattern: glob 风格的键模式，语义由存储决定
            count: 每批返回键数的建议值

        Returns:
            ScanPage 对象，cursor 为 0 表示遍历结束

        Raises:
            StoreCommandError: 命令执行失败
            ScanParseError: 响应格式不合法
        """
        raise NotImplementedError

    @abstractmethod
    def ttl(self, key: Key) -> int:
        """
        获取键的剩余生存时间

        Returns:
            剩余秒数,-1 表示永不过期,-2 表示键不存在

        Raises:
            StoreCommandError: 命令执行失败
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: Key) -> int:
        """
        删除键

        Returns:
            实际删除的键数量

        Raises:
            StoreCommandError: 命令执行失败
        """
        raise NotImplementedError

    @abstractmethod
    def expire(self, key: Key, seconds: int) -> bool:
        """
        设置键的过期时间

        seconds 原样传给存储，非正数通常会导致键立即过期。

        Returns:
            键存在且设置成功返回 True

        Raises:
            StoreCommandError: 命令执行失败
        """
        raise NotImplementedError

    def close(self) -> None:
        """关闭连接（默认无操作）"""
        return None

    def __enter__(self) -> BaseStore:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
