"""
Redis 存储模块

基于 redis-py 实现，支持 ``redis://``、``rediss://`` 和 ``unix://`` 地址
（https://www.iana.org/assignments/uri-schemes/prov/redis）。

特性：
- 单连接顺序执行（扫描线程独占）
- 构造时 PING 校验连接，失败即为致命错误
- 所有命令错误统一包装为 StoreCommandError

使用示例：
    >>> store = RedisStore("redis://localhost:6379/0")
    >>> page = store.scan(0, "session:*", 100)
"""

from __future__ import annotations

from typing import Any

from ..exceptions import ScanParseError, StoreCommandError, StoreConnectionError
from ..types import Key, ScanPage
from .base import BaseStore


class RedisStore(BaseStore):
    """
    Redis 存储

    使用示例：
        >>> # 通过 URL 连接
        >>> store = RedisStore("redis://:secret@redis.example.com:6379/2")
        >>>
        >>> # 复用已有客户端
        >>> import redis
        >>> store = RedisStore(client=redis.Redis(host="localhost"))
    """

    def __init__(
        self,
        url: str = "redis://",
        *,
        client: Any = None,
        socket_timeout: float | None = None,
        socket_connect_timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        """
        初始化 Redis 存储

        Args:
            url: Redis 连接地址
            client: 自定义 redis.Redis 客户端（提供时忽略 url）
            socket_timeout: 套接字超时（秒），None 使用 redis-py 默认行为
            socket_connect_timeout: 连接超时（秒）
            **kwargs: 其他 redis.Redis.from_url 参数

        Raises:
            StoreConnectionError: 地址无效或无法连接
        """
        try:
            import redis
        except ImportError as e:
            msg = "Redis 存储需要安装 redis: pip install redis"
            raise ImportError(msg) from e

        self._url = url

        if client is not None:
            self._client = client
        else:
            try:
                self._client = redis.Redis.from_url(
                    url,
                    decode_responses=False,  # 键名按原始字节处理
                    socket_timeout=socket_timeout,
                    socket_connect_timeout=socket_connect_timeout,
                    **kwargs,
                )
            except ValueError as e:
                msg = f"无效的 Redis 地址 {url}: {e}"
                raise StoreConnectionError(msg) from e

        # 测试连接
        self.ping()

    # ========== 连接管理 ==========

    def ping(self) -> None:
        try:
            self._client.ping()
        except Exception as e:
            msg = f"无法连接到 Redis 服务器: {e}"
            raise StoreConnectionError(msg) from e

    @property
    def url(self) -> str:
        return self._url

    # ========== 命令 ==========

    def scan(self, cursor: int, pattern: str, count: int) -> ScanPage:
        try:
            reply = self._client.scan(cursor=cursor, match=pattern, count=count)
        except (ValueError, TypeError) as e:
            # redis-py 在解析 SCAN 回复时出错
            msg = f"无法解析 SCAN 响应: {e}"
            raise ScanParseError(msg) from e
        except Exception as e:
            msg = f"Redis SCAN 失败: {e}"
            raise StoreCommandError(msg) from e

        return self._parse_scan_reply(reply)

    @staticmethod
    def _parse_scan_reply(reply: Any) -> ScanPage:
        """
        把 (cursor, keys) 回复转换为 ScanPage

        键名保持服务器返回的原样（通常为 bytes），原样用于后续 TTL/DEL/EXPIRE。
        """
        try:
            raw_cursor, raw_keys = reply
            next_cursor = int(raw_cursor)
            keys = list(raw_keys)
        except (ValueError, TypeError) as e:
            msg = f"无法解析 SCAN 响应 {reply!r}: {e}"
            raise ScanParseError(msg) from e

        if next_cursor < 0:
            msg = f"SCAN 返回了非法游标: {next_cursor}"
            raise ScanParseError(msg)

        if not all(isinstance(k, (bytes, str)) for k in keys):
            msg = f"SCAN 返回了非法键名: {keys!r}"
            raise ScanParseError(msg)

        return ScanPage(cursor=next_cursor, keys=keys)

    def ttl(self, key: Key) -> int:
        try:
            return int(self._client.ttl(key))
        except Exception as e:
            msg = f"Redis TTL 失败: {e}"
            raise StoreCommandError(msg) from e

    def delete(self, key: Key) -> int:
        try:
            return int(self._client.delete(key))
        except Exception as e:
            msg = f"Redis DEL 失败: {e}"
            raise StoreCommandError(msg) from e

    def expire(self, key: Key, seconds: int) -> bool:
        try:
            return bool(self._client.expire(key, seconds))
        except Exception as e:
            msg = f"Redis EXPIRE 失败: {e}"
            raise StoreCommandError(msg) from e

    # ========== 生命周期 ==========

    def close(self) -> None:
        """关闭 Redis 连接"""
        self._client.close()

    def __repr__(self) -> str:
        return f"RedisStore(url={self._url!r})"
