"""
内存存储模块

基于 Python 字典实现的进程内键空间，TTL 语义与 Redis 一致：
- TTL 返回 -1 表示永不过期，-2 表示键不存在
- EXPIRE 传入非正数秒数时立即删除键
- SCAN 游标为 0 表示从头开始或遍历结束

用于 ``memory://`` 地址的演练运行和测试。
"""

from __future__ import annotations

import fnmatch
import itertools
import threading
import time

from ..types import TTL_MISSING, TTL_NO_EXPIRY, ScanPage
from .base import BaseStore


class MemoryStore(BaseStore):
    """
    内存存储

    架构设计:
    - 存储结构: dict[key, (seq, expires_at)]，expires_at 为 None 表示永不过期
    - 游标: 每个键写入时分配递增序号，游标指向下一个待返回的序号，
      因此遍历过程中删除键不会导致其他键被跳过
    - 过期处理: 惰性删除（访问时检查）
    - 线程安全: 所有操作使用 RLock 保护

    使用示例:
        >>> store = MemoryStore()
        >>> store.set("session:1", ttl=3600)
        >>> store.set("session:2")
        >>> store.ttl("session:2")
        -1
    """

    def __init__(self, keys: dict[str, int | None] | None = None) -> None:
        """
        初始化内存存储

        Args:
            keys: 初始键及其 TTL（秒），None 表示永不过期
        """
        self._data: dict[str, tuple[int, float | None]] = {}
        self._seq = itertools.count(1)  # 0 保留给起始游标
        self._lock = threading.RLock()

        for key, ttl in (keys or {}).items():
            self.set(key, ttl=ttl)

    # ========== 数据准备 ==========

    def set(self, key: str, ttl: int | None = None) -> None:
        """写入一个键，ttl 为 None 表示永不过期；已存在的键保留原游标位置"""
        with self._lock:
            expires_at = None if ttl is None else time.time() + ttl
            if self._alive(key):
                seq = self._data[key][0]
            else:
                seq = next(self._seq)
            self._data[key] = (seq, expires_at)

    def exists(self, key: str) -> bool:
        """检查键是否存在且未过期"""
        with self._lock:
            return self._alive(key)

    def _alive(self, key: str) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        expires_at = entry[1]
        if expires_at is not None and time.time() >= expires_at:
            # 已过期，惰性删除
            del self._data[key]
            return False
        return True

    # ========== 命令实现 ==========

    def ping(self) -> None:
        return None

    def scan(self, cursor: int, pattern: str, count: int) -> ScanPage:
        with self._lock:
            candidates = sorted(
                (seq, key)
                for key, (seq, _) in list(self._data.items())
                if seq >= cursor and self._alive(key) and fnmatch.fnmatchcase(key, pattern)
            )

            page = candidates[:count]
            next_cursor = candidates[count][0] if len(candidates) > count else 0

            return ScanPage(cursor=next_cursor, keys=[key for _, key in page])

    def ttl(self, key: str) -> int:
        with self._lock:
            if not self._alive(key):
                return TTL_MISSING

            expires_at = self._data[key][1]
            if expires_at is None:
                return TTL_NO_EXPIRY

            # 与 Redis 一致：按毫秒四舍五入到秒
            remaining_ms = int((expires_at - time.time()) * 1000)
            return (remaining_ms + 500) // 1000

    def delete(self, key: str) -> int:
        with self._lock:
            if not self._alive(key):
                return 0
            del self._data[key]
            return 1

    def expire(self, key: str, seconds: int) -> bool:
        with self._lock:
            if not self._alive(key):
                return False
            if seconds <= 0:
                del self._data[key]
            else:
                self._data[key] = (self._data[key][0], time.time() + seconds)
            return True

    # ========== 调试方法 ==========

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for k in list(self._data) if self._alive(k))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.exists(key)

    def __repr__(self) -> str:
        return f"MemoryStore(keys={len(self)})"
