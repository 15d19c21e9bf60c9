"""
类型定义模块

本模块定义了扫描引擎使用的数据类与枚举。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# ========== 常量 ==========

TTL_NO_EXPIRY = -1
"""键存在但未设置过期时间"""

TTL_MISSING = -2
"""键不存在"""

# ========== 类型别名定义 ==========

Key = str | bytes
"""键名：Redis 返回原始字节，键名不保证是合法 UTF-8"""


def display_key(key: Key) -> str:
    """日志用的键名，无法解码的字节替换为 U+FFFD"""
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return key


# ========== 数据类定义 ==========


@dataclass(frozen=True)
class ScanPage:
    """
    单次 SCAN 返回的一批键

    Attributes:
        cursor: 下一次 SCAN 使用的游标 (0 表示遍历结束)
        keys: 本批次返回的键列表(顺序与服务器返回一致)
    """

    cursor: int  # 下一批次的游标
    keys: list[Key] = field(default_factory=list)  # 本批次键列表

    @property
    def exhausted(self) -> bool:
        """服务器是否已宣告遍历结束"""
        return self.cursor == 0


@dataclass
class ScanState:
    """
    扫描状态

    由 BatchScanner 独占，只在扫描循环内修改，运行结束即丢弃。

    Attributes:
        cursor: 服务器分配的游标，0 既是初始值也是结束标志
        batch: 最近一次拉取到的键
        total: 整个运行期间已计入处理上限的键数
        complete: 处理上限在批次中途被触发后置位
    """

    cursor: int = 0
    batch: list[Key] = field(default_factory=list)
    total: int = 0
    complete: bool = False


@dataclass(frozen=True)
class StatsSnapshot:
    """
    统计快照

    三个计数器在某一时刻的只读副本。
    字符串形式固定为 ``scans=<n> keys=<n> expires=<n>``。
    """

    scans: int = 0  # SCAN 批次数
    keys: int = 0  # 扫描到的键数
    expired: int = 0  # 被删除或改写 TTL 的键数

    def __str__(self) -> str:
        return f"scans={self.scans} keys={self.keys} expires={self.expired}"


# ========== 枚举定义 ==========


class KeyAction(str, Enum):
    """
    单键动作枚举

    按优先级排列，同一运行中只有排在最前的已配置动作会被执行：
    - DELETE: 删除键
    - SUBTRACT_TTL: 从当前 TTL 中减去固定秒数
    - SET_TTL: 将 TTL 设为固定秒数
    """

    DELETE = "delete"  # DEL
    SUBTRACT_TTL = "subtract-ttl"  # EXPIRE key ttl-n
    SET_TTL = "set-ttl"  # EXPIRE key n


__all__ = [
    "TTL_NO_EXPIRY",
    "TTL_MISSING",
    "Key",
    "display_key",
    "ScanPage",
    "ScanState",
    "StatsSnapshot",
    "KeyAction",
]
