"""
expiredis - Redis 键过期批量维护工具

按模式通过 SCAN 遍历键，检查 TTL，按条件删除键或改写 TTL，并周期性输出吞吐统计。

组成：
- policy: TTL 匹配策略
- actions: 单键动作执行器（DEL / EXPIRE）
- scanner: 游标驱动的批量扫描器
- stats: 后台统计聚合器
- stores: Redis 与内存存储

示例：
    >>> from expiredis import BatchScanner, MemoryStore, RunConfig, StatsAggregator
    >>>
    >>> store = MemoryStore({"session:1": 7200, "session:2": 60})
    >>> config = RunConfig(pattern="session:*", ttl_min=3600, delete=True)
    >>> with StatsAggregator() as stats:
    ...     final = BatchScanner(store, config, stats).run()
    >>> final.expired
    1
"""

from __future__ import annotations

from .__version__ import __version__
from .actions import KeyActionExecutor
from .config import RunConfig
from .exceptions import (
    ConfigError,
    ExpiredisError,
    ScanParseError,
    StatsError,
    StoreCommandError,
    StoreConnectionError,
    StoreError,
)
from .policy import match_ttl
from .scanner import BatchScanner
from .stats import StatsAggregator
from .stores import (
    BaseStore,
    MemoryStore,
    RedisStore,
    create_store,
    create_store_from_url,
    register_store,
)
from .types import KeyAction, ScanPage, ScanState, StatsSnapshot

__all__ = [
    "__version__",
    # 扫描引擎
    "BatchScanner",
    "KeyActionExecutor",
    "StatsAggregator",
    "match_ttl",
    # 配置
    "RunConfig",
    # 存储
    "BaseStore",
    "MemoryStore",
    "RedisStore",
    "create_store",
    "create_store_from_url",
    "register_store",
    # 类型
    "KeyAction",
    "ScanPage",
    "ScanState",
    "StatsSnapshot",
    # 异常
    "ExpiredisError",
    "ConfigError",
    "StoreError",
    "StoreConnectionError",
    "StoreCommandError",
    "ScanParseError",
    "StatsError",
]
