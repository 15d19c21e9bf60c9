"""
批量扫描模块

驱动存储的游标遍历协议：

    SCANNING -> 逐键处理 -> BATCH_DONE -> {继续, 达到上限, 游标耗尽} -> STOPPED

- SCAN 执行或解析失败：记录日志，等待固定退避时间后在同一游标无限重试
- 逐键处理：先检查全局上限，达到后丢弃本批剩余键
- 每批结束：向统计聚合器提交 scans+1、keys+len(batch)
- 游标为 0 或达到上限时停止；否则按配置的间隔等待后继续

扫描和所有存储命令都在调用线程中顺序执行。
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .actions import KeyActionExecutor
from .exceptions import ScanParseError, StoreError
from .types import ScanState

if TYPE_CHECKING:
    from .config import RunConfig
    from .stats import StatsAggregator
    from .stores import BaseStore
    from .types import ScanPage, StatsSnapshot

logger = logging.getLogger(__name__)


class BatchScanner:
    """
    批量扫描器

    使用示例：
        >>> config = RunConfig(pattern="session:*", ttl_min=3600, delete=True)
        >>> with StatsAggregator() as stats:
        ...     final = BatchScanner(store, config, stats).run()
    """

    def __init__(
        self,
        store: BaseStore,
        config: RunConfig,
        stats: StatsAggregator,
        executor: KeyActionExecutor | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._stats = stats
        self._executor = executor or KeyActionExecutor(store, config)
        self._state = ScanState()

    @property
    def state(self) -> ScanState:
        return self._state

    def run(self) -> StatsSnapshot:
        """
        执行完整的扫描

        Returns:
            结束时的统计快照（同时以 info 级别输出一次）
        """
        config = self._config
        state = self._state

        while True:
            page = self._fetch(state.cursor)
            state.cursor = page.cursor
            state.batch = page.keys

            self._process_batch(state)

            self._stats.add_scans(1)
            self._stats.add_keys(len(state.batch))

            if state.cursor == 0 or state.complete:
                break
            logger.debug("下一个游标为 %d", state.cursor)

            if config.delay > 0:
                time.sleep(config.delay / 1000)

        final = self._stats.snapshot()
        logger.info("Stats: %s", final)
        return final

    def _process_batch(self, state: ScanState) -> None:
        limit = self._config.limit

        for key in state.batch:
            if limit >= 0 and state.total >= limit:
                self._reach_limit(state)
                break

            state.total += 1
            if self._executor.process(key):
                self._stats.add_expired(1)

            # 恰好在批次末尾达到上限时也不再拉取下一批
            if limit >= 0 and state.total >= limit:
                self._reach_limit(state)
                break

    def _reach_limit(self, state: ScanState) -> None:
        logger.info("已达到 %d 个键的处理上限", self._config.limit)
        state.complete = True

    def _fetch(self, cursor: int) -> ScanPage:
        """在同一游标上重试 SCAN，直到成功"""
        config = self._config

        while True:
            try:
                return self._store.scan(cursor, config.pattern, config.count)
            except ScanParseError as e:
                logger.info("解析 SCAN 响应失败: %s", e)
            except StoreError as e:
                logger.info("执行 SCAN 失败: %s", e)

            time.sleep(config.retry_backoff)


__all__ = ["BatchScanner"]
