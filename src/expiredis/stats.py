"""
统计聚合模块

后台线程独占三个计数器（scans / keys / expired），只通过消息与扫描线程交互：
- 三种增量消息：发送后不等待结果
- 快照请求：同步等待回复，也用作关闭前的屏障
- 周期定时器：每个间隔输出一次当前统计

所有消息与定时器在同一个选择循环中处理，快照请求没有优先级。
邮箱容量为 1，发送方在聚合器接收前阻塞，聚合器最多落后一条消息。

使用示例：
    >>> with StatsAggregator(interval=1.0) as stats:
    ...     stats.add_scans(1)
    ...     stats.add_keys(100)
    ...     print(stats.snapshot())
    scans=1 keys=100 expires=0
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any

from .exceptions import StatsError
from .types import StatsSnapshot

logger = logging.getLogger(__name__)

# 消息类型
_SCANS = "scans"
_KEYS = "keys"
_EXPIRED = "expired"
_SNAPSHOT = "snapshot"
_STOP = "stop"


class StatsAggregator:
    """
    统计聚合器

    每次运行启动一次，生命周期与运行绑定。
    """

    def __init__(self, interval: float = 1.0, *, name: str = "expiredis-stats") -> None:
        """
        初始化聚合器

        Args:
            interval: 周期性统计日志间隔（秒）
            name: 后台线程名称
        """
        if interval <= 0:
            raise ValueError("统计间隔必须大于 0")

        self._interval = interval
        self._name = name
        self._mailbox: queue.Queue[tuple[str, Any]] = queue.Queue(maxsize=1)
        self._thread: threading.Thread | None = None
        self._stopped = False

        # 以下计数器只在后台线程中读写
        self._scans = 0
        self._keys = 0
        self._expired = 0

    # ========== 生命周期 ==========

    def start(self) -> StatsAggregator:
        """启动后台线程"""
        if self._thread is not None:
            raise StatsError("统计聚合器已启动")

        self._thread = threading.Thread(
            target=self._run,
            daemon=True,  # 守护线程，主程序退出时自动终止
            name=self._name,
        )
        self._thread.start()
        return self

    def close(self, timeout: float | None = 1.0) -> None:
        """
        停止后台线程

        不再输出统计；调用方应在关闭前通过 snapshot() 取得最终结果。
        后台线程已退出或在 timeout 内不接收停止消息时直接返回。
        """
        if self._thread is None or self._stopped:
            return
        self._stopped = True
        if not self._thread.is_alive():
            return

        try:
            self._mailbox.put((_STOP, None), timeout=timeout)
        except queue.Full:
            logger.debug("统计聚合器未响应停止消息")
            return
        self._thread.join(timeout=timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stopped

    def __enter__(self) -> StatsAggregator:
        return self.start()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ========== 消息接口 ==========

    def add_scans(self, n: int = 1) -> None:
        self._send(_SCANS, n)

    def add_keys(self, n: int) -> None:
        self._send(_KEYS, n)

    def add_expired(self, n: int = 1) -> None:
        self._send(_EXPIRED, n)

    def snapshot(self) -> StatsSnapshot:
        """
        同步获取当前统计快照

        请求与增量消息在同一邮箱中排队，因此快照包含此前发送的全部增量。
        """
        reply: queue.Queue[StatsSnapshot] = queue.Queue(maxsize=1)
        self._send(_SNAPSHOT, reply)
        return reply.get()

    def _send(self, kind: str, payload: Any) -> None:
        if self._thread is None or self._stopped:
            raise StatsError("统计聚合器未运行")
        self._mailbox.put((kind, payload))

    # ========== 后台循环 ==========

    def _current(self) -> StatsSnapshot:
        return StatsSnapshot(scans=self._scans, keys=self._keys, expired=self._expired)

    def _run(self) -> None:
        deadline = time.monotonic() + self._interval

        while True:
            timeout = deadline - time.monotonic()
            if timeout <= 0:
                logger.info("Stats: %s", self._current())
                deadline += self._interval
                # 处理过慢时不补发错过的周期
                if deadline <= time.monotonic():
                    deadline = time.monotonic() + self._interval
                continue

            try:
                kind, payload = self._mailbox.get(timeout=timeout)
            except queue.Empty:
                continue

            if kind == _SCANS:
                self._scans += payload
            elif kind == _KEYS:
                self._keys += payload
            elif kind == _EXPIRED:
                self._expired += payload
            elif kind == _SNAPSHOT:
                payload.put(self._current())
            elif kind == _STOP:
                return

    def __repr__(self) -> str:
        return f"StatsAggregator(interval={self._interval}, running={self.running})"


__all__ = ["StatsAggregator"]
