"""
统计聚合器测试

测试增量消息、同步快照、周期输出和生命周期。
"""

from __future__ import annotations

import logging
import threading
import time
from unittest.mock import patch

import pytest

from expiredis.exceptions import StatsError
from expiredis.stats import StatsAggregator
from expiredis.types import StatsSnapshot


class TestSnapshot:
    """测试增量与快照"""

    def test_initial_snapshot(self, stats: StatsAggregator) -> None:
        assert stats.snapshot() == StatsSnapshot(scans=0, keys=0, expired=0)

    def test_increments(self, stats: StatsAggregator) -> None:
        stats.add_scans(1)
        stats.add_keys(100)
        stats.add_expired(3)
        stats.add_scans(1)
        stats.add_keys(42)
        stats.add_expired()

        assert stats.snapshot() == StatsSnapshot(scans=2, keys=142, expired=4)

    def test_snapshot_sees_prior_increments(self, stats: StatsAggregator) -> None:
        """快照请求排在之前发送的增量之后"""
        for _ in range(500):
            stats.add_keys(1)

        assert stats.snapshot().keys == 500

    def test_snapshot_format(self) -> None:
        assert str(StatsSnapshot(scans=3, keys=250, expired=7)) == "scans=3 keys=250 expires=7"

    def test_concurrent_producers(self, stats: StatsAggregator) -> None:
        def produce() -> None:
            for _ in range(200):
                stats.add_expired(1)

        threads = [threading.Thread(target=produce) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert stats.snapshot().expired == 800


class TestPeriodicReport:
    """测试周期性统计输出"""

    def test_logs_on_interval(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="expiredis")

        with StatsAggregator(interval=0.05) as stats:
            stats.add_scans(2)
            stats.add_keys(20)
            time.sleep(0.3)

        lines = [r.getMessage() for r in caplog.records if r.name == "expiredis.stats"]
        assert len(lines) >= 2
        assert "Stats: scans=2 keys=20 expires=0" in lines

    def test_increments_flow_between_ticks(self) -> None:
        """定时器不阻塞增量"""
        with StatsAggregator(interval=0.01) as stats:
            for _ in range(100):
                stats.add_scans(1)
                time.sleep(0.001)
            assert stats.snapshot().scans == 100


class TestLifecycle:
    """测试启动与关闭"""

    def test_send_before_start(self) -> None:
        stats = StatsAggregator()
        with pytest.raises(StatsError):
            stats.add_scans(1)

    def test_send_after_close(self) -> None:
        stats = StatsAggregator().start()
        stats.close()

        assert stats.running is False
        with pytest.raises(StatsError):
            stats.snapshot()

    def test_double_start(self, stats: StatsAggregator) -> None:
        with pytest.raises(StatsError):
            stats.start()

    def test_close_is_idempotent(self) -> None:
        stats = StatsAggregator().start()
        stats.close()
        stats.close()

    def test_invalid_interval(self) -> None:
        with pytest.raises(ValueError):
            StatsAggregator(interval=0)

    def test_context_manager(self) -> None:
        with StatsAggregator() as stats:
            assert stats.running is True
        assert stats.running is False

    def test_close_after_worker_exited_with_full_mailbox(self) -> None:
        stats = StatsAggregator()
        with patch.object(stats, "_run", return_value=None):
            stats.start()
        stats._thread.join(timeout=1.0)
        stats.add_scans(1)  # 无人接收，邮箱已满

        stats.close()

        assert stats.running is False
        assert stats._mailbox.full()

    def test_close_gives_up_on_stuck_worker(self) -> None:
        release = threading.Event()
        stats = StatsAggregator()
        with patch.object(stats, "_run", side_effect=lambda: release.wait(5.0)):
            stats.start()
        stats.add_scans(1)

        started = time.monotonic()
        stats.close(timeout=0.1)
        elapsed = time.monotonic() - started

        release.set()
        assert elapsed < 1.0
        assert stats.running is False
