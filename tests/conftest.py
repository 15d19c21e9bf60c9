"""
Pytest 配置和全局 fixtures

本模块提供测试所需的公共 fixtures 和配置。
"""

import logging
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

from expiredis.log import LOGGER_NAME
from expiredis.stats import StatsAggregator
from expiredis.stores import MemoryStore


@pytest.fixture(autouse=True)
def reset_expiredis_logger() -> Generator[None, None, None]:
    """
    恢复 expiredis 日志器

    setup_logging 会关闭向根日志器的传播，测试结束后恢复，保证 caplog 可用。
    """
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def memory_store() -> MemoryStore:
    """包含 10 个会话键（带 TTL）和 5 个缓存键（无 TTL）的内存存储"""
    store = MemoryStore()
    for i in range(10):
        store.set(f"session:{i}", ttl=1000 + i * 100)
    for i in range(5):
        store.set(f"cache:{i}")
    return store


@pytest.fixture
def stats() -> Generator[StatsAggregator, None, None]:
    """已启动的统计聚合器"""
    aggregator = StatsAggregator(interval=60.0)
    aggregator.start()
    yield aggregator
    aggregator.close()


@pytest.fixture
def no_sleep() -> Generator[MagicMock, None, None]:
    """替换扫描器中的 time.sleep，返回 mock 以便断言等待时长"""
    with patch("expiredis.scanner.time.sleep") as sleep:
        yield sleep
