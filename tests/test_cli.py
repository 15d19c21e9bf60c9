"""
命令行入口测试

使用 memory:// 存储运行完整流程，Redis 连接失败通过 mock 模拟。
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from expiredis import cli
from expiredis.exceptions import StoreConnectionError
from expiredis.stores import MemoryStore


class TestParser:
    """测试参数解析"""

    def test_flags(self) -> None:
        config = cli.load_config(
            [
                "--url",
                "memory://",
                "--pattern",
                "s:*",
                "--limit",
                "-1",
                "--count",
                "50",
                "--delay",
                "10",
                "--ttl-min",
                "-1",
                "--subtract-ttl",
                "5",
                "--set-ttl",
                "60",
                "--delete",
                "--dry-run",
                "--verbose",
            ]
        )

        assert config.url == "memory://"
        assert config.pattern == "s:*"
        assert config.limit == -1
        assert config.count == 50
        assert config.delay == 10
        assert config.ttl_min == -1
        assert config.ttl_subtract == 5
        assert config.ttl_set == 60
        assert config.delete is True
        assert config.dry_run is True
        assert config.verbose is True

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPIREDIS_PATTERN", "env:*")
        monkeypatch.setenv("EXPIREDIS_DELETE", "1")

        config = cli.load_config([])

        assert config.pattern == "env:*"
        assert config.delete is True

    def test_flag_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPIREDIS_LIMIT", "10")
        assert cli.load_config(["--limit", "20"]).limit == 20

    def test_config_file(self, tmp_path: Path) -> None:
        path = tmp_path / "expiredis.json"
        path.write_text('{"pattern": "json:*", "ttl_set": 99}', encoding="utf-8")

        config = cli.load_config(["--config", str(path)])

        assert config.pattern == "json:*"
        assert config.ttl_set == 99


class TestMain:
    """测试主函数"""

    def test_run_against_memory_store(self, caplog: pytest.LogCaptureFixture) -> None:
        store = MemoryStore({"s:1": None, "s:2": None, "other": None})

        with patch("expiredis.cli.create_store_from_url", return_value=store), patch(
            "expiredis.cli.setup_logging"
        ):
            caplog.set_level(logging.INFO, logger="expiredis")
            code = cli.main(["--url", "memory://", "--pattern", "s:*", "--delete"])

        assert code == 0
        assert len(store) == 1
        assert "Stats: scans=1 keys=2 expires=2" in caplog.text

    def test_dry_run_keeps_keys(self, caplog: pytest.LogCaptureFixture) -> None:
        store = MemoryStore({"a": None, "b": None})

        with patch("expiredis.cli.create_store_from_url", return_value=store), patch(
            "expiredis.cli.setup_logging"
        ):
            caplog.set_level(logging.INFO, logger="expiredis")
            code = cli.main(["--delete", "--dry-run"])

        assert code == 0
        assert len(store) == 2
        assert "expires=2" in caplog.text

    def test_memory_url(self) -> None:
        assert cli.main(["--url", "memory://", "--delete"]) == 0

    def test_connection_failure(self) -> None:
        with patch(
            "expiredis.cli.create_store_from_url",
            side_effect=StoreConnectionError("拒绝连接"),
        ):
            assert cli.main(["--url", "redis://localhost:1"]) == 1

    def test_unsupported_url(self) -> None:
        assert cli.main(["--url", "http://example.com"]) == 1

    def test_config_error(self) -> None:
        assert cli.main(["--count", "0"]) == 2


class TestRun:
    """测试 run 组装函数"""

    def test_returns_final_snapshot(self) -> None:
        from expiredis.config import RunConfig

        store = MemoryStore({f"k{i}": 100 for i in range(5)})
        final = cli.run(RunConfig(ttl_min=50, ttl_subtract=10, limit=-1), store)

        assert final.keys == 5
        assert final.expired == 5
        assert 85 <= store.ttl("k0") <= 90
