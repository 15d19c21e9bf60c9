"""
expiredis 命令行入口

参数既可以通过命令行给出，也可以通过 ``EXPIREDIS_<NAME>`` 环境变量
或 ``--config`` 指定的配置文件提供。优先级：命令行 > 环境变量 > 配置文件。

退出码：
- 0：扫描正常结束（游标耗尽或达到上限）
- 1：无法连接到存储
- 2：配置错误
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

from .__version__ import __version__
from .config import ENV_PREFIX, RunConfig
from .exceptions import ConfigError, StoreConnectionError
from .log import LOGGER_NAME, setup_logging
from .scanner import BatchScanner
from .stats import StatsAggregator
from .stores import BaseStore, create_store_from_url
from .types import StatsSnapshot

logger = logging.getLogger(LOGGER_NAME)

NAME = "expiredis"


def build_parser() -> argparse.ArgumentParser:
    """构建参数解析器，未给出的参数保持为 None 以便合并其他来源"""
    parser = argparse.ArgumentParser(
        prog=NAME,
        description=(
            "按模式遍历 Redis 键，根据 TTL 删除键或改写过期时间。"
            f"所有参数都可以通过 {ENV_PREFIX}<NAME> 环境变量设置。"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", metavar="FILE", help="配置文件（YAML/TOML/JSON）")
    parser.add_argument("--verbose", action="store_true", default=None, help="debug 日志")
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="演练模式，不执行破坏性命令",
    )
    parser.add_argument(
        "--url",
        help="Redis 服务器地址 (https://www.iana.org/assignments/uri-schemes/prov/redis)",
    )
    parser.add_argument("--pattern", help="要处理的键模式（默认 *）")
    parser.add_argument("--limit", type=int, help="最多处理的键数，负数不限（默认 100）")
    parser.add_argument("--count", type=int, help="每批获取的键数（默认 100）")
    parser.add_argument("--delay", type=int, help="批次间隔毫秒数（默认 0）")
    parser.add_argument("--set-ttl", dest="ttl_set", type=int, help="为匹配键设置的 TTL 秒数")
    parser.add_argument(
        "--subtract-ttl",
        dest="ttl_subtract",
        type=int,
        help="从匹配键的 TTL 中减去的秒数",
    )
    parser.add_argument("--delete", action="store_true", default=None, help="删除匹配的键")
    parser.add_argument(
        "--ttl-min",
        dest="ttl_min",
        type=int,
        help="处理键所需的最小 TTL，-1 表示只匹配未设置 TTL 的键",
    )
    return parser


def load_config(argv: Sequence[str] | None = None) -> RunConfig:
    """
    解析命令行并合并环境变量与配置文件

    Raises:
        ConfigError: 配置不合法
    """
    args = build_parser().parse_args(argv)
    overrides: dict[str, Any] = {k: v for k, v in vars(args).items() if k != "config"}
    return RunConfig.load(args.config, overrides=overrides)


def run(config: RunConfig, store: BaseStore) -> StatsSnapshot:
    """
    使用已连接的存储执行一次完整扫描

    Returns:
        最终统计快照
    """
    with StatsAggregator(interval=config.stats_interval) as stats:
        return BatchScanner(store, config, stats).run()


def main(argv: Sequence[str] | None = None) -> int:
    """命令行主函数，返回进程退出码"""
    try:
        config = load_config(argv)
    except ConfigError as e:
        setup_logging()
        logger.info("配置错误: %s", e)
        return 2

    setup_logging(config.verbose)

    try:
        store = create_store_from_url(config.url)
    except (StoreConnectionError, ValueError) as e:
        logger.info("无法连接到 Redis: %s", e)
        return 1

    with store:
        logger.info("已连接到 Redis 服务器 %s", config.url)
        if config.dry_run:
            logger.info("演练模式: 跳过破坏性命令")
        logger.debug("运行配置: %s", config.describe())

        run(config, store)

    return 0


if __name__ == "__main__":
    sys.exit(main())
