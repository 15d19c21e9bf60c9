"""
日志配置模块

expiredis 的所有模块都通过 ``logging.getLogger(__name__)`` 记录日志，
统一挂在 ``expiredis`` 日志器之下。

输出分两路，均写入 stderr：
- ``[debug]``：中间过程（TTL 值、下一游标等），仅在 verbose 时输出
- ``[info]``：进度、失败和统计行，始终输出
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "expiredis"

_FORMAT = "[%(levelname)s] %(asctime)s %(message)s"
_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


class _StreamFormatter(logging.Formatter):
    """把级别名写成小写前缀，WARNING 及以上归入 info 流"""

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = "debug" if record.levelno < logging.INFO else "info"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(verbose: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """
    配置 expiredis 日志器

    重复调用会替换之前安装的处理器。

    Args:
        verbose: 是否输出 debug 日志
        stream: 输出流，默认 sys.stderr

    Returns:
        ``expiredis`` 日志器
    """
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_StreamFormatter(_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    return logger


__all__ = ["LOGGER_NAME", "setup_logging"]
