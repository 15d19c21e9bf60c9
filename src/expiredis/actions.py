"""
单键动作执行模块

对扫描到的每个键：按需读取 TTL，交给 TTL 策略判断，
匹配时执行最多一个修改命令（DEL 或 EXPIRE）。

单键的任何失败都只记录日志并视为"未过期"，不会中断批次或整个运行。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import StoreError
from .policy import match_ttl
from .types import TTL_MISSING, Key, display_key

if TYPE_CHECKING:
    from .config import RunConfig
    from .stores import BaseStore

logger = logging.getLogger(__name__)


class KeyActionExecutor:
    """
    单键动作执行器

    动作优先级（只执行第一个已配置的动作）：
    1. delete：DEL key
    2. ttl_subtract > 0：EXPIRE key (ttl - ttl_subtract)，结果可以为负
    3. ttl_set > 0：EXPIRE key ttl_set

    演练模式下匹配的键直接视为成功，不发送任何修改命令。

    使用示例：
        >>> executor = KeyActionExecutor(store, RunConfig(delete=True, ttl_min=60))
        >>> executor.process("session:1")
        True
    """

    def __init__(self, store: BaseStore, config: RunConfig) -> None:
        self._store = store
        self._config = config

    def process(self, key: Key) -> bool:
        """
        处理单个键

        Args:
            key: 键名

        Returns:
            键是否被删除或改写了 TTL（演练模式下为"将会"）
        """
        config = self._config

        # 未设置阈值和减量时不读取 TTL，按 0 参与判断
        ttl = 0
        if config.fetch_ttl_required:
            try:
                ttl = self._store.ttl(key)
            except StoreError as e:
                logger.info("获取键 %s 的 TTL 失败: %s", display_key(key), e)
                return False

            if ttl == TTL_MISSING:
                logger.info("获取键 %s 的 TTL 失败: 键不存在", display_key(key))
                return False

            logger.debug("键 %s 的 TTL 为 %d", display_key(key), ttl)

        if not match_ttl(ttl, config.ttl_min):
            logger.debug("TTL %d 不满足最小 TTL %d", ttl, config.ttl_min)
            return False

        if config.delete:
            return self._delete(key)

        if config.ttl_subtract > 0:
            return self._expire(key, ttl - config.ttl_subtract)

        if config.ttl_set > 0:
            return self._expire(key, config.ttl_set)

        return False

    def _delete(self, key: Key) -> bool:
        if self._config.dry_run:
            return True

        try:
            self._store.delete(key)
        except StoreError as e:
            logger.info("删除键 %s 失败: %s", display_key(key), e)
            return False

        logger.debug("已删除键 %s", display_key(key))
        return True

    def _expire(self, key: Key, seconds: int) -> bool:
        if self._config.dry_run:
            return True

        try:
            self._store.expire(key, seconds)
        except StoreError as e:
            logger.info("设置键 %s 的过期时间失败: %s", display_key(key), e)
            return False

        logger.debug("键 %s 的新 TTL 为 %d", display_key(key), seconds)
        return True


__all__ = ["KeyActionExecutor"]
