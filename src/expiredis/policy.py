"""
TTL 匹配策略模块

根据键的 TTL 与最小 TTL 阈值判断键是否需要处理。
纯函数，无副作用，对任意整数输入都有定义。
"""

from __future__ import annotations

from .types import TTL_NO_EXPIRY


def match_ttl(ttl: int, ttl_min: int) -> bool:
    """
    判断键的 TTL 是否满足阈值

    规则按以下顺序判断：
    1. ttl_min == 0：未设置阈值，总是匹配
    2. ttl_min > 0：仅当 ttl 严格大于 ttl_min 时匹配（等于阈值不匹配）
    3. ttl_min == -1：仅匹配未设置过期时间的键（ttl == -1）
    4. 其他组合均不匹配

    Args:
        ttl: 键的剩余秒数，-1 表示永不过期，-2 表示键不存在
        ttl_min: 最小 TTL 阈值

    Returns:
        是否匹配

    示例:
        >>> match_ttl(100, 60)
        True
        >>> match_ttl(60, 60)
        False
        >>> match_ttl(-1, -1)
        True
    """
    # 未设置阈值
    if ttl_min == 0:
        return True
    # 正数阈值，严格大于
    if ttl_min > 0 and ttl > ttl_min:
        return True
    # 只匹配永不过期的键
    if ttl_min == TTL_NO_EXPIRY and ttl == TTL_NO_EXPIRY:
        return True
    return False


__all__ = ["match_ttl"]
