"""
异常定义模块

本模块定义了 expiredis 的所有自定义异常类。
所有异常都继承自 ExpiredisError 基类，便于统一捕获。

错误分级：
- 致命：StoreConnectionError（启动时无法连接存储，进程以非零状态退出）
- 可重试：SCAN 执行或解析失败（StoreCommandError / ScanParseError）
- 单键可恢复：TTL/DEL/EXPIRE 失败（StoreCommandError，仅记录日志）
"""

from __future__ import annotations


class ExpiredisError(Exception):
    """
    expiredis 基础异常

    所有 expiredis 相关的异常都继承自此类。

    示例:
        >>> try:
        ...     run(config)
        ... except ExpiredisError as e:
        ...     print(f"运行失败: {e}")
    """

    pass


class ConfigError(ExpiredisError):
    """
    配置错误

    当运行配置校验失败或配置文件解析失败时抛出。

    示例:
        >>> raise ConfigError("配置文件不存在: expiredis.yaml")
    """

    pass


class StoreError(ExpiredisError):
    """
    存储操作基础异常

    所有与远端键值存储交互时产生的错误都继承自此类。
    """

    pass


class StoreConnectionError(StoreError):
    """
    存储连接错误

    当无法连接到存储服务器时抛出，属于致命错误。

    示例:
        >>> raise StoreConnectionError("无法连接到 Redis 服务器 localhost:6379")
    """

    pass


class StoreCommandError(StoreError):
    """
    存储命令执行错误

    SCAN/TTL/DEL/EXPIRE 等命令执行失败时抛出。
    """

    pass


class ScanParseError(StoreCommandError):
    """
    SCAN 响应解析错误

    当 SCAN 返回的游标或键列表格式不合法时抛出。
    扫描器对其处理方式与命令执行失败相同：退避后在同一游标重试。
    """

    pass


class StatsError(ExpiredisError):
    """
    统计聚合器错误

    在聚合器未启动或已关闭时向其发送消息会抛出此异常。
    """

    pass


__all__ = [
    "ExpiredisError",
    "ConfigError",
    "StoreError",
    "StoreConnectionError",
    "StoreCommandError",
    "ScanParseError",
    "StatsError",
]
