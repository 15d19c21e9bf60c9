"""
异常定义单元测试

测试自定义异常的继承关系和使用。
"""

from __future__ import annotations

import pytest
from expiredis import exceptions


class TestExceptionHierarchy:
    """测试异常继承关系"""

    def test_base_error(self) -> None:
        assert issubclass(exceptions.ExpiredisError, Exception)

    def test_all_exceptions_inherit_base(self) -> None:
        exception_classes = [
            exceptions.ConfigError,
            exceptions.StoreError,
            exceptions.StoreConnectionError,
            exceptions.StoreCommandError,
            exceptions.ScanParseError,
            exceptions.StatsError,
        ]

        for exc_class in exception_classes:
            assert issubclass(exc_class, exceptions.ExpiredisError)

    def test_store_errors(self) -> None:
        """扫描器与执行器只捕获 StoreError"""
        assert issubclass(exceptions.StoreConnectionError, exceptions.StoreError)
        assert issubclass(exceptions.StoreCommandError, exceptions.StoreError)
        assert issubclass(exceptions.ScanParseError, exceptions.StoreCommandError)

    def test_chaining(self) -> None:
        with pytest.raises(exceptions.StoreCommandError) as info:
            try:
                raise ConnectionResetError("reset")
            except ConnectionResetError as e:
                raise exceptions.StoreCommandError("Redis TTL 失败") from e

        assert isinstance(info.value.__cause__, ConnectionResetError)
