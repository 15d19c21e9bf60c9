"""
存储注册表测试
"""

from __future__ import annotations

import pytest

from expiredis.stores import (
    BaseStore,
    MemoryStore,
    create_store,
    create_store_from_url,
    get_registered_stores,
    register_store,
)


class TestRegistry:
    """测试注册与创建"""

    def test_builtin_stores(self) -> None:
        assert {"memory", "redis"} <= set(get_registered_stores())

    def test_create_memory(self) -> None:
        assert isinstance(create_store("memory"), MemoryStore)

    def test_create_from_memory_url(self) -> None:
        store = create_store_from_url("memory://")
        assert isinstance(store, MemoryStore)
        assert len(store) == 0

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="未注册"):
            create_store("nope")

    def test_unknown_scheme(self) -> None:
        with pytest.raises(ValueError, match="不支持"):
            create_store_from_url("http://localhost")

    def test_empty_name(self) -> None:
        with pytest.raises(ValueError):
            register_store("  ", lambda **_: MemoryStore())

    def test_duplicate_requires_override(self) -> None:
        with pytest.raises(ValueError, match="override"):
            register_store("memory", lambda **_: MemoryStore())

    def test_custom_store_by_scheme(self) -> None:
        seeded = MemoryStore({"x": None})

        def factory(**options: object) -> BaseStore:
            return seeded

        register_store("seeded", factory, override=True)

        assert create_store_from_url("seeded://anything") is seeded
