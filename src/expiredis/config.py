"""
配置管理模块

使用 Pydantic 进行运行配置的验证和管理,支持从配置文件、环境变量、字典加载。
配置在一次运行中不可变，构造后以参数形式传给各组件。

使用示例:
    >>> # 从字典创建
    >>> config = RunConfig(pattern="session:*", ttl_min=3600, delete=True)
    >>>
    >>> # 从 YAML 文件创建
    >>> config = RunConfig.from_file("expiredis.yaml")
    >>>
    >>> # 从环境变量创建 (EXPIREDIS_PATTERN、EXPIREDIS_DRY_RUN ...)
    >>> config = RunConfig.from_env()
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError
from .types import KeyAction

ENV_PREFIX = "EXPIREDIS_"
"""环境变量前缀"""

FIELD_ALIASES = {
    "set_ttl": "ttl_set",
    "subtract_ttl": "ttl_subtract",
}
"""与命令行参数同名的键 -> 字段名（--set-ttl、--subtract-ttl）"""


class RunConfig(BaseModel):
    """
    运行配置

    属性:
        url: 存储连接地址
        pattern: 要处理的键模式
        limit: 最多处理的键数，负数表示不限
        count: 每批 SCAN 的键数建议值
        delay: 批次之间的等待（毫秒）
        ttl_min: 最小 TTL 阈值，-1 表示只处理未设置过期的键
        ttl_subtract: 从 TTL 中减去的秒数
        ttl_set: 要设置的 TTL 秒数
        delete: 是否删除匹配的键
        dry_run: 演练模式，不执行任何破坏性命令
        verbose: 是否输出 debug 日志
        retry_backoff: SCAN 失败后的重试等待（秒）
        stats_interval: 周期性统计日志间隔（秒）
    """

    url: str = Field(default="redis://", description="Redis 服务器地址")
    pattern: str = Field(default="*", min_length=1, description="要处理的键模式")
    limit: int = Field(default=100, description="最多处理的键数，负数不限")
    count: int = Field(default=100, ge=1, description="每批获取的键数")
    delay: int = Field(default=0, ge=0, description="批次间隔（毫秒）")
    ttl_min: int = Field(default=0, description="最小 TTL，-1 表示匹配未设置 TTL 的键")
    ttl_subtract: int = Field(default=0, description="从匹配键的 TTL 中减去的秒数")
    ttl_set: int = Field(default=0, description="为匹配键设置的 TTL 秒数")
    delete: bool = Field(default=False, description="删除匹配的键")
    dry_run: bool = Field(default=False, description="演练模式，跳过破坏性命令")
    verbose: bool = Field(default=False, description="debug 日志")
    retry_backoff: float = Field(default=1.0, ge=0, description="SCAN 失败后的等待（秒）")
    stats_interval: float = Field(default=1.0, gt=0, description="统计日志间隔（秒）")

    # ========== Pydantic 配置 ==========

    model_config = {
        "frozen": True,
        "extra": "forbid",  # 禁止额外字段
        "str_strip_whitespace": True,
    }

    # ========== 派生属性 ==========

    @property
    def fetch_ttl_required(self) -> bool:
        """只有设置了最小 TTL 或 TTL 减量时才需要读取 TTL"""
        return self.ttl_min != 0 or self.ttl_subtract != 0

    @property
    def action(self) -> KeyAction | None:
        """按优先级返回本次运行实际生效的动作"""
        if self.delete:
            return KeyAction.DELETE
        if self.ttl_subtract > 0:
            return KeyAction.SUBTRACT_TTL
        if self.ttl_set > 0:
            return KeyAction.SET_TTL
        return None

    @property
    def unbounded(self) -> bool:
        return self.limit < 0

    # ========== 工厂方法 ==========

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """
        从字典创建配置

        键名中的 ``-`` 视同 ``_``，``set-ttl`` / ``subtract-ttl`` 等
        命令行写法映射到对应字段。

        Raises:
            ConfigError: 字段校验失败
        """
        try:
            return cls(**cls._normalize_keys(data))
        except ValidationError as e:
            msg = f"配置校验失败: {e}"
            raise ConfigError(msg) from e

    @staticmethod
    def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            normalized[FIELD_ALIASES.get(name, name)] = value
        return normalized

    @classmethod
    def load(
        cls,
        file_path: str | Path | None = None,
        *,
        env_prefix: str = ENV_PREFIX,
        overrides: dict[str, Any] | None = None,
    ) -> RunConfig:
        """
        合并多个来源创建配置

        优先级: 显式参数 > 环境变量 > 配置文件 > 默认值

        Args:
            file_path: 配置文件路径（可选）
            env_prefix: 环境变量前缀
            overrides: 显式指定的字段，值为 None 的项被忽略

        Returns:
            RunConfig 实例
        """
        data: dict[str, Any] = {}
        if file_path is not None:
            data.update(cls._normalize_keys(cls.read_file(file_path)))
        data.update(cls.read_env(env_prefix))
        explicit = {k: v for k, v in (overrides or {}).items() if v is not None}
        data.update(cls._normalize_keys(explicit))
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: str | Path) -> RunConfig:
        """
        从配置文件创建配置

        支持的格式:
        - YAML (.yaml, .yml)
        - TOML (.toml)
        - JSON (.json)

        Raises:
            ConfigError: 文件读取、解析或校验失败

        示例:
            >>> config = RunConfig.from_file("config/expiredis.toml")
        """
        return cls.from_dict(cls.read_file(file_path))

    @classmethod
    def read_file(cls, file_path: str | Path) -> dict[str, Any]:
        """读取配置文件内容为字典"""
        file_path = Path(file_path)

        if not file_path.exists():
            msg = f"配置文件不存在: {file_path}"
            raise ConfigError(msg)

        suffix = file_path.suffix.lower()

        try:
            if suffix in {".yaml", ".yml"}:
                data = cls._read_yaml(file_path)
            elif suffix == ".toml":
                data = cls._read_toml(file_path)
            elif suffix == ".json":
                data = cls._read_json(file_path)
            else:
                msg = f"不支持的配置文件格式: {suffix}"
                raise ConfigError(msg)
        except ConfigError:
            raise
        except Exception as e:
            msg = f"读取配置文件失败: {file_path}"
            raise ConfigError(msg) from e

        if not isinstance(data, dict):
            msg = f"配置文件必须是字典格式: {file_path}"
            raise ConfigError(msg)

        return data

    @staticmethod
    def _read_yaml(file_path: Path) -> Any:
        import yaml

        with file_path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    @staticmethod
    def _read_toml(file_path: Path) -> Any:
        import tomllib

        with file_path.open("rb") as f:
            return tomllib.load(f)

    @staticmethod
    def _read_json(file_path: Path) -> Any:
        import json

        with file_path.open("r", encoding="utf-8") as f:
            return json.load(f)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> RunConfig:
        """
        从环境变量创建配置

        环境变量命名规则:
        - EXPIREDIS_URL=redis://localhost:6379
        - EXPIREDIS_TTL_MIN=3600
        - EXPIREDIS_DRY_RUN=true

        示例:
            >>> import os
            >>> os.environ["EXPIREDIS_PATTERN"] = "session:*"
            >>> RunConfig.from_env().pattern
            'session:*'
        """
        return cls.from_dict(cls.read_env(prefix))

    @classmethod
    def read_env(cls, prefix: str = ENV_PREFIX) -> dict[str, Any]:
        """
        收集带前缀且对应已知字段的环境变量

        值保持字符串形式，由 Pydantic 按字段类型转换（"true"、"1"、"3600" 等）。
        EXPIREDIS_SET_TTL / EXPIREDIS_SUBTRACT_TTL 与字段名写法同时存在时以字段名为准。
        """
        data: dict[str, Any] = {}
        for alias, field_name in FIELD_ALIASES.items():
            value = os.environ.get(f"{prefix}{alias.upper()}")
            if value is not None:
                data[field_name] = value
        for field_name in cls.model_fields:
            value = os.environ.get(f"{prefix}{field_name.upper()}")
            if value is not None:
                data[field_name] = value
        return data

    def describe(self) -> str:
        """简短描述本次运行的动作"""
        action = self.action
        if action is KeyAction.DELETE:
            text = "删除匹配的键"
        elif action is KeyAction.SUBTRACT_TTL:
            text = f"TTL 减少 {self.ttl_subtract} 秒"
        elif action is KeyAction.SET_TTL:
            text = f"TTL 设为 {self.ttl_set} 秒"
        else:
            text = "仅统计"
        limit = "不限" if self.unbounded else str(self.limit)
        return f"pattern={self.pattern!r} 动作={text} 上限={limit}"
