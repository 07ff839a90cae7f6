"""索引管理器数据模型定义模块."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# 索引状态
STATUS_OPEN = "open"


class SettingAction(Enum):
    """索引配置更新动作.

    配置更新采用三态语义：键不存在表示不修改，键对应普通值表示设置，
    键对应 CLEAR 表示清除该配置项。

    Attributes:
        CLEAR: 清除配置项，提交给 ES 时转换为 null
    """

    CLEAR = "clear"


CLEAR = SettingAction.CLEAR

# 扁平化的索引配置，如 {"index.codec": "best_compression"}
FlatSettings = dict[str, Any]

# 配置更新，值可以是普通值或 CLEAR
SettingsUpdate = Mapping[str, Any]


def _to_int(value: Any) -> int:
    # _cat 接口以字符串返回数值，已关闭索引的段数为 null
    if value is None or value == "":
        return 0
    return int(value)


@dataclass(frozen=True)
class ElasticsearchIndex:
    """索引快照.

    某一时刻从集群查询得到的只读视图，需要最新状态时应重新查询。

    Attributes:
        index: 索引名称
        open: 是否处于打开状态
        merged: 是否已完全合并（主分片数 >= 主分片段数）
    """

    index: str
    open: bool = False
    merged: bool = False

    @classmethod
    def from_cat_row(cls, row: Mapping[str, Any]) -> "ElasticsearchIndex":
        """从 _cat/indices 的一行结果构建."""
        return cls(
            index=row.get("index", ""),
            open=row.get("status") == STATUS_OPEN,
            merged=_to_int(row.get("pri")) >= _to_int(row.get("pri.segments.count")),
        )


@dataclass(frozen=True)
class ElasticsearchRecovery:
    """分片恢复快照，仅用于等待过程中的进度输出.

    Attributes:
        index: 索引名称
        shard: 分片编号
        bytes_percent: 已传输字节百分比，如 "45.2%"
    """

    index: str
    shard: str
    bytes_percent: str

    @classmethod
    def from_cat_row(cls, row: Mapping[str, Any]) -> "ElasticsearchRecovery":
        """从 _cat/recovery 的一行结果构建."""
        return cls(
            index=str(row.get("index", "")),
            shard=str(row.get("shard", "")),
            bytes_percent=str(row.get("bytes_percent", "")),
        )

    def __str__(self) -> str:
        return f"{self.index}#{self.shard} ({self.bytes_percent})"
