"""索引规则数据模型定义模块."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

# 规则表：索引名前缀 -> 规则字符串（"warm,move,cold,delete"）
RuleTable = Mapping[str, str]

# 忽略列表：索引名包含其中任意子串即被忽略
IgnoreSet = Sequence[str]


class PrefixMatchStrategy(Enum):
    """规则前缀匹配策略.

    Attributes:
        LONGEST: 按前缀字符长度选择最长匹配，长度相同时取先定义的前缀
        REVERSE_LEXICOGRAPHIC: 兼容旧行为，按字典序倒序排列后取第一个匹配
    """

    LONGEST = "longest"
    REVERSE_LEXICOGRAPHIC = "reverse_lexicographic"


@dataclass(frozen=True)
class Rule:
    """索引维护规则.

    四个阈值均以索引名日期后缀起算的天数计，0 表示该阶段不生效。
    各阈值相互独立，不强制要求递增。

    Attributes:
        warm: 进入温阶段（合并段 + 最佳压缩）的天数
        move: 归档到对象存储的天数
        cold: 迁移到 HDD 节点的天数
        delete: 删除索引的天数
    """

    warm: int = 0
    move: int = 0
    cold: int = 0
    delete: int = 0

    @property
    def is_empty(self) -> bool:
        """是否没有任何生效的阈值."""
        return all(v <= 0 for v in (self.warm, self.move, self.cold, self.delete))

    @property
    def is_ascending(self) -> bool:
        """生效的阈值是否按 warm、move、cold、delete 顺序递增."""
        values = [v for v in (self.warm, self.move, self.cold, self.delete) if v > 0]
        return values == sorted(values)


@dataclass(frozen=True)
class RuleResolution:
    """规则解析结果.

    Attributes:
        rule: 命中的规则，未命中任何前缀时为全 0 规则
        ignored: 索引是否被忽略（系统索引或命中忽略列表）
        prefix: 命中的规则前缀，未命中时为 None
    """

    rule: Rule = Rule()
    ignored: bool = False
    prefix: str | None = None
