"""索引维护策略数据模型定义模块."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ..index_manager import ElasticsearchIndex
from ..rules import Rule
from ..tasks import TaskContext


class Transition(Enum):
    """索引生命周期阶段.

    Attributes:
        WARM: 合并段并使用最佳压缩
        MOVE: 归档到对象存储
        COLD: 迁移到 HDD 节点
        DELETE: 删除索引
    """

    WARM = "warm"
    MOVE = "move"
    COLD = "cold"
    DELETE = "delete"


class SkipReason(Enum):
    """索引无需维护的原因."""

    IGNORED = "ignored"
    NO_DATE = "no_date"
    NO_RULE = "no_rule"
    NOT_DUE = "not_due"


@dataclass(frozen=True)
class MaintenancePlan:
    """单个索引的维护计划.

    Attributes:
        index: 规划时的索引快照
        rule: 适用的规则，被忽略或无日期时为 None
        age_days: 索引日期距今的天数，无日期时为 None
        transitions: 需要执行的阶段，按执行顺序排列
        skip_reason: 无需维护时的原因
    """

    index: ElasticsearchIndex
    rule: Rule | None = None
    age_days: int | None = None
    transitions: tuple[Transition, ...] = ()
    skip_reason: SkipReason | None = None

    @property
    def is_empty(self) -> bool:
        """是否无需执行任何阶段."""
        return not self.transitions


class Archiver(Protocol):
    """对象存储归档接口.

    具体实现（导出索引段并上传到对象存储）不在本包范围内。
    """

    def archive(self, ctx: TaskContext, index: str) -> None:
        """归档索引，失败时抛出异常."""
        ...

    def is_archived(self, ctx: TaskContext, index: str) -> bool:
        """索引是否已完成归档."""
        ...
