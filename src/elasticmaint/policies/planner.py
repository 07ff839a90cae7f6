"""索引维护计划模块.

根据索引名日期后缀和匹配到的规则，计算索引需要执行的生命周期阶段。
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from ..index_manager import ElasticsearchIndex
from ..rules import Rule, RuleResolver, extract_date
from .models import MaintenancePlan, SkipReason, Transition

logger = logging.getLogger(__name__)


def due_transitions(
    rule: Rule, age_days: int, is_open: bool = True
) -> tuple[Transition, ...]:
    """计算到期的阶段.

    阈值大于 0 且索引天数不小于阈值时阶段到期。删除到期时只执行删除；
    已关闭的索引只可能被删除。

    Args:
        rule: 索引规则
        age_days: 索引天数
        is_open: 索引是否处于打开状态

    Returns:
        按 warm、move、cold 顺序排列的到期阶段，或只包含 DELETE

    Examples:
        >>> due_transitions(Rule(warm=3, move=7, cold=14, delete=30), 10)
        (<Transition.WARM: 'warm'>, <Transition.MOVE: 'move'>)
    """

    def _due(threshold: int) -> bool:
        return threshold > 0 and age_days >= threshold

    if _due(rule.delete):
        return (Transition.DELETE,)
    if not is_open:
        return ()

    transitions = []
    if _due(rule.warm):
        transitions.append(Transition.WARM)
    if _due(rule.move):
        transitions.append(Transition.MOVE)
    if _due(rule.cold):
        transitions.append(Transition.COLD)
    return tuple(transitions)


class MaintenancePlanner:
    """索引维护计划器.

    Args:
        resolver: 规则解析器
        now_func: 获取当前时间的函数，主要用于测试，默认 datetime.now(UTC)

    Examples:
        >>> planner = MaintenancePlanner(config.rule_resolver())
        >>> plan = planner.plan(ElasticsearchIndex("nginx-2020-01-01", open=True))
        >>> plan.transitions
    """

    def __init__(
        self,
        resolver: RuleResolver,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        self.resolver = resolver
        self._now_func = now_func

    def today(self) -> datetime:
        """返回当天 UTC 零点."""
        now = self._now_func() if self._now_func else datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)

    def plan(self, index: ElasticsearchIndex) -> MaintenancePlan:
        """为索引生成维护计划.

        Args:
            index: 索引快照

        Returns:
            MaintenancePlan

        Raises:
            RuleFormatError: 匹配到的规则格式错误时抛出
        """
        resolution = self.resolver.resolve(index.index)
        if resolution.ignored:
            return MaintenancePlan(index=index, skip_reason=SkipReason.IGNORED)

        date, ok = extract_date(index.index)
        if not ok:
            logger.debug(f"索引 '{index.index}' 没有日期后缀")
            return MaintenancePlan(
                index=index, rule=resolution.rule, skip_reason=SkipReason.NO_DATE
            )

        age_days = (self.today() - date).days
        if resolution.rule.is_empty:
            return MaintenancePlan(
                index=index,
                rule=resolution.rule,
                age_days=age_days,
                skip_reason=SkipReason.NO_RULE,
            )

        transitions = due_transitions(resolution.rule, age_days, index.open)
        return MaintenancePlan(
            index=index,
            rule=resolution.rule,
            age_days=age_days,
            transitions=transitions,
            skip_reason=None if transitions else SkipReason.NOT_DUE,
        )
