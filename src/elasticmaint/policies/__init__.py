"""索引维护策略模块.

根据规则为索引生成维护计划，并将计划编排为集群操作执行。

示例用法:
    >>> from elasticmaint.policies import MaintenanceExecutor, MaintenancePlanner
    >>> planner = MaintenancePlanner(config.rule_resolver())
    >>> executor = MaintenanceExecutor(ClusterOperations.from_client(es_client))
    >>> results = executor.run_once(TaskContext(timeout=6 * 3600), planner)
"""

from .exceptions import PolicyError
from .manager import MaintenanceExecutor
from .models import Archiver, MaintenancePlan, SkipReason, Transition
from .planner import MaintenancePlanner, due_transitions

__all__ = [
    # 核心类
    "MaintenancePlanner",
    "MaintenanceExecutor",
    # 数据模型
    "MaintenancePlan",
    "Transition",
    "SkipReason",
    "Archiver",
    # 异常类
    "PolicyError",
    # 工具函数
    "due_transitions",
]
