"""ES Maint - Elasticsearch 索引生命周期维护工具包.

根据索引名日期后缀和按前缀配置的规则，对索引执行温、归档、冷、删除等维护操作。

主要功能:
    - RuleResolver: 按最长前缀为索引匹配维护规则
    - ClusterOperations: 集群维护操作（合并、最佳压缩、HDD 分配、删除等）
    - RecoveryWaiter: 等待集群分片恢复完成
    - MaintenancePlanner / MaintenanceExecutor: 生成并执行维护计划

使用示例:
    from elasticmaint import (
        ClusterOperations,
        MaintenanceExecutor,
        MaintenancePlanner,
        TaskContext,
        load_config,
    )

    config = load_config("/etc/esmaint.yml")
    ops = ClusterOperations.from_client(Elasticsearch(config.elasticsearch.url))
    planner = MaintenancePlanner(config.rule_resolver())
    MaintenanceExecutor(ops).run_once(TaskContext(), planner)
"""

__version__ = "0.1.0"

# 导出配置
from elasticmaint.config import ConfigError, MaintConfig, load_config

# 导出异常
from elasticmaint.exceptions import EsMaintError

# 导出集群操作
from elasticmaint.index_manager import (
    CLEAR,
    ClusterOperations,
    ClusterTransport,
    ElasticsearchIndex,
    ElasticsearchRecovery,
    ElasticsearchTransport,
    RecoveryWaiter,
)

# 导出维护策略
from elasticmaint.policies import (
    MaintenanceExecutor,
    MaintenancePlan,
    MaintenancePlanner,
    Transition,
)

# 导出规则
from elasticmaint.rules import (
    PrefixMatchStrategy,
    Rule,
    RuleFormatError,
    RuleResolution,
    RuleResolver,
    extract_date,
    parse_rule,
    resolve,
)

# 导出任务编排
from elasticmaint.tasks import (
    FailSafeError,
    TaskCancelledError,
    TaskContext,
    run_task,
    serial,
    serial_fail_safe,
    task,
)

__all__ = [
    # 版本
    "__version__",
    # 规则
    "Rule",
    "RuleResolution",
    "RuleResolver",
    "PrefixMatchStrategy",
    "resolve",
    "parse_rule",
    "extract_date",
    # 任务编排
    "TaskContext",
    "task",
    "serial",
    "serial_fail_safe",
    "run_task",
    # 集群操作
    "ClusterOperations",
    "ClusterTransport",
    "ElasticsearchTransport",
    "ElasticsearchIndex",
    "ElasticsearchRecovery",
    "RecoveryWaiter",
    "CLEAR",
    # 维护策略
    "MaintenancePlanner",
    "MaintenanceExecutor",
    "MaintenancePlan",
    "Transition",
    # 配置
    "MaintConfig",
    "load_config",
    # 异常
    "EsMaintError",
    "RuleFormatError",
    "FailSafeError",
    "TaskCancelledError",
    "ConfigError",
]
