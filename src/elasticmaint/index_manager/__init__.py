"""索引管理器模块.

该模块提供索引维护所需的集群操作，包括：
- 列出索引及其合并状态
- 打开、关闭、删除索引
- 读取和更新扁平化的索引配置（支持清除配置项）
- 最佳压缩、HDD 分配、只读合并等组合操作
- 等待集群分片恢复完成

示例用法:
    >>> from elasticmaint.index_manager import ClusterOperations
    >>> from elasticmaint.tasks import TaskContext, run_task
    >>> ops = ClusterOperations.from_client(es_client)
    >>> ctx = TaskContext(timeout=3600)
    >>> run_task(ops.merge_index("nginx-2020-01-01"), ctx)
    >>> run_task(ops.wait_recoveries(), ctx)
"""

from .exceptions import (
    ClusterTransportError,
    IndexManagerError,
    IndexNotFoundError,
    SettingsNotFoundError,
)
from .models import (
    CLEAR,
    ElasticsearchIndex,
    ElasticsearchRecovery,
    FlatSettings,
    SettingAction,
    SettingsUpdate,
)
from .tool import (
    CODEC_BEST_COMPRESSION,
    DISKTYPE_HDD,
    SETTING_BLOCKS_WRITE,
    SETTING_CODEC,
    SETTING_EXCLUDE_DISKTYPE,
    SETTING_REQUIRE_DISKTYPE,
    ClusterOperations,
)
from .transport import ClusterTransport, ElasticsearchTransport
from .waiter import DEFAULT_POLL_INTERVAL, RecoveryWaiter

__all__ = [
    # 核心类
    "ClusterOperations",
    "RecoveryWaiter",
    "ClusterTransport",
    "ElasticsearchTransport",
    # 数据模型
    "ElasticsearchIndex",
    "ElasticsearchRecovery",
    "SettingAction",
    "CLEAR",
    # 类型定义
    "FlatSettings",
    "SettingsUpdate",
    # 常量
    "CODEC_BEST_COMPRESSION",
    "DISKTYPE_HDD",
    "SETTING_CODEC",
    "SETTING_BLOCKS_WRITE",
    "SETTING_EXCLUDE_DISKTYPE",
    "SETTING_REQUIRE_DISKTYPE",
    "DEFAULT_POLL_INTERVAL",
    # 异常类
    "IndexManagerError",
    "IndexNotFoundError",
    "SettingsNotFoundError",
    "ClusterTransportError",
]
