"""集群分片恢复等待模块."""

import logging

from ..tasks import LeafTask, TaskContext, task
from .models import ElasticsearchRecovery
from .transport import ClusterTransport

logger = logging.getLogger(__name__)

# 轮询间隔（秒）
DEFAULT_POLL_INTERVAL = 5.0


class RecoveryWaiter:
    """等待集群不再有进行中的分片恢复.

    在可能触发分片迁移的操作（重新打开索引、修改分配规则）之后调用，
    避免在集群仍在迁移数据时继续处理下一个索引。

    Args:
        transport: 集群通信实现
        interval: 轮询间隔（秒），默认 5 秒

    Examples:
        >>> waiter = RecoveryWaiter(transport)
        >>> waiter.wait(TaskContext(timeout=3600))
    """

    def __init__(
        self, transport: ClusterTransport, interval: float = DEFAULT_POLL_INTERVAL
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval 必须大于 0，当前值: {interval}")
        self.transport = transport
        self.interval = interval

    def poll(self, ctx: TaskContext) -> list[ElasticsearchRecovery]:
        """查询一次进行中的分片恢复."""
        rows = self.transport.list_active_recoveries(ctx)
        return [ElasticsearchRecovery.from_cat_row(row) for row in rows]

    def wait(self, ctx: TaskContext) -> None:
        """阻塞直到没有进行中的分片恢复.

        Raises:
            TaskCancelledError: 上下文取消或超时时抛出
            ClusterTransportError: 查询失败时抛出
        """
        while True:
            recoveries = self.poll(ctx)
            if not recoveries:
                return
            logger.info(
                f"正在等待集群恢复: {'; '.join(str(r) for r in recoveries)}"
            )
            if ctx.wait(self.interval):
                ctx.check()

    def task(self) -> LeafTask:
        """返回执行 wait() 的任务."""
        return task(self.wait, "wait_recoveries")
