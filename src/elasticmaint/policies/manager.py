"""索引维护执行模块.

将维护计划转换为任务并执行。基于 ClusterOperations 已有的操作进行组合编排，
不直接操作 Elasticsearch 客户端。
"""

import logging

from ..index_manager import ClusterOperations, ElasticsearchIndex, RecoveryWaiter
from ..rules import RuleFormatError
from ..tasks import (
    LeafTask,
    SerialTask,
    TaskCancelledError,
    TaskContext,
    run_task,
    serial,
    task,
)
from .exceptions import PolicyError
from .models import Archiver, MaintenancePlan, Transition
from .planner import MaintenancePlanner

logger = logging.getLogger(__name__)


class MaintenanceExecutor:
    """索引维护执行器.

    每个阶段在执行前都会重新查询集群状态，已处于目标状态时跳过。
    可能触发分片迁移的操作之后会等待集群恢复完成。

    Args:
        operations: ClusterOperations 实例
        waiter: 分片恢复等待器，默认基于 operations 的通信实现创建
        archiver: 对象存储归档实现，为 None 时跳过 MOVE 阶段

    Examples:
        >>> executor = MaintenanceExecutor(ClusterOperations.from_client(es_client))
        >>> results = executor.run_once(TaskContext(), planner)
    """

    def __init__(
        self,
        operations: ClusterOperations,
        waiter: RecoveryWaiter | None = None,
        archiver: Archiver | None = None,
    ) -> None:
        self.operations = operations
        self.waiter = waiter or RecoveryWaiter(operations.transport)
        self.archiver = archiver
        logger.info("初始化索引维护执行器")

    def _warm(self, snapshot: ElasticsearchIndex) -> LeafTask:
        index = snapshot.index
        ops = self.operations

        def _warm_index(ctx: TaskContext) -> None:
            recompressed = False
            if not run_task(ops.check_best_compression(index), ctx):
                run_task(ops.set_best_compression(index), ctx)
                self.waiter.wait(ctx)
                recompressed = True
            # 修改 codec 后需要重新合并，段才会以新的 codec 写入
            if recompressed or not run_task(ops.check_merged(index), ctx):
                run_task(ops.merge_index(index), ctx)

        return task(_warm_index, f"warm[{index}]")

    def _move(self, snapshot: ElasticsearchIndex) -> LeafTask:
        index = snapshot.index

        def _move_index(ctx: TaskContext) -> None:
            if self.archiver is None:
                logger.warning(f"未配置归档实现，跳过索引 '{index}' 的归档")
                return
            if self.archiver.is_archived(ctx, index):
                return
            self.archiver.archive(ctx, index)
            logger.info(f"索引 '{index}' 归档成功")

        return task(_move_index, f"move[{index}]")

    def _cold(self, snapshot: ElasticsearchIndex) -> LeafTask:
        index = snapshot.index
        ops = self.operations

        def _cold_index(ctx: TaskContext) -> None:
            if run_task(ops.check_routing_hdd(index), ctx):
                return
            run_task(ops.set_routing_hdd(index), ctx)
            self.waiter.wait(ctx)

        return task(_cold_index, f"cold[{index}]")

    def _delete(self, snapshot: ElasticsearchIndex) -> LeafTask:
        return self.operations.delete_index(snapshot.index)

    def build_task(self, plan: MaintenancePlan) -> SerialTask:
        """将维护计划转换为串行任务.

        Raises:
            PolicyError: 计划包含不支持的阶段时抛出
        """
        steps = []
        for transition in plan.transitions:
            if transition is Transition.WARM:
                steps.append(self._warm(plan.index))
            elif transition is Transition.MOVE:
                steps.append(self._move(plan.index))
            elif transition is Transition.COLD:
                steps.append(self._cold(plan.index))
            elif transition is Transition.DELETE:
                steps.append(self._delete(plan.index))
            else:
                raise PolicyError(f"不支持的阶段: {transition!r}")
        return serial(*steps, name=f"maintain[{plan.index.index}]")

    def execute(self, plan: MaintenancePlan, ctx: TaskContext) -> None:
        """执行单个索引的维护计划."""
        if plan.is_empty:
            return
        names = ", ".join(t.value for t in plan.transitions)
        logger.info(
            f"索引 '{plan.index.index}' 已 {plan.age_days} 天，执行阶段: {names}"
        )
        run_task(self.build_task(plan), ctx)

    def run_once(
        self, ctx: TaskContext, planner: MaintenancePlanner
    ) -> dict[str, Exception | None]:
        """对集群中所有索引执行一轮维护.

        单个索引失败只记录日志并继续处理下一个索引；上下文取消时立即停止。

        Args:
            ctx: 任务上下文
            planner: 维护计划器

        Returns:
            字典，键为执行了维护的索引名称，值为 None（成功）或异常

        Raises:
            TaskCancelledError: 上下文取消或超时时抛出
        """
        results: dict[str, Exception | None] = {}
        indices = run_task(self.operations.list_indices(), ctx)
        logger.info(f"共发现 {len(indices)} 个索引")

        for snapshot in indices:
            try:
                plan = planner.plan(snapshot)
            except RuleFormatError as e:
                logger.error(f"索引 '{snapshot.index}' 规则解析失败: {str(e)}")
                results[snapshot.index] = e
                continue
            if plan.is_empty:
                continue

            try:
                self.execute(plan, ctx)
            except TaskCancelledError:
                raise
            except Exception as e:
                # 补偿任务失败时取消错误会被包装在 FailSafeError 中
                if ctx.done:
                    raise ctx.error() from e
                logger.error(f"索引 '{snapshot.index}' 维护失败: {str(e)}")
                results[snapshot.index] = e
                continue
            results[snapshot.index] = None

        return results
