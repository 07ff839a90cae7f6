"""任务编排核心工具模块.

任务是对一次工作的无状态描述：先构建，再绑定 TaskContext 执行。
串行任务遇到第一个失败即停止；带补偿任务保证补偿步骤一定执行，
用于“关闭 -> 修改配置 -> 重新打开”、“只读 -> 合并 -> 可写”这类
需要恢复中间状态的操作。
"""

import logging
from collections.abc import Callable
from typing import Any

from .exceptions import FailSafeError, TaskError
from .models import FailSafeTask, LeafTask, SerialTask, Task, TaskContext

logger = logging.getLogger(__name__)


def task(func: Callable[[TaskContext], Any], name: str = "") -> LeafTask:
    """构建叶子任务.

    Args:
        func: 接收 TaskContext 的可调用对象
        name: 任务名称，默认取函数名

    Returns:
        LeafTask 实例
    """
    return LeafTask(func=func, name=name or getattr(func, "__name__", "task"))


def serial(*tasks: Task, name: str = "serial") -> SerialTask:
    """构建串行任务.

    Examples:
        >>> chain = serial(close_task, set_codec_task)
    """
    return SerialTask(tasks=tuple(tasks), name=name)


def serial_fail_safe(
    primary: Task, compensating: Task, name: str = "fail_safe"
) -> FailSafeTask:
    """构建带补偿的任务.

    Args:
        primary: 主任务，通常是一个串行任务
        compensating: 补偿任务，主任务结束后总会执行

    Examples:
        >>> merge = serial_fail_safe(
        ...     serial(set_read_only_task, force_merge_task),
        ...     clear_read_only_task,
        ... )
    """
    return FailSafeTask(primary=primary, compensating=compensating, name=name)


def _run_leaf(leaf: LeafTask, ctx: TaskContext) -> Any:
    ctx.check()
    logger.debug(f"执行任务: {leaf.name}")
    return leaf.func(ctx)


def _run_serial(chain: SerialTask, ctx: TaskContext) -> list[Any]:
    results = []
    for t in chain.tasks:
        results.append(run_task(t, ctx))
    return results


def _run_fail_safe(fail_safe: FailSafeTask, ctx: TaskContext) -> Any:
    result = None
    primary_error: Exception | None = None
    try:
        result = run_task(fail_safe.primary, ctx)
    except Exception as e:
        primary_error = e
        logger.info(f"任务 '{fail_safe.name}' 失败，执行补偿任务: {str(e)}")

    # 补偿任务不受原上下文取消的影响
    try:
        run_task(fail_safe.compensating, ctx.shielded())
    except Exception as e:
        if primary_error is None:
            raise
        logger.error(
            f"任务 '{fail_safe.name}' 的补偿任务同样失败: {str(e)}"
        )
        raise FailSafeError(primary_error, e) from primary_error

    if primary_error is not None:
        raise primary_error
    return result


def run_task(t: Task, ctx: TaskContext) -> Any:
    """在上下文中执行任务.

    Args:
        t: 要执行的任务
        ctx: 任务上下文

    Returns:
        叶子任务返回函数结果；串行任务返回各子任务结果列表；
        带补偿任务返回主任务结果

    Raises:
        TaskCancelledError: 上下文取消或超时时抛出
        FailSafeError: 主任务与补偿任务均失败时抛出
        TaskError: 任务类型不受支持时抛出
        Exception: 其余异常原样向上传递
    """
    if isinstance(t, LeafTask):
        return _run_leaf(t, ctx)
    elif isinstance(t, SerialTask):
        return _run_serial(t, ctx)
    elif isinstance(t, FailSafeTask):
        return _run_fail_safe(t, ctx)
    else:
        raise TaskError(f"不支持的任务类型: {type(t).__name__}")
