"""任务编排数据模型定义模块."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .exceptions import TaskCancelledError, TaskDeadlineExceededError


class TaskContext:
    """任务上下文，携带取消信号和截止时间.

    一个上下文绑定一次执行，可以跨线程取消。所有阻塞点（集群请求、
    轮询等待）都应在开始前调用 check()，并通过 wait() 进行可中断的等待。

    Args:
        timeout: 超时时间（秒），默认 None 表示不设截止时间

    Examples:
        >>> ctx = TaskContext(timeout=600)
        >>> ctx.check()
        >>> ctx.cancel()
        >>> ctx.cancelled
        True
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._reason = ""
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self, reason: str = "任务已取消") -> None:
        """取消上下文，唤醒所有等待中的 wait()."""
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """是否已被取消."""
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        """是否已超过截止时间."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        """是否已取消或超时."""
        return self.cancelled or self.expired

    def remaining(self) -> float | None:
        """距离截止时间的剩余秒数，未设截止时间时返回 None."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def error(self) -> TaskCancelledError | None:
        """返回当前的取消原因，未取消时返回 None."""
        if self.cancelled:
            return TaskCancelledError(self._reason)
        if self.expired:
            return TaskDeadlineExceededError("任务已超时")
        return None

    def check(self) -> None:
        """检查上下文状态.

        Raises:
            TaskCancelledError: 上下文已取消时抛出
            TaskDeadlineExceededError: 上下文已超时时抛出
        """
        err = self.error()
        if err is not None:
            raise err

    def wait(self, seconds: float) -> bool:
        """可中断地等待指定秒数.

        Args:
            seconds: 等待时长

        Returns:
            等待结束时上下文是否已取消或超时
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
        return self.done

    def shielded(self, timeout: float | None = None) -> "TaskContext":
        """创建不受当前上下文取消影响的新上下文.

        用于补偿任务：即使主任务因取消而失败，补偿任务也必须执行。

        Args:
            timeout: 新上下文的超时时间（秒），默认不设截止时间
        """
        return TaskContext(timeout=timeout)


@dataclass(frozen=True)
class LeafTask:
    """叶子任务，包装一次具体的操作.

    Attributes:
        func: 接收 TaskContext 的可调用对象，返回值即任务结果
        name: 任务名称，用于日志
    """

    func: Callable[[TaskContext], Any]
    name: str = ""


@dataclass(frozen=True)
class SerialTask:
    """串行任务，依次执行子任务，遇到第一个失败即停止.

    Attributes:
        tasks: 子任务列表
        name: 任务名称，用于日志
    """

    tasks: tuple["Task", ...] = ()
    name: str = ""


@dataclass(frozen=True)
class FailSafeTask:
    """带补偿的任务.

    无论主任务成功与否，主任务结束后总会执行补偿任务。

    Attributes:
        primary: 主任务
        compensating: 补偿任务
        name: 任务名称，用于日志
    """

    primary: "Task"
    compensating: "Task"
    name: str = ""


# 所有任务类型的联合类型
Task = LeafTask | SerialTask | FailSafeTask
