"""任务编排模块.

提供可取消的任务上下文，以及叶子任务、串行任务和带补偿任务三种组合方式。

示例用法:
    >>> from elasticmaint.tasks import TaskContext, run_task, serial, task
    >>> chain = serial(task(step_one), task(step_two))
    >>> run_task(chain, TaskContext(timeout=60))
"""

from .exceptions import (
    FailSafeError,
    TaskCancelledError,
    TaskDeadlineExceededError,
    TaskError,
)
from .models import FailSafeTask, LeafTask, SerialTask, Task, TaskContext
from .tool import run_task, serial, serial_fail_safe, task

__all__ = [
    # 上下文
    "TaskContext",
    # 任务模型
    "Task",
    "LeafTask",
    "SerialTask",
    "FailSafeTask",
    # 构建与执行
    "task",
    "serial",
    "serial_fail_safe",
    "run_task",
    # 异常类
    "TaskError",
    "TaskCancelledError",
    "TaskDeadlineExceededError",
    "FailSafeError",
]
