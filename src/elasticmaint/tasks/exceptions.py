"""任务编排异常定义模块."""

from ..exceptions import EsMaintError


class TaskError(EsMaintError):
    """任务基础异常类."""

    pass


class TaskCancelledError(TaskError):
    """任务取消异常.

    当任务绑定的上下文被取消时抛出，与集群通信失败严格区分。
    """

    pass


class TaskDeadlineExceededError(TaskCancelledError):
    """任务超时异常.

    当任务绑定的上下文超过截止时间时抛出。
    """

    pass


class FailSafeError(TaskError):
    """主任务与补偿任务均失败时的聚合异常.

    Attributes:
        primary_error: 主任务链的异常
        compensation_error: 补偿任务的异常
    """

    def __init__(
        self, primary_error: Exception, compensation_error: Exception
    ) -> None:
        self.primary_error = primary_error
        self.compensation_error = compensation_error
        super().__init__(
            f"{primary_error}; 补偿任务同样失败: {compensation_error}"
        )

    @property
    def errors(self) -> tuple[Exception, Exception]:
        """全部底层异常，主任务异常在前."""
        return (self.primary_error, self.compensation_error)
