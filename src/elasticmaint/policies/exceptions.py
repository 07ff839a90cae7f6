"""索引维护策略异常定义模块."""

from ..exceptions import EsMaintError


class PolicyError(EsMaintError):
    """策略基础异常类.

    当维护计划包含不支持的阶段等无法执行的情况时抛出。
    """

    pass
