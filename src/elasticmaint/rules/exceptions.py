"""索引规则异常定义模块."""

from ..exceptions import EsMaintError


class RuleError(EsMaintError):
    """索引规则基础异常类."""

    pass


class RuleFormatError(RuleError, ValueError):
    """规则格式异常.

    当规则字符串字段数量不为 4，或某个字段既不是 "-" 也不是合法整数时抛出。
    """

    pass
