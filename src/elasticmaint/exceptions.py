"""ES Maint 异常定义模块."""


class EsMaintError(Exception):
    """ES Maint 基础异常类.

    包内所有异常的基类。注意“索引被忽略”不是异常，
    而是通过 RuleResolution.ignored 表达。
    """

    pass
