"""索引规则模块.

提供索引名日期解析和按前缀匹配维护规则的功能。

示例用法:
    >>> from elasticmaint.rules import RuleResolver, extract_date
    >>> resolver = RuleResolver([".monitoring"], {"nginx": "3, 7, -, 30"})
    >>> resolution = resolver.resolve("nginx-2020-01-01")
    >>> date, ok = extract_date("nginx-2020-01-01")
"""

from .exceptions import RuleError, RuleFormatError
from .models import (
    IgnoreSet,
    PrefixMatchStrategy,
    Rule,
    RuleResolution,
    RuleTable,
)
from .tool import RuleResolver, is_ignored, resolve
from .utils import extract_date, parse_rule

__all__ = [
    # 核心类
    "RuleResolver",
    # 数据模型
    "Rule",
    "RuleResolution",
    "PrefixMatchStrategy",
    # 类型定义
    "RuleTable",
    "IgnoreSet",
    # 异常类
    "RuleError",
    "RuleFormatError",
    # 工具函数
    "resolve",
    "is_ignored",
    "extract_date",
    "parse_rule",
]
