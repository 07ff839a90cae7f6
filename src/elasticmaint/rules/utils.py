"""索引规则工具函数模块.

提供索引名日期后缀解析和规则字符串解析功能。
"""

import re
from datetime import UTC, datetime

from .exceptions import RuleFormatError
from .models import Rule

# 索引名日期后缀格式，固定宽度 10 个字符
INDEX_DATE_SUFFIX_FORMAT = "%Y-%m-%d"
INDEX_DATE_SUFFIX_WIDTH = 10

# 严格匹配补零的日期，strptime 本身会接受 "2020-2-02" 这类写法
_DATE_SUFFIX_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

# 十进制有符号整数
_INT_PATTERN = re.compile(r"^[+-]?[0-9]+$")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# 规则中表示“不生效”的占位符
RULE_PLACEHOLDER = "-"
RULE_FIELD_COUNT = 4


def extract_date(index: str) -> tuple[datetime | None, bool]:
    """从索引名末尾解析日期.

    Args:
        index: 索引名称，如 "nginx-access-2020-02-02"

    Returns:
        (日期, 是否成功)。日期为 UTC 零点；解析失败时返回 (None, False)

    Examples:
        >>> extract_date("hello-2020-02-02")
        (datetime.datetime(2020, 2, 2, 0, 0, tzinfo=datetime.timezone.utc), True)
        >>> extract_date("hello-2020-02-2")
        (None, False)
    """
    if len(index) < INDEX_DATE_SUFFIX_WIDTH:
        return None, False

    suffix = index[-INDEX_DATE_SUFFIX_WIDTH:]
    if not _DATE_SUFFIX_PATTERN.match(suffix):
        return None, False

    try:
        date = datetime.strptime(suffix, INDEX_DATE_SUFFIX_FORMAT)
    except ValueError:
        return None, False
    return date.replace(tzinfo=UTC), True


def _parse_rule_field(value: str) -> int:
    value = value.strip()
    if value == RULE_PLACEHOLDER:
        return 0
    if not _INT_PATTERN.match(value):
        raise RuleFormatError(f"规则字段不是合法整数: {value!r}")
    number = int(value)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise RuleFormatError(f"规则字段超出范围: {value!r}")
    return number


def parse_rule(text: str) -> Rule:
    """解析规则字符串.

    规则格式为 "warm,move,cold,delete"，每个字段为整数或 "-"，
    字段两端空白会被忽略。

    Args:
        text: 规则字符串

    Returns:
        解析后的 Rule

    Raises:
        RuleFormatError: 字段数量不为 4 或字段不合法时抛出

    Examples:
        >>> parse_rule("5, 8, -, 10")
        Rule(warm=5, move=8, cold=0, delete=10)
    """
    fields = text.split(",")
    if len(fields) != RULE_FIELD_COUNT:
        raise RuleFormatError(
            f"规则格式错误: {text!r}，应为 {RULE_FIELD_COUNT} 个以逗号分隔的字段"
        )
    warm, move, cold, delete = (_parse_rule_field(f) for f in fields)
    return Rule(warm=warm, move=move, cold=cold, delete=delete)
