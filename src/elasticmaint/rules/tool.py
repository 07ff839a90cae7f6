"""索引规则解析核心工具模块."""

import logging

from .exceptions import RuleFormatError
from .models import IgnoreSet, PrefixMatchStrategy, RuleResolution, RuleTable
from .utils import parse_rule

logger = logging.getLogger(__name__)

# 以 . 开头的索引为系统索引，一律忽略
SYSTEM_INDEX_PREFIX = "."


def _match_longest(index: str, rules: RuleTable) -> str | None:
    best: str | None = None
    for prefix in rules:
        if not index.startswith(prefix):
            continue
        # 严格大于，长度相同时保留先定义的前缀
        if best is None or len(prefix) > len(best):
            best = prefix
    return best


def _match_reverse_lexicographic(index: str, rules: RuleTable) -> str | None:
    for prefix in sorted(rules, reverse=True):
        if index.startswith(prefix):
            return prefix
    return None


_MATCHERS = {
    PrefixMatchStrategy.LONGEST: _match_longest,
    PrefixMatchStrategy.REVERSE_LEXICOGRAPHIC: _match_reverse_lexicographic,
}


def is_ignored(index: str, ignores: IgnoreSet) -> bool:
    """判断索引是否应被忽略.

    Args:
        index: 索引名称
        ignores: 忽略子串列表

    Returns:
        系统索引或包含任一忽略子串时返回 True
    """
    if index.startswith(SYSTEM_INDEX_PREFIX):
        return True
    return any(s in index for s in ignores)


def resolve(
    index: str,
    ignores: IgnoreSet,
    rules: RuleTable,
    strategy: PrefixMatchStrategy = PrefixMatchStrategy.LONGEST,
) -> RuleResolution:
    """为索引查找适用的维护规则.

    Args:
        index: 索引名称
        ignores: 忽略子串列表
        rules: 规则表，前缀 -> 规则字符串
        strategy: 前缀匹配策略，默认最长前缀优先

    Returns:
        RuleResolution。被忽略时 ignored 为 True；未命中任何前缀时返回全 0 规则

    Raises:
        RuleFormatError: 命中的规则字符串格式错误时抛出

    Examples:
        >>> rules = {"info": "1,2,3,4", "info-prod": "5,6,7,8"}
        >>> resolve("info-prod-2020-01-01", [], rules).prefix
        'info-prod'
    """
    if is_ignored(index, ignores):
        logger.debug(f"忽略索引 '{index}'")
        return RuleResolution(ignored=True)

    prefix = _MATCHERS[strategy](index, rules)
    if prefix is None:
        logger.debug(f"索引 '{index}' 未匹配任何规则")
        return RuleResolution()

    try:
        rule = parse_rule(rules[prefix])
    except RuleFormatError as e:
        raise RuleFormatError(f"规则 '{prefix}' 格式错误: {str(e)}") from e

    logger.debug(f"索引 '{index}' 匹配规则 '{prefix}': {rule}")
    return RuleResolution(rule=rule, prefix=prefix)


class RuleResolver:
    """索引规则解析器.

    在配置加载后构建一次，运行期间只读。

    Args:
        ignores: 忽略子串列表
        rules: 规则表，前缀 -> 规则字符串
        strategy: 前缀匹配策略，默认最长前缀优先

    Examples:
        >>> resolver = RuleResolver(["-test-"], {"nginx": "3,7,14,30"})
        >>> resolver.resolve("nginx-2020-01-01").rule.delete
        30
    """

    def __init__(
        self,
        ignores: IgnoreSet,
        rules: RuleTable,
        strategy: PrefixMatchStrategy = PrefixMatchStrategy.LONGEST,
    ) -> None:
        self.ignores = tuple(ignores)
        self.rules = dict(rules)
        self.strategy = strategy

    def resolve(self, index: str) -> RuleResolution:
        """为索引查找适用的维护规则，见 resolve()."""
        return resolve(index, self.ignores, self.rules, self.strategy)
